"""
Daily log use cases - one wellness/journal record per (account, day).

The record is created lazily by the first upsert. Later upserts merge:
fields not passed are kept as stored. Defaults apply on creation only.
"""
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.application.errors import ValidationError, persistence_guard
from app.domain.daily_log import DAILY_LOG_FIELDS, DAILY_LOG_DEFAULTS, MOODS, is_valid_mood
from app.infrastructure.db.models import DailyLogModel
from app.utils.validation import parse_iso_date


class DailyLogValidationError(ValidationError):
    pass


def parse_log_day(value, field: str = "date") -> date:
    if value is None or value == "":
        raise DailyLogValidationError(f"{field} is required")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise DailyLogValidationError(f"{field} must be a YYYY-MM-DD date")


def _find_log(db: Session, account_id: int, day: date) -> DailyLogModel | None:
    return db.query(DailyLogModel).filter(
        DailyLogModel.account_id == account_id,
        DailyLogModel.date == day,
    ).first()


class GetDailyLogUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, day) -> DailyLogModel | None:
        return _find_log(self.db, account_id, parse_log_day(day))


class ListDailyLogsUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, start, end) -> list[DailyLogModel]:
        start = parse_log_day(start, "start")
        end = parse_log_day(end, "end")
        return (
            self.db.query(DailyLogModel)
            .filter(
                DailyLogModel.account_id == account_id,
                DailyLogModel.date >= start,
                DailyLogModel.date <= end,
            )
            .order_by(DailyLogModel.date.asc())
            .all()
        )


class UpsertDailyLogUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, day, **fields) -> DailyLogModel:
        day = parse_log_day(day)
        # date is the upsert key, never part of the payload
        changes = {key: fields[key] for key in DAILY_LOG_FIELDS if key in fields}

        if "mood" in changes and not is_valid_mood(changes["mood"]):
            raise DailyLogValidationError(f"Invalid mood. Use one of {' '.join(MOODS)}")
        for flag in ("exercised", "day_complete"):
            if flag in changes and changes[flag] is None:
                raise DailyLogValidationError(f"{flag} must be true or false")
        if "water_glasses" in changes and changes["water_glasses"] is None:
            raise DailyLogValidationError("water_glasses must be a number")

        with persistence_guard(self.db, "save daily log"):
            log = _find_log(self.db, account_id, day)
            if log is None:
                log = self._create(account_id, day)
            for key, value in changes.items():
                setattr(log, key, value)
        return log

    def _create(self, account_id: int, day: date) -> DailyLogModel:
        log = DailyLogModel(account_id=account_id, date=day, **DAILY_LOG_DEFAULTS)
        self.db.add(log)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost the insert race on (account_id, date): merge into the winner
            self.db.rollback()
            log = _find_log(self.db, account_id, day)
            if log is None:
                raise
        return log
