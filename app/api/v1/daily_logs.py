"""
Daily log API endpoints (journal, mood, water, exercise, sleep)
"""
from datetime import date as date_type

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.daily_logs import GetDailyLogUseCase, ListDailyLogsUseCase, UpsertDailyLogUseCase
from app.infrastructure.db.models import DailyLogModel


router = APIRouter(prefix="/api/v1/daily-logs", tags=["daily-logs"])


# === Request/Response models ===

class UpsertDailyLogRequest(BaseModel):
    date: date_type | None = None  # may also come as ?date=
    journal_entry: str | None = None
    mood: str | None = None
    water_glasses: int | None = None
    exercised: bool | None = None
    sleep_hours: float | None = None
    day_complete: bool | None = None


class DailyLogResponse(BaseModel):
    id: int
    date: date_type
    journal_entry: str | None
    mood: str | None
    water_glasses: int
    exercised: bool
    sleep_hours: float | None
    day_complete: bool


def _to_response(log: DailyLogModel) -> DailyLogResponse:
    return DailyLogResponse(
        id=log.id,
        date=log.date,
        journal_entry=log.journal_entry,
        mood=log.mood,
        water_glasses=log.water_glasses,
        exercised=log.exercised,
        sleep_hours=log.sleep_hours,
        day_complete=log.day_complete,
    )


# === Endpoints ===

@router.get("", response_model=DailyLogResponse | None)
def get_daily_log(
    request: Request,
    day: date_type | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
):
    """Log for one day, or null if nothing was recorded yet"""
    user = get_current_user(request, db)
    log = GetDailyLogUseCase(db).execute(user.id, day)
    return _to_response(log) if log else None


@router.get("/range", response_model=list[DailyLogResponse])
def list_daily_logs(
    request: Request,
    start: date_type | None = None,
    end: date_type | None = None,
    db: Session = Depends(get_db),
):
    """Logs between start and end inclusive (journal history)"""
    user = get_current_user(request, db)
    logs = ListDailyLogsUseCase(db).execute(user.id, start, end)
    return [_to_response(log) for log in logs]


@router.post("", response_model=DailyLogResponse, status_code=201)
def upsert_daily_log(
    request: Request,
    req: UpsertDailyLogRequest | None = None,
    day: date_type | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
):
    """Create or merge-update the log for a day; omitted fields are kept"""
    user = get_current_user(request, db)
    fields = req.model_dump(exclude_unset=True) if req else {}
    body_day = fields.pop("date", None)
    log = UpsertDailyLogUseCase(db).execute(user.id, body_day or day, **fields)
    return _to_response(log)
