"""
Weekly review - derived summary of a 7-day window.

Statistics for [week_start, end_of_week(week_start)]:
  - tasks_completed   : tasks with status done
  - tasks_rolled_over : unfinished tasks dated on the last day of the week
  - average_water     : water glasses summed over logged days / number of logged days
                        (not / 7; 0.0 when no day was logged)
  - exercise_days     : logged days with exercised == True

The result is upserted on (account_id, week_start); every generation
overwrites the stored numbers.
"""
import logging
from datetime import date, datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.application.daily_logs import ListDailyLogsUseCase
from app.application.errors import ValidationError, persistence_guard
from app.application.tasks import ListTasksInRangeUseCase
from app.config import get_settings
from app.domain.task import TASK_STATUS_DONE
from app.domain.week import end_of_week
from app.infrastructure.db.models import WeeklyReviewModel
from app.utils.validation import parse_iso_date

logger = logging.getLogger(__name__)

STAT_FIELDS = ("tasks_completed", "tasks_rolled_over", "average_water", "exercise_days")


class WeeklyReviewValidationError(ValidationError):
    pass


def parse_week_start(value) -> date:
    if value is None or value == "":
        raise WeeklyReviewValidationError("weekStart is required")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise WeeklyReviewValidationError("weekStart must be a YYYY-MM-DD date")


def compute_week_stats(tasks, logs, week_end: date) -> dict:
    """Pure aggregation over already-loaded task and daily log rows."""
    tasks_completed = sum(1 for t in tasks if t.status == TASK_STATUS_DONE)
    tasks_rolled_over = sum(
        1 for t in tasks
        if t.status != TASK_STATUS_DONE and t.date == week_end
    )
    total_water = sum(log.water_glasses or 0 for log in logs)
    average_water = total_water / len(logs) if logs else 0.0
    exercise_days = sum(1 for log in logs if log.exercised)
    return {
        "tasks_completed": tasks_completed,
        "tasks_rolled_over": tasks_rolled_over,
        "average_water": float(average_water),
        "exercise_days": exercise_days,
    }


def _find_review(db: Session, account_id: int, week_start: date) -> WeeklyReviewModel | None:
    return db.query(WeeklyReviewModel).filter(
        WeeklyReviewModel.account_id == account_id,
        WeeklyReviewModel.week_start == week_start,
    ).first()


class GetWeeklyReviewUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, week_start) -> WeeklyReviewModel | None:
        return _find_review(self.db, account_id, parse_week_start(week_start))


class GenerateWeeklyReviewUseCase:
    def __init__(self, db: Session, week_starts_on: int | None = None):
        self.db = db
        if week_starts_on is None:
            week_starts_on = get_settings().WEEK_STARTS_ON
        self.week_starts_on = week_starts_on

    def execute(self, account_id: int, week_start) -> WeeklyReviewModel:
        week_start = parse_week_start(week_start)
        week_end = end_of_week(week_start, self.week_starts_on)

        tasks = ListTasksInRangeUseCase(self.db).execute(account_id, week_start, week_end)
        logs = ListDailyLogsUseCase(self.db).execute(account_id, week_start, week_end)
        stats = compute_week_stats(tasks, logs, week_end)

        with persistence_guard(self.db, "generate weekly review"):
            review = _find_review(self.db, account_id, week_start)
            if review is None:
                review = self._create(account_id, week_start)
            review.week_end = week_end
            for key in STAT_FIELDS:
                setattr(review, key, stats[key])
            review.generated_at = datetime.now(timezone.utc)

        logger.info(
            "Weekly review account=%d %s..%s: completed=%d rolled_over=%d avg_water=%.2f exercise_days=%d",
            account_id, week_start, week_end,
            stats["tasks_completed"], stats["tasks_rolled_over"],
            stats["average_water"], stats["exercise_days"],
        )
        return review

    def _create(self, account_id: int, week_start: date) -> WeeklyReviewModel:
        review = WeeklyReviewModel(
            account_id=account_id,
            week_start=week_start,
            week_end=end_of_week(week_start, self.week_starts_on),
        )
        self.db.add(review)
        try:
            self.db.flush()
        except IntegrityError:
            # A concurrent generation inserted the row first; overwrite it
            self.db.rollback()
            review = _find_review(self.db, account_id, week_start)
            if review is None:
                raise
        return review
