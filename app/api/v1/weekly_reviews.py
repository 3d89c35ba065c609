"""
Weekly review API endpoints
"""
from datetime import date as date_type, datetime

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.weekly_reviews import GenerateWeeklyReviewUseCase, GetWeeklyReviewUseCase
from app.infrastructure.db.models import WeeklyReviewModel


router = APIRouter(prefix="/api/v1/weekly-reviews", tags=["weekly-reviews"])


class WeeklyReviewResponse(BaseModel):
    id: int
    week_start: date_type
    week_end: date_type
    tasks_completed: int
    tasks_rolled_over: int
    average_water: float
    exercise_days: int
    generated_at: datetime | None


def _to_response(review: WeeklyReviewModel) -> WeeklyReviewResponse:
    return WeeklyReviewResponse(
        id=review.id,
        week_start=review.week_start,
        week_end=review.week_end,
        tasks_completed=review.tasks_completed,
        tasks_rolled_over=review.tasks_rolled_over,
        average_water=review.average_water,
        exercise_days=review.exercise_days,
        generated_at=review.generated_at,
    )


@router.get("", response_model=WeeklyReviewResponse | None)
def get_weekly_review(
    request: Request,
    week_start: date_type | None = Query(default=None, alias="weekStart"),
    db: Session = Depends(get_db),
):
    """Stored review for the week, or null if never generated"""
    user = get_current_user(request, db)
    review = GetWeeklyReviewUseCase(db).execute(user.id, week_start)
    return _to_response(review) if review else None


@router.post("", response_model=WeeklyReviewResponse, status_code=201)
def generate_weekly_review(
    request: Request,
    week_start: date_type | None = Query(default=None, alias="weekStart"),
    db: Session = Depends(get_db),
):
    """Recompute the week's statistics and overwrite the stored review"""
    user = get_current_user(request, db)
    review = GenerateWeeklyReviewUseCase(db).execute(user.id, week_start)
    return _to_response(review)
