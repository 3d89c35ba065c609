"""
Task API endpoints (day planner + carry-forward)
"""
from datetime import date as date_type, datetime

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.carry_forward import CarryForwardTasksUseCase
from app.application.tasks import (
    ListTasksForDateUseCase, GetTaskUseCase, CreateTaskUseCase,
    UpdateTaskUseCase, DeleteTaskUseCase,
)
from app.infrastructure.db.models import TaskModel


router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


# === Request/Response models ===

class CreateTaskRequest(BaseModel):
    title: str | None = None
    date: date_type | None = None
    description: str | None = None
    notes: str | None = None
    status: str | None = None       # todo, in_progress, done, blocked
    priority: str | None = None     # low, medium, high
    pinned: bool | None = None


class UpdateTaskRequest(BaseModel):
    """Every field optional; only the ones sent are applied."""
    title: str | None = None
    date: date_type | None = None
    description: str | None = None
    notes: str | None = None
    status: str | None = None
    priority: str | None = None
    pinned: bool | None = None


class CarryForwardRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: date_type | None = Field(default=None, alias="fromDate")
    to_date: date_type | None = Field(default=None, alias="toDate")
    skip_carried: bool = Field(default=False, alias="skipCarried")


class TaskResponse(BaseModel):
    id: int
    date: date_type
    title: str
    description: str | None
    notes: str | None
    status: str
    priority: str | None
    pinned: bool
    carried_from_id: int | None
    created_at: datetime | None
    updated_at: datetime | None


def _to_response(task: TaskModel) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        date=task.date,
        title=task.title,
        description=task.description,
        notes=task.notes,
        status=task.status,
        priority=task.priority,
        pinned=task.pinned,
        carried_from_id=task.carried_from_id,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


# === Endpoints ===

@router.get("", response_model=list[TaskResponse])
def list_tasks(
    request: Request,
    day: date_type | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
):
    """Tasks for one calendar day: pinned, then priority, then newest"""
    user = get_current_user(request, db)
    tasks = ListTasksForDateUseCase(db).execute(user.id, day)
    return [_to_response(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    request: Request,
    req: CreateTaskRequest,
    db: Session = Depends(get_db),
):
    """Create a task on a day"""
    user = get_current_user(request, db)
    task = CreateTaskUseCase(db).execute(
        account_id=user.id,
        title=req.title,
        day=req.date,
        description=req.description,
        notes=req.notes,
        status=req.status,
        priority=req.priority,
        pinned=req.pinned,
    )
    return _to_response(task)


@router.post("/carry-forward", response_model=list[TaskResponse])
def carry_forward(
    request: Request,
    response: Response,
    req: CarryForwardRequest | None = None,
    db: Session = Depends(get_db),
):
    """
    Copy unfinished tasks from fromDate to toDate

    Returns the created copies. X-Carry-Requested / X-Carry-Skipped headers
    report how many sources were eligible and how many were skipped
    (skipCarried=true only).
    """
    user = get_current_user(request, db)
    req = req or CarryForwardRequest()
    result = CarryForwardTasksUseCase(db).execute(
        account_id=user.id,
        from_date=req.from_date,
        to_date=req.to_date,
        skip_already_carried=req.skip_carried,
    )
    response.headers["X-Carry-Requested"] = str(result.requested)
    response.headers["X-Carry-Skipped"] = str(result.skipped)
    return [_to_response(t) for t in result.tasks]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    request: Request,
    task_id: int,
    db: Session = Depends(get_db),
):
    user = get_current_user(request, db)
    return _to_response(GetTaskUseCase(db).execute(task_id, user.id))


@router.api_route("/{task_id}", methods=["PUT", "PATCH"], response_model=TaskResponse)
def update_task(
    request: Request,
    task_id: int,
    req: UpdateTaskRequest,
    db: Session = Depends(get_db),
):
    """Partial update - fields missing from the body stay untouched"""
    user = get_current_user(request, db)
    changes = req.model_dump(exclude_unset=True)
    task = UpdateTaskUseCase(db).execute(task_id, user.id, **changes)
    return _to_response(task)


@router.delete("/{task_id}")
def delete_task(
    request: Request,
    task_id: int,
    db: Session = Depends(get_db),
):
    user = get_current_user(request, db)
    DeleteTaskUseCase(db).execute(task_id, user.id)
    return {"message": "Task deleted successfully"}
