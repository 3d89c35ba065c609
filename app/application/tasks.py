"""Task use cases - tasks scheduled on a calendar day"""
from datetime import date

from sqlalchemy import case
from sqlalchemy.orm import Session

from app.application.errors import ValidationError, NotFoundError, persistence_guard
from app.domain.task import (
    TASK_STATUSES, TASK_STATUS_TODO, PRIORITIES, PRIORITY_RANK, NO_PRIORITY_RANK,
    UPDATABLE_FIELDS, can_transition,
)
from app.infrastructure.db.models import TaskModel
from app.utils.validation import parse_iso_date


class TaskValidationError(ValidationError):
    pass


class TaskNotFoundError(NotFoundError):
    pass


def _listing_order():
    priority_order = case(PRIORITY_RANK, value=TaskModel.priority, else_=NO_PRIORITY_RANK)
    return (
        TaskModel.pinned.desc(),
        priority_order,
        TaskModel.created_at.desc(),
        TaskModel.id.desc(),
    )


def parse_task_day(value, field: str = "date") -> date:
    if value is None or value == "":
        raise TaskValidationError(f"{field} is required")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise TaskValidationError(f"{field} must be a YYYY-MM-DD date")


def _check_status(status) -> str:
    if status not in TASK_STATUSES:
        raise TaskValidationError(f"Invalid status: {status}. Use one of {', '.join(TASK_STATUSES)}")
    return status


def _check_priority(priority) -> str | None:
    if priority is not None and priority not in PRIORITIES:
        raise TaskValidationError(f"Invalid priority: {priority}. Use one of {', '.join(PRIORITIES)}")
    return priority


def get_owned_task(db: Session, task_id: int, account_id: int) -> TaskModel:
    task = db.query(TaskModel).filter(
        TaskModel.id == task_id,
        TaskModel.account_id == account_id,
    ).first()
    if not task:
        raise TaskNotFoundError(f"Task #{task_id} not found")
    return task


class ListTasksForDateUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, day) -> list[TaskModel]:
        day = parse_task_day(day)
        return (
            self.db.query(TaskModel)
            .filter(
                TaskModel.account_id == account_id,
                TaskModel.date == day,
            )
            .order_by(*_listing_order())
            .all()
        )


class ListTasksInRangeUseCase:
    """Tasks dated within [start, end] inclusive, oldest day first."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, start, end) -> list[TaskModel]:
        start = parse_task_day(start, "start")
        end = parse_task_day(end, "end")
        return (
            self.db.query(TaskModel)
            .filter(
                TaskModel.account_id == account_id,
                TaskModel.date >= start,
                TaskModel.date <= end,
            )
            .order_by(TaskModel.date.asc(), *_listing_order())
            .all()
        )


class GetTaskUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, task_id: int, account_id: int) -> TaskModel:
        return get_owned_task(self.db, task_id, account_id)


class CreateTaskUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        title: str | None,
        day,
        description: str | None = None,
        notes: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        pinned: bool | None = None,
    ) -> TaskModel:
        title = (title or "").strip()
        if not title:
            raise TaskValidationError("title is required")
        day = parse_task_day(day)

        task = TaskModel(
            account_id=account_id,
            date=day,
            title=title,
            description=description,
            notes=notes,
            status=_check_status(status or TASK_STATUS_TODO),
            priority=_check_priority(priority),
            pinned=bool(pinned),
        )
        with persistence_guard(self.db, "create task"):
            self.db.add(task)
            self.db.flush()
        return task


class UpdateTaskUseCase:
    """
    Partial update: only keys present in `changes` are applied.
    Explicit None / "" overwrite nullable fields.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, task_id: int, account_id: int, **changes) -> TaskModel:
        task = get_owned_task(self.db, task_id, account_id)

        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise TaskValidationError("title cannot be empty")
            changes["title"] = title
        if "date" in changes:
            changes["date"] = parse_task_day(changes["date"])
        if "status" in changes:
            new_status = _check_status(changes["status"])
            if not can_transition(task.status, new_status):
                raise TaskValidationError(f"Cannot change status from {task.status} to {new_status}")
        if "priority" in changes:
            _check_priority(changes["priority"])
        if "pinned" in changes:
            if changes["pinned"] is None:
                raise TaskValidationError("pinned must be true or false")
            changes["pinned"] = bool(changes["pinned"])

        with persistence_guard(self.db, "update task"):
            for key in UPDATABLE_FIELDS:
                if key in changes:
                    setattr(task, key, changes[key])
        return task


class DeleteTaskUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, task_id: int, account_id: int) -> None:
        task = get_owned_task(self.db, task_id, account_id)
        with persistence_guard(self.db, "delete task"):
            self.db.delete(task)
