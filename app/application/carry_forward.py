"""
Carry-forward: copy unfinished tasks from one day to another.

Sources are never modified. Each copy is a new task with status reset to
"todo" and carried_from_id pointing at its source. All copies are written in a
single transaction, so a failure leaves nothing behind.

By default the operation is a plain copy: running it twice for the same pair
of days duplicates every still-unfinished source. Pass
skip_already_carried=True to skip sources that already have a copy on the
target day.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from app.application.errors import persistence_guard
from app.application.tasks import TaskValidationError, parse_task_day
from app.domain.task import TASK_STATUS_TODO, UNFINISHED_STATUSES
from app.infrastructure.db.models import TaskModel

logger = logging.getLogger(__name__)


@dataclass
class CarryForwardResult:
    tasks: list[TaskModel] = field(default_factory=list)
    requested: int = 0  # unfinished tasks found on the source day
    skipped: int = 0    # sources that already had a copy on the target day

    @property
    def carried(self) -> int:
        return len(self.tasks)


class CarryForwardTasksUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        from_date,
        to_date,
        skip_already_carried: bool = False,
    ) -> CarryForwardResult:
        from_date = parse_task_day(from_date, "fromDate")
        to_date = parse_task_day(to_date, "toDate")
        if from_date == to_date:
            raise TaskValidationError("fromDate and toDate must differ")

        sources = (
            self.db.query(TaskModel)
            .filter(
                TaskModel.account_id == account_id,
                TaskModel.date == from_date,
                TaskModel.status.in_(UNFINISHED_STATUSES),
            )
            .order_by(TaskModel.id.asc())
            .all()
        )
        result = CarryForwardResult(requested=len(sources))
        if not sources:
            return result

        already_carried: set[int] = set()
        if skip_already_carried:
            already_carried = self._carried_source_ids(account_id, to_date, [t.id for t in sources])

        with persistence_guard(self.db, "carry forward tasks"):
            for source in sources:
                if source.id in already_carried:
                    result.skipped += 1
                    continue
                copy = TaskModel(
                    account_id=account_id,
                    date=to_date,
                    title=source.title,
                    description=source.description,
                    status=TASK_STATUS_TODO,
                    priority=source.priority,
                    pinned=source.pinned,
                    carried_from_id=source.id,
                )
                self.db.add(copy)
                result.tasks.append(copy)
            self.db.flush()

        logger.info(
            "Carry-forward account=%d %s -> %s: carried=%d skipped=%d requested=%d",
            account_id, from_date, to_date, result.carried, result.skipped, result.requested,
        )
        return result

    def _carried_source_ids(self, account_id: int, to_date, source_ids: list[int]) -> set[int]:
        rows = (
            self.db.query(TaskModel.carried_from_id)
            .filter(
                TaskModel.account_id == account_id,
                TaskModel.date == to_date,
                TaskModel.carried_from_id.in_(source_ids),
            )
            .all()
        )
        return {row[0] for row in rows}
