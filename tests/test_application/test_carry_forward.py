"""Tests for carry-forward of unfinished tasks between days."""
from datetime import date
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.infrastructure.db.models import TaskModel
from app.application.carry_forward import CarryForwardTasksUseCase
from app.application.errors import PersistenceError
from app.application.tasks import CreateTaskUseCase, ListTasksForDateUseCase, TaskValidationError

ACCOUNT = 1
MON = date(2024, 1, 8)
TUE = date(2024, 1, 9)


def _task(db, title, status="todo", day=MON, account_id=ACCOUNT, **kwargs):
    return CreateTaskUseCase(db).execute(
        account_id=account_id, title=title, day=day, status=status, **kwargs
    )


class TestCarryForward:
    def test_copies_only_unfinished(self, db_session):
        _task(db_session, "a", status="todo")
        _task(db_session, "b", status="in_progress")
        _task(db_session, "c", status="done")
        _task(db_session, "d", status="blocked")

        result = CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)

        assert result.carried == 2
        assert result.requested == 2
        assert result.skipped == 0
        assert sorted(t.title for t in result.tasks) == ["a", "b"]
        assert all(t.status == "todo" for t in result.tasks)
        assert all(t.date == TUE for t in result.tasks)

    def test_copy_fields_and_marker(self, db_session):
        source = _task(
            db_session, "Write report", status="in_progress",
            description="draft v2", notes="private", priority="high", pinned=True,
        )
        result = CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)

        copy = result.tasks[0]
        assert copy.id != source.id
        assert copy.title == "Write report"
        assert copy.description == "draft v2"
        assert copy.priority == "high"
        assert copy.pinned is True
        assert copy.status == "todo"
        assert copy.notes is None
        assert copy.carried_from_id == source.id

    def test_sources_untouched(self, db_session):
        source = _task(db_session, "stay", status="in_progress")
        CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)

        db_session.expire_all()
        stored = db_session.query(TaskModel).filter(TaskModel.id == source.id).first()
        assert stored.date == MON
        assert stored.status == "in_progress"

    def test_nothing_to_carry(self, db_session):
        _task(db_session, "done", status="done")
        result = CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)
        assert result.tasks == []
        assert result.requested == 0

    def test_twice_duplicates(self, db_session):
        _task(db_session, "x")
        CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)
        CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)

        titles = [t.title for t in ListTasksForDateUseCase(db_session).execute(ACCOUNT, TUE)]
        assert titles == ["x", "x"]

    def test_skip_already_carried(self, db_session):
        _task(db_session, "x")
        CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)
        _task(db_session, "y")

        result = CarryForwardTasksUseCase(db_session).execute(
            ACCOUNT, MON, TUE, skip_already_carried=True
        )
        assert [t.title for t in result.tasks] == ["y"]
        assert result.requested == 2
        assert result.skipped == 1

        titles = sorted(t.title for t in ListTasksForDateUseCase(db_session).execute(ACCOUNT, TUE))
        assert titles == ["x", "y"]

    def test_other_owner_tasks_ignored(self, db_session):
        _task(db_session, "theirs", account_id=2)
        result = CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)
        assert result.carried == 0

    def test_backwards_carry_allowed(self, db_session):
        _task(db_session, "late", day=TUE)
        result = CarryForwardTasksUseCase(db_session).execute(ACCOUNT, TUE, MON)
        assert result.tasks[0].date == MON

    def test_same_day_rejected(self, db_session):
        with pytest.raises(TaskValidationError, match="differ"):
            CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, MON)

    def test_missing_dates_rejected(self, db_session):
        with pytest.raises(TaskValidationError, match="fromDate is required"):
            CarryForwardTasksUseCase(db_session).execute(ACCOUNT, None, TUE)
        with pytest.raises(TaskValidationError, match="toDate is required"):
            CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, "")

    def test_failure_leaves_no_partial_copies(self, db_session):
        _task(db_session, "a")
        _task(db_session, "b")

        with patch.object(db_session, "commit", side_effect=OperationalError("COMMIT", {}, Exception("disk full"))):
            with pytest.raises(PersistenceError, match="carry forward"):
                CarryForwardTasksUseCase(db_session).execute(ACCOUNT, MON, TUE)

        assert ListTasksForDateUseCase(db_session).execute(ACCOUNT, TUE) == []
