"""
Error taxonomy shared by all use cases.

ValidationError -> 400, NotFoundError -> 404, PersistenceError -> 500.
The HTTP mapping lives in app.main; use cases only raise.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Missing or malformed input; the message names the field."""


class NotFoundError(LookupError):
    """Entity id does not resolve under the caller's account."""


class PersistenceError(RuntimeError):
    """The store rejected or could not complete an operation."""


@contextmanager
def persistence_guard(db: Session, action: str) -> Iterator[None]:
    """
    Run a unit of work and commit it.

    Any SQLAlchemy failure (inside the block or on commit) rolls the session
    back, is logged with traceback and re-raised as PersistenceError carrying
    only a generic message like "Failed to create task".

    Usage:
        with persistence_guard(self.db, "create task"):
            self.db.add(task)
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Persistence failure: %s", action)
        raise PersistenceError(f"Failed to {action}") from exc
