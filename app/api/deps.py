"""
FastAPI dependencies (DB session, owner resolution)
"""
from fastapi import Request, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import User


# Re-export get_db for convenience
get_db = _get_db


def get_or_create_default_user(db: Session) -> User:
    """
    Single implicit owner used when the request carries no session user.
    Created on first use.
    """
    settings = get_settings()
    user = db.query(User).filter(User.email == settings.DEFAULT_USER_EMAIL).first()
    if user:
        return user

    user = User(email=settings.DEFAULT_USER_EMAIL, name=settings.DEFAULT_USER_NAME)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent first request created it; use that row
        db.rollback()
        user = db.query(User).filter(User.email == settings.DEFAULT_USER_EMAIL).first()
        if user is None:
            raise
    return user


def get_current_user(request: Request, db: Session) -> User:
    """
    Resolve the owner of this request

    Session "user_id" wins; without it the default user is used.

    Raises:
        HTTPException(401): session points at a user that no longer exists

    Usage:
        user = get_current_user(request, db)
        ListTasksForDateUseCase(db).execute(user.id, day)
    """
    user_id = request.session.get("user_id")
    if not user_id:
        return get_or_create_default_user(db)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user
