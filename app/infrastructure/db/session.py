"""
Database engine and per-request sessions for the planner store.

PostgreSQL (via psycopg) is the production backend; a sqlite:// DATABASE_URL
is accepted for local runs and demos.
"""
import psycopg
from sqlalchemy import create_engine, text
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from app.config import get_settings


class Base(DeclarativeBase):
    """Declarative base shared by every planner table"""


_engine = None
_SessionLocal = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def get_engine():
    """Process-wide engine, built from settings on first use"""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.get_sqlalchemy_url()
        if _is_sqlite(url):
            # FastAPI runs sync endpoints in a worker thread pool
            _engine = create_engine(url, echo=settings.DEBUG, connect_args={"check_same_thread": False})
        else:
            _engine = create_engine(url, echo=settings.DEBUG, pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """
    Request-scoped session; use cases commit through persistence_guard,
    anything left uncommitted is discarded on close.

    Usage:
        @router.get("")
        def list_tasks(request: Request, db: Session = Depends(get_db)):
            ...
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Readiness check: one round trip to the store.

    PostgreSQL is pinged with a raw psycopg connection so a broken pool
    can't mask an outage; SQLite goes through the engine.

    Raises:
        psycopg.OperationalError / sqlalchemy.exc.OperationalError
    """
    settings = get_settings()
    if _is_sqlite(settings.DATABASE_URL):
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return

    with psycopg.connect(settings.DATABASE_URL, connect_timeout=3) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")
            cur.fetchone()
