"""
SQLAlchemy ORM models (planner tables)
"""
from decimal import Decimal
from datetime import date as date_type
from sqlalchemy import String, DateTime, Integer, Text, TIMESTAMP, Date, Float, func, Boolean, Numeric, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


class User(Base):
    """
    Owner of every ledger row (account_id == users.id)
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )


# ============================================================================
# Day planner
# ============================================================================


class TaskModel(Base):
    """Tasks scheduled on a calendar day"""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="todo")  # todo/in_progress/done/blocked
    priority: Mapped[str | None] = mapped_column(String(16), nullable=True)  # low/medium/high
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")

    # Set on copies made by carry-forward -> tasks.id of the source
    carried_from_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    __table_args__ = (
        Index("ix_tasks_account_date", "account_id", "date"),
    )


class DailyLogModel(Base):
    """One wellness/journal record per (account, day), created on first write"""
    __tablename__ = "daily_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)

    journal_entry: Mapped[str | None] = mapped_column(Text, nullable=True)
    mood: Mapped[str | None] = mapped_column(String(16), nullable=True)
    water_glasses: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    exercised: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    sleep_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    day_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("account_id", "date", name="uq_daily_log_account_date"),
    )


class WeeklyReviewModel(Base):
    """Cached weekly summary, recomputed and overwritten on every generation"""
    __tablename__ = "weekly_reviews"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    week_start: Mapped[date_type] = mapped_column(Date, nullable=False)
    week_end: Mapped[date_type] = mapped_column(Date, nullable=False)

    tasks_completed: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    tasks_rolled_over: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    average_water: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")
    exercise_days: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")

    generated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("account_id", "week_start", name="uq_weekly_review_account_week"),
    )


# ============================================================================
# Finance: clients and invoices
# ============================================================================


class ClientModel(Base):
    """Client directory - invoices reference it by id"""
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class InvoiceModel(Base):
    """Client invoices; sent_date/paid_date are stamped by status changes only"""
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    client_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> clients

    invoice_number: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, server_default="USD")
    tax_rate: Mapped[float] = mapped_column(Float, nullable=False, server_default="0")

    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="draft", index=True)
    issue_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    due_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    sent_date: Mapped[DateTime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    paid_date: Mapped[DateTime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    __table_args__ = (
        UniqueConstraint("account_id", "invoice_number", name="uq_invoice_account_number"),
    )


# ============================================================================
# Projects & team
# ============================================================================


class ProjectModel(Base):
    """Client work (or a personal project without a client)"""
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    client_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)  # -> clients

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="planning", index=True)

    start_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)

    payment_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="hourly_rate")
    budget: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    personal_project: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class TeamMemberModel(Base):
    """People the owner works with; assigned to projects via ProjectMemberModel"""
    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class ProjectMemberModel(Base):
    """
    Someone working on a project: either a linked team member or an ad-hoc
    name. Rate and payment terms are per assignment.
    """
    __tablename__ = "project_members"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)  # -> projects
    team_member_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)  # -> team_members

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    payment_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="hourly_rate")
    payment_amount: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    payment_status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="pending")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")
    joined_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    left_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
