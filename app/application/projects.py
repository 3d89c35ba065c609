"""
Projects use cases and read service.

A project belongs to a client unless it is flagged personal_project. Members
are per-project assignments: either a linked team member (name, email, role
and rate are copied from the roster when not given) or an ad-hoc person.
"""
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.application.clients import get_owned_client
from app.application.errors import ValidationError, NotFoundError, persistence_guard
from app.application.team_members import get_owned_team_member
from app.config import get_settings
from app.domain.project import (
    PROJECT_STATUSES, PROJECT_STATUS_PLANNING, PAYMENT_TYPES, PAYMENT_TYPE_HOURLY,
    PAYMENT_STATUSES, PAYMENT_STATUS_PENDING, PROJECT_FIELDS, PROJECT_MEMBER_FIELDS,
)
from app.infrastructure.db.models import ProjectModel, ProjectMemberModel, ClientModel
from app.utils.validation import parse_iso_date, parse_optional_amount

logger = logging.getLogger(__name__)


# ── Errors ──

class ProjectValidationError(ValidationError):
    pass


class ProjectNotFoundError(NotFoundError):
    pass


class ProjectMemberNotFoundError(NotFoundError):
    pass


# ── Field checks ──

def _today() -> date:
    return datetime.now(ZoneInfo(get_settings().TIMEZONE)).date()


def _choice(value, allowed: list[str], field: str) -> str:
    if value not in allowed:
        raise ProjectValidationError(f"Invalid {field}: {value}. Use one of {', '.join(allowed)}")
    return value


def _money(value, field: str):
    try:
        return parse_optional_amount(value)
    except ValueError as e:
        raise ProjectValidationError(f"{field}: {e}")


def _optional_day(value, field: str) -> date | None:
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ProjectValidationError(f"{field} must be a YYYY-MM-DD date")


def _check_period(start: date | None, end: date | None) -> None:
    if start and end and end < start:
        raise ProjectValidationError("end_date cannot be before start_date")


def get_owned_project(db: Session, project_id: int, account_id: int) -> ProjectModel:
    project = db.query(ProjectModel).filter(
        ProjectModel.id == project_id,
        ProjectModel.account_id == account_id,
    ).first()
    if not project:
        raise ProjectNotFoundError(f"Project #{project_id} not found")
    return project


def _get_member(db: Session, project_id: int, member_id: int, account_id: int) -> ProjectMemberModel:
    member = db.query(ProjectMemberModel).filter(
        ProjectMemberModel.id == member_id,
        ProjectMemberModel.project_id == project_id,
        ProjectMemberModel.account_id == account_id,
    ).first()
    if not member:
        raise ProjectMemberNotFoundError(f"Project member #{member_id} not found")
    return member


# ── Project use cases ──

class CreateProjectUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        name: str | None,
        client_id: int | None = None,
        description: str | None = None,
        status: str | None = None,
        start_date=None,
        end_date=None,
        payment_type: str | None = None,
        budget=None,
        hourly_rate=None,
        personal_project: bool | None = None,
        notes: str | None = None,
    ) -> ProjectModel:
        name = (name or "").strip()
        if not name:
            raise ProjectValidationError("name is required")
        personal_project = bool(personal_project)
        if client_id is None and not personal_project:
            raise ProjectValidationError("client_id is required unless personal_project is set")
        start_date = _optional_day(start_date, "start_date")
        end_date = _optional_day(end_date, "end_date")
        _check_period(start_date, end_date)

        project = ProjectModel(
            account_id=account_id,
            client_id=client_id,
            name=name,
            description=description,
            status=_choice(status or PROJECT_STATUS_PLANNING, PROJECT_STATUSES, "status"),
            start_date=start_date,
            end_date=end_date,
            payment_type=_choice(payment_type or PAYMENT_TYPE_HOURLY, PAYMENT_TYPES, "payment_type"),
            budget=_money(budget, "budget"),
            hourly_rate=_money(hourly_rate, "hourly_rate"),
            personal_project=personal_project,
            notes=notes,
        )
        if client_id is not None:
            get_owned_client(self.db, client_id, account_id)

        with persistence_guard(self.db, "create project"):
            self.db.add(project)
            self.db.flush()
        return project


class UpdateProjectUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, account_id: int, **changes) -> ProjectModel:
        project = get_owned_project(self.db, project_id, account_id)
        changes = {key: changes[key] for key in PROJECT_FIELDS if key in changes}

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ProjectValidationError("name cannot be empty")
            changes["name"] = name
        if "status" in changes:
            _choice(changes["status"], PROJECT_STATUSES, "status")
        if "payment_type" in changes:
            _choice(changes["payment_type"], PAYMENT_TYPES, "payment_type")
        for key in ("budget", "hourly_rate"):
            if key in changes:
                changes[key] = _money(changes[key], key)
        for key in ("start_date", "end_date"):
            if key in changes:
                changes[key] = _optional_day(changes[key], key)
        _check_period(
            changes.get("start_date", project.start_date),
            changes.get("end_date", project.end_date),
        )
        if "personal_project" in changes:
            if changes["personal_project"] is None:
                raise ProjectValidationError("personal_project must be true or false")
            changes["personal_project"] = bool(changes["personal_project"])

        client_id = changes.get("client_id", project.client_id)
        personal = changes.get("personal_project", project.personal_project)
        if client_id is None and not personal:
            raise ProjectValidationError("client_id is required unless personal_project is set")
        if "client_id" in changes and client_id is not None:
            get_owned_client(self.db, client_id, account_id)

        with persistence_guard(self.db, "update project"):
            for key, value in changes.items():
                setattr(project, key, value)
        return project


class DeleteProjectUseCase:
    """Hard delete; the project's member rows go with it."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, account_id: int) -> None:
        project = get_owned_project(self.db, project_id, account_id)
        with persistence_guard(self.db, "delete project"):
            self.db.query(ProjectMemberModel).filter(
                ProjectMemberModel.project_id == project.id,
                ProjectMemberModel.account_id == account_id,
            ).delete(synchronize_session="fetch")
            self.db.delete(project)
        logger.info("Project #%d deleted for account=%d", project_id, account_id)


# ── Member use cases ──

class ListProjectMembersUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, account_id: int) -> list[ProjectMemberModel]:
        get_owned_project(self.db, project_id, account_id)
        return (
            self.db.query(ProjectMemberModel)
            .filter(
                ProjectMemberModel.project_id == project_id,
                ProjectMemberModel.account_id == account_id,
            )
            .order_by(ProjectMemberModel.created_at.desc(), ProjectMemberModel.id.desc())
            .all()
        )


class AddProjectMemberUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        project_id: int,
        account_id: int,
        team_member_id: int | None = None,
        name: str | None = None,
        role: str | None = None,
        email: str | None = None,
        hourly_rate=None,
        payment_type: str | None = None,
        payment_amount=None,
        notes: str | None = None,
    ) -> ProjectMemberModel:
        get_owned_project(self.db, project_id, account_id)

        hourly_rate = _money(hourly_rate, "hourly_rate")
        if team_member_id is not None:
            roster = get_owned_team_member(self.db, team_member_id, account_id)
            name = name or roster.name
            email = email or roster.email
            role = role or roster.role
            if hourly_rate is None:
                hourly_rate = roster.hourly_rate

        name = (name or "").strip()
        if not name:
            raise ProjectValidationError("name is required")

        member = ProjectMemberModel(
            account_id=account_id,
            project_id=project_id,
            team_member_id=team_member_id,
            name=name,
            role=role,
            email=email,
            hourly_rate=hourly_rate,
            payment_type=_choice(payment_type or PAYMENT_TYPE_HOURLY, PAYMENT_TYPES, "payment_type"),
            payment_amount=_money(payment_amount, "payment_amount"),
            payment_status=PAYMENT_STATUS_PENDING,
            is_active=True,
            joined_date=_today(),
            notes=notes,
        )
        with persistence_guard(self.db, "add project member"):
            self.db.add(member)
            self.db.flush()
        return member


class UpdateProjectMemberUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, member_id: int, account_id: int, **changes) -> ProjectMemberModel:
        member = _get_member(self.db, project_id, member_id, account_id)
        changes = {key: changes[key] for key in PROJECT_MEMBER_FIELDS if key in changes}

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ProjectValidationError("name cannot be empty")
            changes["name"] = name
        if "payment_type" in changes:
            _choice(changes["payment_type"], PAYMENT_TYPES, "payment_type")
        if "payment_status" in changes:
            _choice(changes["payment_status"], PAYMENT_STATUSES, "payment_status")
        for key in ("hourly_rate", "payment_amount"):
            if key in changes:
                changes[key] = _money(changes[key], key)
        if "left_date" in changes:
            changes["left_date"] = _optional_day(changes["left_date"], "left_date")
        if "is_active" in changes and changes["is_active"] is None:
            raise ProjectValidationError("is_active must be true or false")

        with persistence_guard(self.db, "update project member"):
            for key, value in changes.items():
                setattr(member, key, value)
        return member


class RemoveProjectMemberUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, project_id: int, member_id: int, account_id: int) -> None:
        member = _get_member(self.db, project_id, member_id, account_id)
        with persistence_guard(self.db, "remove project member"):
            self.db.delete(member)


# ── Read Service ──

class ProjectReadService:
    """Projects joined with their client and members, for list and detail views."""

    def __init__(self, db: Session):
        self.db = db

    def list_projects(
        self,
        account_id: int,
        status: str | None = None,
        client_id: int | None = None,
    ) -> list[dict]:
        """Newest first; only active members are included."""
        query = self.db.query(ProjectModel).filter(ProjectModel.account_id == account_id)
        if status:
            query = query.filter(ProjectModel.status == _choice(status, PROJECT_STATUSES, "status"))
        if client_id is not None:
            query = query.filter(ProjectModel.client_id == client_id)
        projects = query.order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc()).all()
        return self._assemble(account_id, projects, active_only=True)

    def get_project(self, project_id: int, account_id: int) -> dict:
        """Single project with every member, active or not."""
        project = get_owned_project(self.db, project_id, account_id)
        return self._assemble(account_id, [project], active_only=False)[0]

    def _assemble(self, account_id: int, projects: list[ProjectModel], active_only: bool) -> list[dict]:
        if not projects:
            return []
        project_ids = [p.id for p in projects]
        client_ids = {p.client_id for p in projects if p.client_id is not None}

        clients = {
            c.id: c for c in
            self.db.query(ClientModel).filter(
                ClientModel.account_id == account_id,
                ClientModel.id.in_(client_ids),
            ).all()
        } if client_ids else {}

        members_query = self.db.query(ProjectMemberModel).filter(
            ProjectMemberModel.account_id == account_id,
            ProjectMemberModel.project_id.in_(project_ids),
        )
        if active_only:
            members_query = members_query.filter(ProjectMemberModel.is_active.is_(True))
        members: dict[int, list[ProjectMemberModel]] = {}
        for m in members_query.order_by(ProjectMemberModel.created_at.desc(), ProjectMemberModel.id.desc()):
            members.setdefault(m.project_id, []).append(m)

        return [
            {
                "project": p,
                "client": clients.get(p.client_id) if p.client_id is not None else None,
                "members": members.get(p.id, []),
            }
            for p in projects
        ]
