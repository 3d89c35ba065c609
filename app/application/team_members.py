"""
Team member use cases - the owner's roster of collaborators.

A team member can be assigned to any number of projects; the assignments live
in project_members (see app.application.projects).
"""
import logging

from sqlalchemy.orm import Session

from app.application.errors import ValidationError, NotFoundError, persistence_guard
from app.domain.project import TEAM_MEMBER_FIELDS
from app.infrastructure.db.models import (
    TeamMemberModel, ProjectMemberModel, ProjectModel, ClientModel,
)
from app.utils.validation import parse_optional_amount

logger = logging.getLogger(__name__)


class TeamMemberValidationError(ValidationError):
    pass


class TeamMemberNotFoundError(NotFoundError):
    pass


def get_owned_team_member(db: Session, team_member_id: int, account_id: int) -> TeamMemberModel:
    member = db.query(TeamMemberModel).filter(
        TeamMemberModel.id == team_member_id,
        TeamMemberModel.account_id == account_id,
    ).first()
    if not member:
        raise TeamMemberNotFoundError(f"Team member #{team_member_id} not found")
    return member


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _rate(value):
    try:
        return parse_optional_amount(value)
    except ValueError as e:
        raise TeamMemberValidationError(f"hourly_rate: {e}")


def _assignments(db: Session, account_id: int, team_member_ids: list[int], active_only: bool) -> dict[int, list[dict]]:
    """team_member_id -> [{"assignment", "project", "client"}]"""
    if not team_member_ids:
        return {}
    query = db.query(ProjectMemberModel).filter(
        ProjectMemberModel.account_id == account_id,
        ProjectMemberModel.team_member_id.in_(team_member_ids),
    )
    if active_only:
        query = query.filter(ProjectMemberModel.is_active.is_(True))
    rows = query.order_by(ProjectMemberModel.created_at.desc(), ProjectMemberModel.id.desc()).all()

    project_ids = {r.project_id for r in rows}
    projects = {
        p.id: p for p in
        db.query(ProjectModel).filter(ProjectModel.id.in_(project_ids)).all()
    } if project_ids else {}
    client_ids = {p.client_id for p in projects.values() if p.client_id is not None}
    clients = {
        c.id: c for c in
        db.query(ClientModel).filter(ClientModel.id.in_(client_ids)).all()
    } if client_ids else {}

    result: dict[int, list[dict]] = {}
    for row in rows:
        project = projects.get(row.project_id)
        client = clients.get(project.client_id) if project and project.client_id else None
        result.setdefault(row.team_member_id, []).append(
            {"assignment": row, "project": project, "client": client}
        )
    return result


class CreateTeamMemberUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        name: str | None,
        email: str | None = None,
        role: str | None = None,
        hourly_rate=None,
        notes: str | None = None,
    ) -> TeamMemberModel:
        name = (name or "").strip()
        if not name:
            raise TeamMemberValidationError("name is required")

        member = TeamMemberModel(
            account_id=account_id,
            name=name,
            email=_clean(email),
            role=_clean(role),
            hourly_rate=_rate(hourly_rate),
            is_active=True,
            notes=notes,
        )
        with persistence_guard(self.db, "create team member"):
            self.db.add(member)
            self.db.flush()
        return member


class UpdateTeamMemberUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, team_member_id: int, account_id: int, **changes) -> TeamMemberModel:
        member = get_owned_team_member(self.db, team_member_id, account_id)
        changes = {key: changes[key] for key in TEAM_MEMBER_FIELDS if key in changes}

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise TeamMemberValidationError("name cannot be empty")
            changes["name"] = name
        for key in ("email", "role"):
            if key in changes:
                changes[key] = _clean(changes[key])
        if "hourly_rate" in changes:
            changes["hourly_rate"] = _rate(changes["hourly_rate"])
        if "is_active" in changes and changes["is_active"] is None:
            raise TeamMemberValidationError("is_active must be true or false")

        with persistence_guard(self.db, "update team member"):
            for key, value in changes.items():
                setattr(member, key, value)
        return member


class GetTeamMemberUseCase:
    """Team member with every assignment, active or not."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, team_member_id: int, account_id: int) -> dict:
        member = get_owned_team_member(self.db, team_member_id, account_id)
        assignments = _assignments(self.db, account_id, [member.id], active_only=False)
        return {"team_member": member, "assignments": assignments.get(member.id, [])}


class ListTeamMembersUseCase:
    """Newest first, each with its active project assignments."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int) -> list[dict]:
        members = (
            self.db.query(TeamMemberModel)
            .filter(TeamMemberModel.account_id == account_id)
            .order_by(TeamMemberModel.created_at.desc(), TeamMemberModel.id.desc())
            .all()
        )
        assignments = _assignments(self.db, account_id, [m.id for m in members], active_only=True)
        return [
            {"team_member": m, "assignments": assignments.get(m.id, [])}
            for m in members
        ]


class DeleteTeamMemberUseCase:
    """
    Removes the roster entry. Project assignments stay (they carry their own
    name and rate) but lose the link.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, team_member_id: int, account_id: int) -> None:
        member = get_owned_team_member(self.db, team_member_id, account_id)
        with persistence_guard(self.db, "delete team member"):
            unlinked = (
                self.db.query(ProjectMemberModel)
                .filter(
                    ProjectMemberModel.account_id == account_id,
                    ProjectMemberModel.team_member_id == member.id,
                )
                .update({"team_member_id": None}, synchronize_session="fetch")
            )
            self.db.delete(member)
        logger.info("Team member #%d deleted, %d assignments unlinked", team_member_id, unlinked)
