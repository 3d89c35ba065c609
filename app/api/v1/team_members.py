"""
Team member API endpoints
"""
from datetime import date as date_type, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.team_members import (
    CreateTeamMemberUseCase, UpdateTeamMemberUseCase, GetTeamMemberUseCase,
    ListTeamMembersUseCase, DeleteTeamMemberUseCase,
)
from app.infrastructure.db.models import TeamMemberModel


router = APIRouter(prefix="/api/v1/team-members", tags=["team-members"])


class TeamMemberRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    role: str | None = None
    hourly_rate: Decimal | None = None
    is_active: bool | None = None
    notes: str | None = None


class AssignmentResponse(BaseModel):
    project_member_id: int
    project_id: int
    project_name: str | None
    client_name: str | None
    role: str | None
    is_active: bool
    joined_date: date_type


class TeamMemberResponse(BaseModel):
    id: int
    name: str
    email: str | None
    role: str | None
    hourly_rate: str | None
    is_active: bool
    notes: str | None
    created_at: datetime | None
    project_assignments: list[AssignmentResponse]


def _to_response(member: TeamMemberModel, assignments: list[dict]) -> TeamMemberResponse:
    return TeamMemberResponse(
        id=member.id,
        name=member.name,
        email=member.email,
        role=member.role,
        hourly_rate=str(member.hourly_rate) if member.hourly_rate is not None else None,
        is_active=member.is_active,
        notes=member.notes,
        created_at=member.created_at,
        project_assignments=[
            AssignmentResponse(
                project_member_id=a["assignment"].id,
                project_id=a["assignment"].project_id,
                project_name=a["project"].name if a["project"] else None,
                client_name=a["client"].name if a["client"] else None,
                role=a["assignment"].role,
                is_active=a["assignment"].is_active,
                joined_date=a["assignment"].joined_date,
            )
            for a in assignments
        ],
    )


@router.get("", response_model=list[TeamMemberResponse])
def list_team_members(request: Request, db: Session = Depends(get_db)):
    """Roster, newest first, with active project assignments"""
    user = get_current_user(request, db)
    rows = ListTeamMembersUseCase(db).execute(user.id)
    return [_to_response(r["team_member"], r["assignments"]) for r in rows]


@router.post("", response_model=TeamMemberResponse, status_code=201)
def create_team_member(request: Request, req: TeamMemberRequest, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    fields = req.model_dump(exclude_unset=True)
    fields.pop("is_active", None)
    name = fields.pop("name", None)
    member = CreateTeamMemberUseCase(db).execute(user.id, name, **fields)
    return _to_response(member, [])


@router.get("/{team_member_id}", response_model=TeamMemberResponse)
def get_team_member(request: Request, team_member_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    row = GetTeamMemberUseCase(db).execute(team_member_id, user.id)
    return _to_response(row["team_member"], row["assignments"])


@router.api_route("/{team_member_id}", methods=["PATCH", "PUT"], response_model=TeamMemberResponse)
def update_team_member(
    request: Request,
    team_member_id: int,
    req: TeamMemberRequest,
    db: Session = Depends(get_db),
):
    user = get_current_user(request, db)
    UpdateTeamMemberUseCase(db).execute(team_member_id, user.id, **req.model_dump(exclude_unset=True))
    row = GetTeamMemberUseCase(db).execute(team_member_id, user.id)
    return _to_response(row["team_member"], row["assignments"])


@router.delete("/{team_member_id}")
def delete_team_member(request: Request, team_member_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    DeleteTeamMemberUseCase(db).execute(team_member_id, user.id)
    return {"success": True}
