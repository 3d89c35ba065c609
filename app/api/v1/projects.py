"""
Project API endpoints (projects and their member assignments)
"""
from datetime import date as date_type, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.projects import (
    CreateProjectUseCase, UpdateProjectUseCase, DeleteProjectUseCase,
    ListProjectMembersUseCase, AddProjectMemberUseCase,
    UpdateProjectMemberUseCase, RemoveProjectMemberUseCase,
    ProjectReadService,
)
from app.infrastructure.db.models import ProjectModel, ProjectMemberModel, ClientModel


router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


# === Request/Response models ===

class ProjectRequest(BaseModel):
    client_id: int | None = None
    name: str | None = None
    description: str | None = None
    status: str | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None
    payment_type: str | None = None
    budget: Decimal | None = None
    hourly_rate: Decimal | None = None
    personal_project: bool | None = None
    notes: str | None = None


class AddMemberRequest(BaseModel):
    team_member_id: int | None = None
    name: str | None = None
    role: str | None = None
    email: str | None = None
    hourly_rate: Decimal | None = None
    payment_type: str | None = None
    payment_amount: Decimal | None = None
    notes: str | None = None


class UpdateMemberRequest(BaseModel):
    name: str | None = None
    role: str | None = None
    email: str | None = None
    hourly_rate: Decimal | None = None
    payment_type: str | None = None
    payment_amount: Decimal | None = None
    payment_status: str | None = None
    is_active: bool | None = None
    left_date: date_type | None = None
    notes: str | None = None


class MemberResponse(BaseModel):
    id: int
    project_id: int
    team_member_id: int | None
    name: str
    role: str | None
    email: str | None
    hourly_rate: str | None
    payment_type: str
    payment_amount: str | None
    payment_status: str
    is_active: bool
    joined_date: date_type
    left_date: date_type | None
    notes: str | None


class ProjectResponse(BaseModel):
    id: int
    client_id: int | None
    client_name: str | None
    client_company: str | None
    name: str
    description: str | None
    status: str
    start_date: date_type | None
    end_date: date_type | None
    payment_type: str
    budget: str | None
    hourly_rate: str | None
    personal_project: bool
    notes: str | None
    created_at: datetime | None
    members: list[MemberResponse]


# === Helpers ===

def _money(value) -> str | None:
    return str(value) if value is not None else None


def _member_response(m: ProjectMemberModel) -> MemberResponse:
    return MemberResponse(
        id=m.id,
        project_id=m.project_id,
        team_member_id=m.team_member_id,
        name=m.name,
        role=m.role,
        email=m.email,
        hourly_rate=_money(m.hourly_rate),
        payment_type=m.payment_type,
        payment_amount=_money(m.payment_amount),
        payment_status=m.payment_status,
        is_active=m.is_active,
        joined_date=m.joined_date,
        left_date=m.left_date,
        notes=m.notes,
    )


def _to_response(project: ProjectModel, client: ClientModel | None, members: list) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        client_id=project.client_id,
        client_name=client.name if client else None,
        client_company=client.company if client else None,
        name=project.name,
        description=project.description,
        status=project.status,
        start_date=project.start_date,
        end_date=project.end_date,
        payment_type=project.payment_type,
        budget=_money(project.budget),
        hourly_rate=_money(project.hourly_rate),
        personal_project=project.personal_project,
        notes=project.notes,
        created_at=project.created_at,
        members=[_member_response(m) for m in members],
    )


def _detail(db: Session, project_id: int, account_id: int) -> ProjectResponse:
    row = ProjectReadService(db).get_project(project_id, account_id)
    return _to_response(row["project"], row["client"], row["members"])


# === Projects ===

@router.get("", response_model=list[ProjectResponse])
def list_projects(
    request: Request,
    status: str | None = Query(default=None),
    client_id: int | None = Query(default=None, alias="clientId"),
    db: Session = Depends(get_db),
):
    """Projects, newest first, each with its active members"""
    user = get_current_user(request, db)
    rows = ProjectReadService(db).list_projects(user.id, status=status, client_id=client_id)
    return [_to_response(r["project"], r["client"], r["members"]) for r in rows]


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(request: Request, req: ProjectRequest, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    fields = req.model_dump(exclude_unset=True)
    name = fields.pop("name", None)
    project = CreateProjectUseCase(db).execute(user.id, name, **fields)
    return _detail(db, project.id, user.id)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(request: Request, project_id: int, db: Session = Depends(get_db)):
    """Project with client and every member, including inactive ones"""
    user = get_current_user(request, db)
    return _detail(db, project_id, user.id)


@router.api_route("/{project_id}", methods=["PATCH", "PUT"], response_model=ProjectResponse)
def update_project(request: Request, project_id: int, req: ProjectRequest, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    UpdateProjectUseCase(db).execute(project_id, user.id, **req.model_dump(exclude_unset=True))
    return _detail(db, project_id, user.id)


@router.delete("/{project_id}")
def delete_project(request: Request, project_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    DeleteProjectUseCase(db).execute(project_id, user.id)
    return {"success": True}


# === Members ===

@router.get("/{project_id}/members", response_model=list[MemberResponse])
def list_members(request: Request, project_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    members = ListProjectMembersUseCase(db).execute(project_id, user.id)
    return [_member_response(m) for m in members]


@router.post("/{project_id}/members", response_model=MemberResponse, status_code=201)
def add_member(request: Request, project_id: int, req: AddMemberRequest, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    member = AddProjectMemberUseCase(db).execute(project_id, user.id, **req.model_dump(exclude_unset=True))
    return _member_response(member)


@router.patch("/{project_id}/members/{member_id}", response_model=MemberResponse)
def update_member(
    request: Request,
    project_id: int,
    member_id: int,
    req: UpdateMemberRequest,
    db: Session = Depends(get_db),
):
    user = get_current_user(request, db)
    member = UpdateProjectMemberUseCase(db).execute(
        project_id, member_id, user.id, **req.model_dump(exclude_unset=True)
    )
    return _member_response(member)


@router.delete("/{project_id}/members/{member_id}")
def remove_member(request: Request, project_id: int, member_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    RemoveProjectMemberUseCase(db).execute(project_id, member_id, user.id)
    return {"success": True}
