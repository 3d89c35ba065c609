"""
Client API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.clients import (
    CreateClientUseCase, UpdateClientUseCase, GetClientUseCase,
    ListClientsUseCase, DeleteClientUseCase,
)
from app.infrastructure.db.models import ClientModel


router = APIRouter(prefix="/api/v1/clients", tags=["clients"])


class ClientRequest(BaseModel):
    name: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class ClientResponse(BaseModel):
    id: int
    name: str
    company: str | None
    email: str | None
    phone: str | None
    address: str | None
    notes: str | None
    created_at: datetime | None


class ClientListItem(ClientResponse):
    invoice_count: int
    outstanding: dict[str, str]  # currency -> amount still owed


def _to_response(client: ClientModel) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        company=client.company,
        email=client.email,
        phone=client.phone,
        address=client.address,
        notes=client.notes,
        created_at=client.created_at,
    )


@router.get("", response_model=list[ClientListItem])
def list_clients(request: Request, db: Session = Depends(get_db)):
    """Clients, newest first, with invoice count and outstanding totals"""
    user = get_current_user(request, db)
    rows = ListClientsUseCase(db).execute(user.id)
    return [
        ClientListItem(
            **_to_response(row["client"]).model_dump(),
            invoice_count=row["invoice_count"],
            outstanding={code: str(amount) for code, amount in row["outstanding"].items()},
        )
        for row in rows
    ]


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(request: Request, req: ClientRequest, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    fields = req.model_dump(exclude_unset=True)
    name = fields.pop("name", None)
    client = CreateClientUseCase(db).execute(user.id, name, **fields)
    return _to_response(client)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(request: Request, client_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    return _to_response(GetClientUseCase(db).execute(client_id, user.id))


@router.api_route("/{client_id}", methods=["PATCH", "PUT"], response_model=ClientResponse)
def update_client(request: Request, client_id: int, req: ClientRequest, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    changes = req.model_dump(exclude_unset=True)
    return _to_response(UpdateClientUseCase(db).execute(client_id, user.id, **changes))


@router.delete("/{client_id}")
def delete_client(request: Request, client_id: int, db: Session = Depends(get_db)):
    user = get_current_user(request, db)
    DeleteClientUseCase(db).execute(client_id, user.id)
    return {"success": True}
