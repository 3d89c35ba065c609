"""
Client use cases - CRUD of the client directory invoices point at.
"""
from collections import defaultdict
from decimal import Decimal

from sqlalchemy.orm import Session

from app.application.errors import ValidationError, NotFoundError, persistence_guard
from app.domain.invoice import OUTSTANDING_STATUSES, compute_totals
from app.infrastructure.db.models import ClientModel, InvoiceModel

CLIENT_FIELDS = ("name", "company", "email", "phone", "address", "notes")


class ClientValidationError(ValidationError):
    pass


class ClientNotFoundError(NotFoundError):
    pass


def get_owned_client(db: Session, client_id: int, account_id: int) -> ClientModel:
    client = db.query(ClientModel).filter(
        ClientModel.id == client_id,
        ClientModel.account_id == account_id,
    ).first()
    if not client:
        raise ClientNotFoundError(f"Client #{client_id} not found")
    return client


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class CreateClientUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, name: str | None, **fields) -> ClientModel:
        name = (name or "").strip()
        if not name:
            raise ClientValidationError("name is required")

        client = ClientModel(account_id=account_id, name=name)
        for key in CLIENT_FIELDS[1:]:
            if key in fields:
                setattr(client, key, _clean(fields[key]))
        with persistence_guard(self.db, "create client"):
            self.db.add(client)
            self.db.flush()
        return client


class UpdateClientUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, client_id: int, account_id: int, **changes) -> ClientModel:
        client = get_owned_client(self.db, client_id, account_id)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ClientValidationError("name cannot be empty")
            changes["name"] = name

        with persistence_guard(self.db, "update client"):
            for key in CLIENT_FIELDS:
                if key in changes:
                    value = changes[key] if key == "name" else _clean(changes[key])
                    setattr(client, key, value)
        return client


class GetClientUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, client_id: int, account_id: int) -> ClientModel:
        return get_owned_client(self.db, client_id, account_id)


class ListClientsUseCase:
    """Newest clients first, each with its invoice count and outstanding totals per currency."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int) -> list[dict]:
        clients = (
            self.db.query(ClientModel)
            .filter(ClientModel.account_id == account_id)
            .order_by(ClientModel.created_at.desc(), ClientModel.id.desc())
            .all()
        )
        invoices = (
            self.db.query(InvoiceModel)
            .filter(InvoiceModel.account_id == account_id)
            .all()
        )

        counts: dict[int, int] = defaultdict(int)
        outstanding: dict[int, dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
        for inv in invoices:
            counts[inv.client_id] += 1
            if inv.status in OUTSTANDING_STATUSES:
                _, total = compute_totals(inv.amount, inv.tax_rate)
                outstanding[inv.client_id][inv.currency] += total

        return [
            {
                "client": c,
                "invoice_count": counts[c.id],
                "outstanding": dict(outstanding[c.id]),
            }
            for c in clients
        ]


class DeleteClientUseCase:
    """Immediate delete; invoices keep their client_id."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, client_id: int, account_id: int) -> None:
        client = get_owned_client(self.db, client_id, account_id)
        with persistence_guard(self.db, "delete client"):
            self.db.delete(client)
