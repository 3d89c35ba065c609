"""
Invoice API endpoints
"""
from datetime import date as date_type, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.invoice_numbers import InvoiceNumberGenerator
from app.application.invoices import (
    CreateInvoiceUseCase, UpdateInvoiceUseCase, GetInvoiceUseCase,
    ListInvoicesUseCase, DeleteInvoiceUseCase,
)
from app.domain.invoice import compute_totals
from app.infrastructure.db.models import ClientModel, InvoiceModel
from app.utils.money import format_money


router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


# === Request/Response models ===

class CreateInvoiceRequest(BaseModel):
    client_id: int | None = None
    invoice_number: str | None = None  # generated when omitted
    title: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    tax_rate: float | None = None
    status: str | None = None
    issue_date: date_type | None = None
    due_date: date_type | None = None
    notes: str | None = None


class UpdateInvoiceRequest(BaseModel):
    """sent_date / paid_date are deliberately absent: they follow status."""
    client_id: int | None = None
    invoice_number: str | None = None
    title: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    tax_rate: float | None = None
    status: str | None = None
    issue_date: date_type | None = None
    due_date: date_type | None = None
    notes: str | None = None


class InvoiceResponse(BaseModel):
    id: int
    client_id: int
    client_name: str | None
    client_company: str | None
    invoice_number: str
    title: str
    description: str | None
    amount: str          # Decimal as string
    currency: str
    tax_rate: float
    tax_amount: str
    total: str
    total_display: str   # e.g. "$1,200.00"
    status: str
    issue_date: date_type
    due_date: date_type
    sent_date: datetime | None
    paid_date: datetime | None
    notes: str | None
    created_at: datetime | None


class NextInvoiceNumberResponse(BaseModel):
    nextInvoiceNumber: str


def _to_response(invoice: InvoiceModel, client: ClientModel | None) -> InvoiceResponse:
    tax_amount, total = compute_totals(invoice.amount, invoice.tax_rate)
    return InvoiceResponse(
        id=invoice.id,
        client_id=invoice.client_id,
        client_name=client.name if client else None,
        client_company=client.company if client else None,
        invoice_number=invoice.invoice_number,
        title=invoice.title,
        description=invoice.description,
        amount=str(invoice.amount),
        currency=invoice.currency,
        tax_rate=invoice.tax_rate,
        tax_amount=str(tax_amount),
        total=str(total),
        total_display=format_money(total, invoice.currency),
        status=invoice.status,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        sent_date=invoice.sent_date,
        paid_date=invoice.paid_date,
        notes=invoice.notes,
        created_at=invoice.created_at,
    )


def _clients_by_id(db: Session, account_id: int) -> dict[int, ClientModel]:
    clients = db.query(ClientModel).filter(ClientModel.account_id == account_id).all()
    return {c.id: c for c in clients}


def _single_response(db: Session, invoice: InvoiceModel) -> InvoiceResponse:
    client = db.query(ClientModel).filter(
        ClientModel.id == invoice.client_id,
        ClientModel.account_id == invoice.account_id,
    ).first()
    return _to_response(invoice, client)


# === Endpoints ===

@router.get("")
def list_invoices(
    request: Request,
    next_number: bool = Query(default=False, alias="nextNumber"),
    status: str | None = None,
    db: Session = Depends(get_db),
):
    """
    List invoices (newest first, optional ?status=)

    With ?nextNumber=true returns {"nextInvoiceNumber": "..."} instead;
    nothing is reserved.
    """
    user = get_current_user(request, db)

    if next_number:
        number = InvoiceNumberGenerator(db).next_number(user.id)
        return NextInvoiceNumberResponse(nextInvoiceNumber=number)

    invoices = ListInvoicesUseCase(db).execute(user.id, status=status)
    clients = _clients_by_id(db, user.id)
    return [_to_response(inv, clients.get(inv.client_id)) for inv in invoices]


@router.post("", response_model=InvoiceResponse, status_code=201)
def create_invoice(
    request: Request,
    req: CreateInvoiceRequest,
    db: Session = Depends(get_db),
):
    """Create an invoice; the number is generated when not given"""
    user = get_current_user(request, db)
    invoice = CreateInvoiceUseCase(db).execute(
        account_id=user.id,
        client_id=req.client_id,
        title=req.title,
        amount=req.amount,
        issue_date=req.issue_date,
        due_date=req.due_date,
        invoice_number=req.invoice_number,
        currency=req.currency,
        tax_rate=req.tax_rate,
        status=req.status,
        description=req.description,
        notes=req.notes,
    )
    return _single_response(db, invoice)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    request: Request,
    invoice_id: int,
    db: Session = Depends(get_db),
):
    user = get_current_user(request, db)
    return _single_response(db, GetInvoiceUseCase(db).execute(invoice_id, user.id))


@router.api_route("/{invoice_id}", methods=["PATCH", "PUT"], response_model=InvoiceResponse)
def update_invoice(
    request: Request,
    invoice_id: int,
    req: UpdateInvoiceRequest,
    db: Session = Depends(get_db),
):
    """Partial update; status sent/paid stamps sent_date/paid_date"""
    user = get_current_user(request, db)
    changes = req.model_dump(exclude_unset=True)
    invoice = UpdateInvoiceUseCase(db).execute(invoice_id, user.id, **changes)
    return _single_response(db, invoice)


@router.delete("/{invoice_id}")
def delete_invoice(
    request: Request,
    invoice_id: int,
    db: Session = Depends(get_db),
):
    user = get_current_user(request, db)
    DeleteInvoiceUseCase(db).execute(invoice_id, user.id)
    return {"success": True}
