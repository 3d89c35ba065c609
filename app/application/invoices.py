"""
Invoice use cases.

Status side effects (applied whenever the new status is sent in the change set,
whether or not it differs from the current one):
  - status -> sent : sent_date = now
  - status -> paid : paid_date = now
Stamps are historical markers and are never cleared by later changes.
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from app.application.clients import get_owned_client
from app.application.errors import ValidationError, NotFoundError, persistence_guard
from app.application.invoice_numbers import InvoiceNumberGenerator
from app.config import get_settings
from app.domain.invoice import (
    INVOICE_STATUSES, INVOICE_STATUS_DRAFT, SUPPORTED_CURRENCIES, MAX_TAX_RATE,
    can_transition, timestamp_field_for,
)
from app.infrastructure.db.models import InvoiceModel
from app.utils.validation import validate_and_normalize_amount, parse_iso_date

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "client_id", "invoice_number", "title", "description", "amount", "currency",
    "tax_rate", "status", "issue_date", "due_date", "notes",
)


class InvoiceValidationError(ValidationError):
    pass


class InvoiceNotFoundError(NotFoundError):
    pass


# ----------------------------------------------------------------------
# Field validation
# ----------------------------------------------------------------------

def _parse_amount(value) -> Decimal:
    if value is None or value == "":
        raise InvoiceValidationError("amount is required")
    try:
        amount = validate_and_normalize_amount(value)
    except ValueError as e:
        raise InvoiceValidationError(f"amount: {e}")
    if amount < 0:
        raise InvoiceValidationError("amount cannot be negative")
    return amount


def _parse_tax_rate(value) -> float:
    try:
        rate = float(value)
    except (TypeError, ValueError):
        raise InvoiceValidationError("tax_rate must be a number")
    if not 0 <= rate <= MAX_TAX_RATE:
        raise InvoiceValidationError(f"tax_rate must be between 0 and {MAX_TAX_RATE:g}")
    return rate


def _parse_currency(value) -> str:
    code = (value or "").strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        raise InvoiceValidationError(f"Unsupported currency: {value}. Use one of {', '.join(SUPPORTED_CURRENCIES)}")
    return code


def _parse_status(value) -> str:
    if value not in INVOICE_STATUSES:
        raise InvoiceValidationError(f"Invalid status: {value}. Use one of {', '.join(INVOICE_STATUSES)}")
    return value


def _parse_day(value, field: str) -> date:
    if value is None or value == "":
        raise InvoiceValidationError(f"{field} is required")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise InvoiceValidationError(f"{field} must be a YYYY-MM-DD date")


def _require_text(value, field: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise InvoiceValidationError(f"{field} is required")
    return text


def _check_dates(issue_date: date, due_date: date) -> None:
    if due_date < issue_date:
        raise InvoiceValidationError("due_date cannot be before issue_date")


def _stamp_status(invoice: InvoiceModel, status: str) -> None:
    field = timestamp_field_for(status)
    if field:
        setattr(invoice, field, datetime.now(timezone.utc))


def get_owned_invoice(db: Session, invoice_id: int, account_id: int) -> InvoiceModel:
    invoice = db.query(InvoiceModel).filter(
        InvoiceModel.id == invoice_id,
        InvoiceModel.account_id == account_id,
    ).first()
    if not invoice:
        raise InvoiceNotFoundError(f"Invoice #{invoice_id} not found")
    return invoice


def _number_taken(db: Session, account_id: int, number: str, exclude_id: int | None = None) -> bool:
    query = db.query(InvoiceModel.id).filter(
        InvoiceModel.account_id == account_id,
        InvoiceModel.invoice_number == number,
    )
    if exclude_id is not None:
        query = query.filter(InvoiceModel.id != exclude_id)
    return query.first() is not None


# ----------------------------------------------------------------------
# Use cases
# ----------------------------------------------------------------------

class CreateInvoiceUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        client_id: int | None,
        title: str | None,
        amount,
        issue_date,
        due_date,
        invoice_number: str | None = None,
        currency: str | None = None,
        tax_rate=None,
        status: str | None = None,
        description: str | None = None,
        notes: str | None = None,
    ) -> InvoiceModel:
        if client_id is None:
            raise InvoiceValidationError("client_id is required")
        title = _require_text(title, "title")
        amount = _parse_amount(amount)
        issue_date = _parse_day(issue_date, "issue_date")
        due_date = _parse_day(due_date, "due_date")
        _check_dates(issue_date, due_date)
        currency = _parse_currency(currency or get_settings().BASE_CURRENCY)
        tax_rate = _parse_tax_rate(tax_rate if tax_rate is not None else 0)
        status = _parse_status(status or INVOICE_STATUS_DRAFT)

        get_owned_client(self.db, client_id, account_id)

        invoice_number = (invoice_number or "").strip()
        if not invoice_number:
            invoice_number = InvoiceNumberGenerator(self.db).next_number(account_id)
        elif _number_taken(self.db, account_id, invoice_number):
            raise InvoiceValidationError(f"Invoice number {invoice_number} already exists")

        invoice = InvoiceModel(
            account_id=account_id,
            client_id=client_id,
            invoice_number=invoice_number,
            title=title,
            description=description,
            amount=amount,
            currency=currency,
            tax_rate=tax_rate,
            status=status,
            issue_date=issue_date,
            due_date=due_date,
            notes=notes,
        )
        _stamp_status(invoice, status)

        with persistence_guard(self.db, "create invoice"):
            self.db.add(invoice)
            self.db.flush()

        logger.info("Invoice %s created for account=%d client=%d", invoice_number, account_id, client_id)
        return invoice


class UpdateInvoiceUseCase:
    """
    Partial update. sent_date / paid_date are not accepted from callers;
    they only change through the status side effects.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, invoice_id: int, account_id: int, **changes) -> InvoiceModel:
        invoice = get_owned_invoice(self.db, invoice_id, account_id)
        changes = {key: changes[key] for key in UPDATABLE_FIELDS if key in changes}

        if "client_id" in changes:
            if changes["client_id"] is None:
                raise InvoiceValidationError("client_id cannot be empty")
            get_owned_client(self.db, changes["client_id"], account_id)
        if "invoice_number" in changes:
            number = _require_text(changes["invoice_number"], "invoice_number")
            if _number_taken(self.db, account_id, number, exclude_id=invoice.id):
                raise InvoiceValidationError(f"Invoice number {number} already exists")
            changes["invoice_number"] = number
        if "title" in changes:
            changes["title"] = _require_text(changes["title"], "title")
        if "amount" in changes:
            changes["amount"] = _parse_amount(changes["amount"])
        if "currency" in changes:
            changes["currency"] = _parse_currency(changes["currency"])
        if "tax_rate" in changes:
            changes["tax_rate"] = _parse_tax_rate(changes["tax_rate"])
        if "issue_date" in changes:
            changes["issue_date"] = _parse_day(changes["issue_date"], "issue_date")
        if "due_date" in changes:
            changes["due_date"] = _parse_day(changes["due_date"], "due_date")
        if "issue_date" in changes or "due_date" in changes:
            _check_dates(
                changes.get("issue_date", invoice.issue_date),
                changes.get("due_date", invoice.due_date),
            )
        if "status" in changes:
            new_status = _parse_status(changes["status"])
            if not can_transition(invoice.status, new_status):
                raise InvoiceValidationError(f"Cannot change status from {invoice.status} to {new_status}")

        with persistence_guard(self.db, "update invoice"):
            for key, value in changes.items():
                setattr(invoice, key, value)
            if "status" in changes:
                _stamp_status(invoice, changes["status"])
        return invoice


class GetInvoiceUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, invoice_id: int, account_id: int) -> InvoiceModel:
        return get_owned_invoice(self.db, invoice_id, account_id)


class ListInvoicesUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, status: str | None = None) -> list[InvoiceModel]:
        query = self.db.query(InvoiceModel).filter(InvoiceModel.account_id == account_id)
        if status:
            query = query.filter(InvoiceModel.status == _parse_status(status))
        return query.order_by(InvoiceModel.created_at.desc(), InvoiceModel.id.desc()).all()


class DeleteInvoiceUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, invoice_id: int, account_id: int) -> None:
        invoice = get_owned_invoice(self.db, invoice_id, account_id)
        with persistence_guard(self.db, "delete invoice"):
            self.db.delete(invoice)
