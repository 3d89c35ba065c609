"""Tests for invoice use cases - validation, numbering and status stamps."""
from datetime import date, datetime
from decimal import Decimal

import pytest

from app.infrastructure.db.models import InvoiceModel
from app.application.clients import CreateClientUseCase, ClientNotFoundError
from app.application.invoices import (
    CreateInvoiceUseCase, UpdateInvoiceUseCase, GetInvoiceUseCase,
    ListInvoicesUseCase, DeleteInvoiceUseCase,
    InvoiceValidationError, InvoiceNotFoundError,
)

ACCOUNT = 1


@pytest.fixture
def client_id(db_session):
    return CreateClientUseCase(db_session).execute(ACCOUNT, "Acme").id


def _invoice(db, client_id, **overrides):
    params = dict(
        account_id=ACCOUNT,
        client_id=client_id,
        title="Website redesign",
        amount="1500",
        issue_date=date(2024, 1, 1),
        due_date=date(2024, 1, 31),
    )
    params.update(overrides)
    return CreateInvoiceUseCase(db).execute(**params)


class TestCreateInvoice:
    def test_defaults(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        assert invoice.invoice_number == "INV-001"
        assert invoice.status == "draft"
        assert invoice.currency == "USD"
        assert invoice.tax_rate == 0
        assert invoice.amount == Decimal("1500.00")
        assert invoice.sent_date is None
        assert invoice.paid_date is None

    def test_sequential_numbers(self, db_session, client_id):
        _invoice(db_session, client_id)
        second = _invoice(db_session, client_id)
        assert second.invoice_number == "INV-002"

    def test_explicit_number_kept(self, db_session, client_id):
        invoice = _invoice(db_session, client_id, invoice_number="INV-100")
        assert invoice.invoice_number == "INV-100"
        assert _invoice(db_session, client_id).invoice_number == "INV-101"

    def test_duplicate_number_rejected(self, db_session, client_id):
        _invoice(db_session, client_id, invoice_number="INV-005")
        with pytest.raises(InvoiceValidationError, match="already exists"):
            _invoice(db_session, client_id, invoice_number="INV-005")

    def test_created_as_sent_is_stamped(self, db_session, client_id):
        invoice = _invoice(db_session, client_id, status="sent")
        assert invoice.sent_date is not None
        assert invoice.paid_date is None

    def test_currency_normalized(self, db_session, client_id):
        assert _invoice(db_session, client_id, currency="eur").currency == "EUR"

    def test_unsupported_currency(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="currency"):
            _invoice(db_session, client_id, currency="BTC")

    def test_negative_amount(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="negative"):
            _invoice(db_session, client_id, amount="-1")

    def test_malformed_amount(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="amount"):
            _invoice(db_session, client_id, amount="lots")

    def test_missing_amount(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="amount is required"):
            _invoice(db_session, client_id, amount=None)

    def test_tax_rate_range(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="tax_rate"):
            _invoice(db_session, client_id, tax_rate=120)

    def test_due_before_issue(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="due_date"):
            _invoice(db_session, client_id, due_date=date(2023, 12, 1))

    def test_missing_title(self, db_session, client_id):
        with pytest.raises(InvoiceValidationError, match="title is required"):
            _invoice(db_session, client_id, title="  ")

    def test_unknown_client(self, db_session):
        with pytest.raises(ClientNotFoundError):
            _invoice(db_session, 999)

    def test_missing_client(self, db_session):
        with pytest.raises(InvoiceValidationError, match="client_id"):
            _invoice(db_session, None)


class TestUpdateInvoice:
    def test_status_sent_stamps_sent_date(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        UpdateInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT, status="sent")
        assert invoice.status == "sent"
        assert invoice.sent_date is not None
        assert invoice.paid_date is None

    def test_status_paid_stamps_paid_date_and_keeps_sent(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        update = UpdateInvoiceUseCase(db_session)
        update.execute(invoice.id, ACCOUNT, status="sent")
        sent_at = invoice.sent_date
        update.execute(invoice.id, ACCOUNT, status="paid")

        assert invoice.paid_date is not None
        assert invoice.sent_date == sent_at

    def test_reopen_paid_as_sent_restamps_sent_date(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        update = UpdateInvoiceUseCase(db_session)
        update.execute(invoice.id, ACCOUNT, status="sent")
        update.execute(invoice.id, ACCOUNT, status="paid")

        # Age the first stamp so the re-stamp is observable
        old_sent = datetime(2024, 1, 2, 9, 0)
        invoice.sent_date = old_sent
        db_session.commit()
        paid_at = invoice.paid_date

        update.execute(invoice.id, ACCOUNT, status="sent")

        assert invoice.status == "sent"
        assert invoice.sent_date is not None
        assert invoice.sent_date.replace(tzinfo=None) > old_sent
        assert invoice.paid_date == paid_at

    @pytest.mark.parametrize("status", ["draft", "overdue", "cancelled"])
    def test_other_statuses_leave_stamps(self, db_session, client_id, status):
        invoice = _invoice(db_session, client_id)
        UpdateInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT, status=status)
        assert invoice.status == status
        assert invoice.sent_date is None
        assert invoice.paid_date is None

    def test_non_status_update_keeps_stamps(self, db_session, client_id):
        invoice = _invoice(db_session, client_id, status="sent")
        sent_at = invoice.sent_date
        UpdateInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT, notes="chased by phone")
        assert invoice.sent_date == sent_at
        assert invoice.notes == "chased by phone"

    def test_stamps_not_writable(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        UpdateInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT, paid_date="2024-01-02")
        assert invoice.paid_date is None

    def test_invalid_status(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        with pytest.raises(InvoiceValidationError, match="status"):
            UpdateInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT, status="void")

    def test_renumber_conflict(self, db_session, client_id):
        _invoice(db_session, client_id)
        second = _invoice(db_session, client_id)
        with pytest.raises(InvoiceValidationError, match="already exists"):
            UpdateInvoiceUseCase(db_session).execute(second.id, ACCOUNT, invoice_number="INV-001")

    def test_due_date_checked_against_stored_issue_date(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        with pytest.raises(InvoiceValidationError, match="due_date"):
            UpdateInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT, due_date="2023-06-01")

    def test_unknown_invoice(self, db_session):
        with pytest.raises(InvoiceNotFoundError):
            UpdateInvoiceUseCase(db_session).execute(404, ACCOUNT, status="sent")


class TestListAndDelete:
    def test_newest_first_and_status_filter(self, db_session, client_id):
        first = _invoice(db_session, client_id)
        second = _invoice(db_session, client_id, status="sent")

        ids = [i.id for i in ListInvoicesUseCase(db_session).execute(ACCOUNT)]
        assert ids == [second.id, first.id]

        sent = ListInvoicesUseCase(db_session).execute(ACCOUNT, status="sent")
        assert [i.id for i in sent] == [second.id]

    def test_other_owner_hidden(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        with pytest.raises(InvoiceNotFoundError):
            GetInvoiceUseCase(db_session).execute(invoice.id, 2)
        assert ListInvoicesUseCase(db_session).execute(2) == []

    def test_delete(self, db_session, client_id):
        invoice = _invoice(db_session, client_id)
        DeleteInvoiceUseCase(db_session).execute(invoice.id, ACCOUNT)
        assert db_session.query(InvoiceModel).count() == 0
