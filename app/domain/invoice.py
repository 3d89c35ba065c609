"""
Invoice domain rules.

Lifecycle: draft -> sent -> paid / overdue / cancelled. The transition table
below is explicit but open: any status may follow any other, so reopening a
paid invoice as sent is allowed (and re-stamps sent_date).
"""
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, FrozenSet

# Invoice statuses
INVOICE_STATUS_DRAFT = "draft"
INVOICE_STATUS_SENT = "sent"
INVOICE_STATUS_PAID = "paid"
INVOICE_STATUS_OVERDUE = "overdue"
INVOICE_STATUS_CANCELLED = "cancelled"

INVOICE_STATUSES = [
    INVOICE_STATUS_DRAFT,
    INVOICE_STATUS_SENT,
    INVOICE_STATUS_PAID,
    INVOICE_STATUS_OVERDUE,
    INVOICE_STATUS_CANCELLED,
]

# Statuses whose amount is still owed
OUTSTANDING_STATUSES = [INVOICE_STATUS_SENT, INVOICE_STATUS_OVERDUE]

INVOICE_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    status: frozenset(INVOICE_STATUSES) for status in INVOICE_STATUSES
}

# Entering one of these statuses stamps the matching column with "now"
STATUS_TIMESTAMP_FIELDS = {
    INVOICE_STATUS_SENT: "sent_date",
    INVOICE_STATUS_PAID: "paid_date",
}

SUPPORTED_CURRENCIES = ["USD", "GBP", "EUR", "CAD", "AUD", "JPY"]

MAX_TAX_RATE = 100.0

_CENT = Decimal("0.01")


def can_transition(current: str, new: str) -> bool:
    """True if an invoice in `current` status may move to `new`."""
    return new in INVOICE_TRANSITIONS.get(current, frozenset())


def timestamp_field_for(status: str | None) -> str | None:
    """Column stamped when an invoice enters `status`, if any."""
    if status is None:
        return None
    return STATUS_TIMESTAMP_FIELDS.get(status)


def prefixed_sequence(invoice_number: str, prefix: str = "INV") -> int | None:
    """
    Sequence of a "<prefix>-<digits>" number, or None for any other shape.

    >>> prefixed_sequence("INV-042")
    42
    >>> prefixed_sequence("PO 2024/17") is None
    True
    """
    match = re.search(rf"{re.escape(prefix)}-(\d+)", invoice_number)
    return int(match.group(1)) if match else None


def first_digit_run(invoice_number: str) -> int | None:
    """
    First run of digits anywhere in a free-form number.

    >>> first_digit_run("ACME/7")
    7
    >>> first_digit_run("draft") is None
    True
    """
    match = re.search(r"(\d+)", invoice_number)
    return int(match.group(1)) if match else None


def format_invoice_number(sequence: int, prefix: str = "INV", width: int = 3) -> str:
    """
    Render a sequence zero-padded to at least `width` digits; never truncates.

    >>> format_invoice_number(7)
    'INV-007'
    >>> format_invoice_number(1000)
    'INV-1000'
    """
    return f"{prefix}-{sequence:0{width}d}"


def compute_totals(amount: Decimal, tax_rate: float) -> tuple[Decimal, Decimal]:
    """
    Return (tax_amount, total) rounded to cents.

    >>> compute_totals(Decimal("100"), 20)
    (Decimal('20.00'), Decimal('120.00'))
    """
    amount = Decimal(amount)
    tax = (amount * Decimal(str(tax_rate)) / Decimal(100)).quantize(_CENT, rounding=ROUND_HALF_UP)
    total = (amount + tax).quantize(_CENT, rounding=ROUND_HALF_UP)
    return tax, total
