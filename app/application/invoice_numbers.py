"""
Invoice number generator.

Read-only: computes the next number without reserving it, so it backs both
the "preview next number" endpoint and invoice creation without an explicit
number.

Sequences are compared as integers, not as strings: INV-1000 follows INV-999
even though "INV-999" > "INV-1000" lexicographically.
"""
import time

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.invoice import prefixed_sequence, first_digit_run, format_invoice_number
from app.infrastructure.db.models import InvoiceModel


class InvoiceNumberGenerator:
    def __init__(self, db: Session, prefix: str | None = None, width: int | None = None):
        self.db = db
        settings = get_settings()
        self.prefix = prefix or settings.INVOICE_PREFIX
        self.width = width or settings.INVOICE_NUMBER_WIDTH

    def next_number(self, account_id: int) -> str:
        """
        INV-001 for the first invoice, otherwise highest "INV-<n>" sequence + 1.

        Free-form numbers only count when no number has the prefixed form:
        then the highest first run of digits is used, and failing that a
        millisecond timestamp.
        """
        numbers = [
            row[0] for row in
            self.db.query(InvoiceModel.invoice_number)
            .filter(InvoiceModel.account_id == account_id)
            .all()
        ]
        if not numbers:
            return format_invoice_number(1, self.prefix, self.width)

        sequences = self._sequences(numbers, lambda n: prefixed_sequence(n, self.prefix))
        if not sequences:
            sequences = self._sequences(numbers, first_digit_run)
        if not sequences:
            return f"{self.prefix}-{int(time.time() * 1000)}"

        return format_invoice_number(max(sequences) + 1, self.prefix, self.width)

    @staticmethod
    def _sequences(numbers: list[str], parse) -> list[int]:
        return [seq for seq in map(parse, numbers) if seq is not None]
