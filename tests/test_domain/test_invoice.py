"""
Tests for invoice domain rules
"""
from decimal import Decimal

import pytest

from app.domain.invoice import (
    INVOICE_STATUSES, can_transition, timestamp_field_for,
    prefixed_sequence, first_digit_run, format_invoice_number, compute_totals,
)


class TestPrefixedSequence:
    def test_prefixed_number(self):
        assert prefixed_sequence("INV-009") == 9

    def test_prefix_found_after_other_digits(self):
        assert prefixed_sequence("2024 INV-015") == 15

    def test_free_form_number_has_no_sequence(self):
        assert prefixed_sequence("PO 2024/17") is None
        assert prefixed_sequence("ACME/7") is None

    def test_custom_prefix(self):
        assert prefixed_sequence("BILL-120", prefix="BILL") == 120
        assert prefixed_sequence("INV-120", prefix="BILL") is None


class TestFirstDigitRun:
    def test_any_digits(self):
        assert first_digit_run("ACME/7") == 7

    def test_first_run_only(self):
        assert first_digit_run("A12-B34") == 12

    def test_no_digits(self):
        assert first_digit_run("draft") is None


class TestFormatInvoiceNumber:
    def test_zero_padded(self):
        assert format_invoice_number(1) == "INV-001"
        assert format_invoice_number(10) == "INV-010"

    def test_never_truncates(self):
        assert format_invoice_number(1000) == "INV-1000"

    def test_custom_prefix_and_width(self):
        assert format_invoice_number(5, prefix="BILL", width=5) == "BILL-00005"


class TestComputeTotals:
    def test_no_tax(self):
        assert compute_totals(Decimal("1500"), 0) == (Decimal("0.00"), Decimal("1500.00"))

    def test_with_tax(self):
        assert compute_totals(Decimal("100"), 20) == (Decimal("20.00"), Decimal("120.00"))

    def test_rounds_half_up_to_cents(self):
        tax, total = compute_totals(Decimal("10.05"), 5)
        assert tax == Decimal("0.50")
        assert total == Decimal("10.55")


class TestStatusRules:
    @pytest.mark.parametrize("current", INVOICE_STATUSES)
    @pytest.mark.parametrize("new", INVOICE_STATUSES)
    def test_all_transitions_open(self, current, new):
        assert can_transition(current, new)

    def test_unknown_status_cannot_transition(self):
        assert not can_transition("bogus", "paid")

    def test_timestamp_fields(self):
        assert timestamp_field_for("sent") == "sent_date"
        assert timestamp_field_for("paid") == "paid_date"
        assert timestamp_field_for("draft") is None
        assert timestamp_field_for("overdue") is None
        assert timestamp_field_for(None) is None
