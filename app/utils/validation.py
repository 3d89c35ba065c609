"""
Validation utilities
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation


def normalize_decimal_input(value: str) -> str:
    """
    Normalize an amount: comma decimal separator becomes a dot

    Example:
        >>> normalize_decimal_input("100,50")
        '100.50'
        >>> normalize_decimal_input("100.50")
        '100.50'
    """
    return value.replace(",", ".")


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Validate a money amount

    Args:
        value: amount as string
        max_decimal_places: digits allowed after the separator (default 2)

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, 'At most 2 decimal places')
    """
    normalized = normalize_decimal_input(value)

    try:
        Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Invalid amount"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"At most {max_decimal_places} decimal places"

    return True, None


def validate_and_normalize_amount(value, max_decimal_places: int = 2) -> Decimal:
    """
    Validate an amount (str / int / float / Decimal) and return it as Decimal

    Raises:
        ValueError: if the amount is malformed

    Example:
        >>> validate_and_normalize_amount("100,50")
        Decimal('100.50')
    """
    # Plain notation: str(1e20) would be "1e+20"
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = Decimal(str(value))
    if isinstance(value, Decimal):
        value = format(value, "f")
    is_valid, error = validate_decimal_amount(str(value), max_decimal_places)
    if not is_valid:
        raise ValueError(error)

    return Decimal(normalize_decimal_input(str(value)))


def parse_iso_date(value) -> date:
    """
    Accept a date or a "YYYY-MM-DD" string (a trailing time part is ignored)

    Raises:
        ValueError: if the value is not a calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")
    return date.fromisoformat(value.strip()[:10])


def parse_optional_amount(value) -> Decimal | None:
    """
    Optional non-negative money value (rates, budgets)

    None / "" -> None; otherwise validated like any amount.

    Raises:
        ValueError: malformed or negative
    """
    if value is None or value == "":
        return None
    amount = validate_and_normalize_amount(value)
    if amount < 0:
        raise ValueError("cannot be negative")
    return amount
