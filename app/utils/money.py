"""
Unified money formatting for the whole project (display only, no conversion).

Usage:
    from app.utils.money import format_money

    format_money(1500, "USD")      -> "$1,500.00"
    format_money(1200.5, "EUR")    -> "€1,200.50"
    format_money(15000, "JPY")     -> "¥15,000"
"""
from decimal import Decimal, ROUND_HALF_UP

_CURRENCY_SYMBOL = {
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
    "CAD": "C$",
    "AUD": "A$",
    "JPY": "¥",
}

# Currencies shown without minor units
_ZERO_DECIMAL = {"JPY"}

DEFAULT_CURRENCY = "USD"


def currency_symbol(code: str) -> str:
    """Display symbol for a currency code; unknown codes fall back to USD."""
    return _CURRENCY_SYMBOL.get(code, _CURRENCY_SYMBOL[DEFAULT_CURRENCY])


def format_money(amount, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount with thousands separators and a currency symbol.

    Args:
        amount: int / float / Decimal / str
        currency: ISO code (USD, GBP, EUR, CAD, AUD, JPY); unknown -> USD

    Returns:
        "$1,500.00" / "¥15,000"
    """
    if currency not in _CURRENCY_SYMBOL:
        currency = DEFAULT_CURRENCY
    decimals = 0 if currency in _ZERO_DECIMAL else 2
    value = Decimal(str(amount)).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    formatted = f"{abs(value):,.{decimals}f}"
    return f"{sign}{currency_symbol(currency)}{formatted}"
