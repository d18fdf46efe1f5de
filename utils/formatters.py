"""
utils/formatters.py
-------------------
Human-readable strings for amounts, dates and lead times.
"""

from datetime import datetime

from utils.validators import coerce_amount

_ZERO_DECIMAL_CURRENCIES = ("JPY",)


def format_amount(amount, currency: str) -> str:
    """e.g. 14.99 + 'EUR' -> '14.99 EUR'; JPY has no minor unit."""
    number = coerce_amount(amount)
    if number is None:
        return f"{amount} {currency}"
    if currency in _ZERO_DECIMAL_CURRENCIES:
        return f"{number:,.0f} {currency}"
    return f"{number:,.2f} {currency}"


def format_payment_date(value: datetime) -> str:
    """e.g. 'June 10, 2024'."""
    return value.strftime("%B %d, %Y")


def lead_time_phrase(days: int) -> str:
    if days == 1:
        return "tomorrow"
    if days == 7:
        return "in one week"
    return f"in {days} days"
