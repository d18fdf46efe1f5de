"""
utils/validators.py
-------------------
Boundary validation: untrusted request data is parsed into typed
domain values exactly once, or rejected with a ValidationError.
"""

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

import pytz
from dateutil import parser as date_parser

from models.subscription import (
    BILLING_CYCLES,
    CATEGORIES,
    REMINDER_NONE,
    REMINDER_OPTIONS,
    STATUS_ACTIVE,
    STATUSES,
)
from models.user import CURRENCIES
from utils.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MAX_NAME_LENGTH = 100
MAX_USERNAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_NOTES_LENGTH = 1000
MAX_REMINDER_DAYS = 365

# NUMERIC(12,2)
AMOUNT_STEP = Decimal("0.01")
MAX_AMOUNT = Decimal(10) ** 10


def _required_text(data: dict, field: str, max_length: int = MAX_NAME_LENGTH) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field)
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", field)
    return value


def _choice(value: Any, field: str, options: tuple) -> str:
    if value not in options:
        raise ValidationError(f"{field} must be one of: {', '.join(options)}", field)
    return value


def parse_amount(value: Any) -> float:
    """
    Parse a strictly positive, finite amount, rounded to cents.

    Values that round to 0.00 or do not fit the stored column are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("amount must be a number", "amount")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("amount must be a number", "amount")
    if not amount.is_finite():
        raise ValidationError("amount must be a number", "amount")
    if amount < MAX_AMOUNT:
        amount = amount.quantize(AMOUNT_STEP, rounding=ROUND_HALF_UP)
    if amount >= MAX_AMOUNT:
        raise ValidationError(f"Amount must be less than {MAX_AMOUNT:,}", "amount")
    if amount <= 0:
        raise ValidationError("Amount must be positive", "amount")
    return float(amount)


def parse_datetime(value: Any, tz: pytz.BaseTzInfo, field: str = "next_payment_date") -> datetime:
    """
    Parse an ISO-8601 date or timestamp into an aware datetime.

    Naive values (including plain dates) are taken to be in ``tz``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            raise ValidationError("Invalid date format", field)
    else:
        raise ValidationError(f"{field} is required", field)

    if parsed.tzinfo is None:
        parsed = tz.localize(parsed)
    return parsed


def parse_reminder(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return REMINDER_NONE
    if isinstance(value, str) and value.strip().lower() == "none":
        return REMINDER_NONE
    return _choice(value, "reminder", REMINDER_OPTIONS)


def parse_subscription_payload(data: Any, tz: pytz.BaseTzInfo) -> dict:
    """
    Validate a create/update payload for a subscription.

    Args:
        data: Decoded JSON body.
        tz: Operating timezone used for naive dates.

    Returns:
        Dict with every mutable Subscription field, typed.

    Raises:
        ValidationError: naming the first offending field.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    notes = data.get("notes")
    if notes is not None:
        if not isinstance(notes, str):
            raise ValidationError("notes must be text", "notes")
        if len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"notes must be at most {MAX_NOTES_LENGTH} characters", "notes")
        notes = notes.strip() or None

    status = data.get("status") or STATUS_ACTIVE

    return {
        "name": _required_text(data, "name"),
        "category": _choice(data.get("category"), "category", CATEGORIES),
        "plan": _required_text(data, "plan"),
        "amount": parse_amount(data.get("amount")),
        "billing_cycle": _choice(data.get("billing_cycle"), "billing_cycle", BILLING_CYCLES),
        "next_payment_date": parse_datetime(data.get("next_payment_date"), tz),
        "status": _choice(status, "status", STATUSES),
        "reminder": parse_reminder(data.get("reminder")),
        "notes": notes,
    }


def validate_email(value: Any) -> str:
    """Return the normalized (lower-case) email or raise ValidationError."""
    if not isinstance(value, str) or not _EMAIL_RE.match(value.strip()):
        raise ValidationError("A valid email address is required", "email")
    if len(value.strip()) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"email must be at most {MAX_EMAIL_LENGTH} characters", "email")
    return value.strip().lower()


def validate_username(value: Any) -> str:
    """Return the normalized (lower-case) username or raise ValidationError."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("username is required", "username")
    if len(value.strip()) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"username must be at most {MAX_USERNAME_LENGTH} characters", "username")
    return value.strip().lower()


def parse_settings_payload(data: Any) -> dict:
    """
    Validate a user settings update. Only the keys present are returned.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    settings: dict = {}
    if data.get("currency") is not None:
        currency = data["currency"]
        if isinstance(currency, str):
            currency = currency.strip().upper()
        settings["currency"] = _choice(currency, "currency", CURRENCIES)

    if "email_notifications" in data:
        if not isinstance(data["email_notifications"], bool):
            raise ValidationError("email_notifications must be true or false", "email_notifications")
        settings["email_notifications"] = data["email_notifications"]

    if "reminder_days" in data:
        days = data["reminder_days"]
        if isinstance(days, bool) or not isinstance(days, int):
            raise ValidationError("reminder_days must be a whole number", "reminder_days")
        if not 0 <= days <= MAX_REMINDER_DAYS:
            raise ValidationError(f"reminder_days must be between 0 and {MAX_REMINDER_DAYS}", "reminder_days")
        settings["reminder_days"] = days

    if not settings:
        raise ValidationError("No settings provided")
    return settings


def parse_subscription_id(raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid subscription ID")


def coerce_amount(value: Any) -> Optional[float]:
    """
    Lenient numeric read used by aggregation: None for anything
    that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number
