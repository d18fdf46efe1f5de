"""
models/user.py
--------------
Domain model for application users and their preferences.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from config import DEFAULT_CURRENCY, DEFAULT_REMINDER_DAYS

CURRENCIES = ("USD", "EUR", "GBP", "JPY", "CAD", "AUD", "INR", "CNY")


@dataclass
class User:
    """
    An account holder.

    Attributes:
        username: Login name, stored lower-case.
        email: Address reminders are sent to, stored lower-case.
        password_hash: Werkzeug password hash. Never serialized.
        name: Optional display name.
        currency: Display currency, one of CURRENCIES.
        email_notifications: Global opt-out for reminder emails.
        reminder_days: Default reminder lead time when a subscription has none.
        deactivated: Deactivated accounts cannot log in or receive reminders.
    """
    username: str
    email: str
    password_hash: str
    name: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    email_notifications: bool = True
    reminder_days: Optional[int] = DEFAULT_REMINDER_DAYS
    deactivated: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "name": self.name,
            "currency": self.currency,
            "email_notifications": self.email_notifications,
            "reminder_days": self.reminder_days,
            "deactivated": self.deactivated,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
