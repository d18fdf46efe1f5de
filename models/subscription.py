"""
models/subscription.py
----------------------
Domain model for tracked subscriptions (recurring-payment services).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

BILLING_CYCLES = ("Monthly", "Quarterly", "Semi-Annually", "Annually")
STATUSES = ("active", "expired", "renewing soon", "canceled")
REMINDER_OPTIONS = ("None", "1 day before", "3 days before", "1 week before")
CATEGORIES = (
    "Entertainment",
    "Software",
    "Music",
    "Shopping",
    "Gaming",
    "Productivity",
    "Other",
)

STATUS_ACTIVE = "active"
STATUS_RENEWING_SOON = "renewing soon"
REMINDER_NONE = "None"

# Lead time in days for each reminder option
REMINDER_LEAD_DAYS = {
    "1 day before": 1,
    "3 days before": 3,
    "1 week before": 7,
}


@dataclass
class Subscription:
    """
    Represents a recurring-payment service tracked by one user.

    Attributes:
        user_id: ID of the owning user.
        name: Service name (e.g., 'Netflix').
        category: One of CATEGORIES.
        plan: Free-text plan name (e.g., 'Premium').
        amount: Payment amount per billing cycle, in the owner's display currency.
        billing_cycle: One of BILLING_CYCLES.
        next_payment_date: Timezone-aware timestamp of the next renewal.
        status: One of STATUSES.
        reminder: One of REMINDER_OPTIONS, or None to use the owner's default.
        notes: Optional free text.
        id: Database primary key (None for new records).
        created_at: Timestamp when the record was created.
    """
    user_id: int
    name: str
    category: str
    plan: str
    amount: float
    billing_cycle: str
    next_payment_date: datetime
    status: str = STATUS_ACTIVE
    reminder: Optional[str] = REMINDER_NONE
    notes: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """JSON-ready representation used by the REST API."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "category": self.category,
            "plan": self.plan,
            "amount": _json_amount(self.amount),
            "billing_cycle": self.billing_cycle,
            "next_payment_date": _iso(self.next_payment_date),
            "status": self.status,
            "reminder": self.reminder,
            "notes": self.notes,
            "created_at": _iso(self.created_at),
        }

    def __str__(self) -> str:
        return f"{self.name}: {self.amount} ({self.billing_cycle}) - Next: {self.next_payment_date:%Y-%m-%d}"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _json_amount(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return value
