"""
services/stats_service.py
-------------------------
Dashboard statistics over one user's subscriptions.

`compute_stats` is a pure reduction: no I/O, no ordering dependence,
same input always gives the same output. Bad records (unknown billing
cycle, non-numeric amount, missing date) are skipped rather than raised.
"""

from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from models.stats import SubscriptionStats
from models.subscription import STATUS_ACTIVE, STATUS_RENEWING_SOON, Subscription
from repositories.base import SubscriptionRepository
from utils.logger import get_logger
from utils.validators import coerce_amount

logger = get_logger(__name__)

# Months covered by one payment. Cycles missing here contribute nothing
# to the monthly figure; they are NOT treated as monthly.
MONTHLY_DIVISORS = {
    "Monthly": 1,
    "Quarterly": 3,
    "Semi-Annually": 6,
    "Annually": 12,
}

UPCOMING_WINDOW = timedelta(days=7)

_COSTED_STATUSES = (STATUS_ACTIVE, STATUS_RENEWING_SOON)


def monthly_equivalent(subscription: Subscription) -> float:
    """Amount converted to a per-month rate, or 0.0 if it can't be."""
    divisor = MONTHLY_DIVISORS.get(subscription.billing_cycle)
    amount = coerce_amount(subscription.amount)
    if divisor is None or amount is None:
        return 0.0
    return amount / divisor


def _align(value: datetime, now: datetime) -> datetime:
    if value.tzinfo is None and now.tzinfo is not None:
        return value.replace(tzinfo=now.tzinfo)
    if value.tzinfo is not None and now.tzinfo is None:
        return value.replace(tzinfo=None)
    return value


def is_upcoming(subscription: Subscription, now: datetime) -> bool:
    """True if the next payment falls in the inclusive window [now, now + 7 days]."""
    payment_date: Optional[datetime] = subscription.next_payment_date
    if not isinstance(payment_date, datetime):
        return False
    payment_date = _align(payment_date, now)
    return now <= payment_date <= now + UPCOMING_WINDOW


def compute_stats(subscriptions: Iterable[Subscription], now: datetime) -> SubscriptionStats:
    """
    Aggregate a user's subscriptions.

    Args:
        subscriptions: Every subscription the user owns.
        now: Reference time for the upcoming-renewal window.

    Returns:
        SubscriptionStats where
          - active_count counts status 'active' only;
          - monthly_cost sums monthly equivalents of 'active' and 'renewing soon';
          - upcoming_renewals / upcoming_cost cover the next 7 days, any status,
            using raw (not normalized) amounts.
    """
    active_count = 0
    monthly_cost = 0.0
    upcoming_renewals = 0
    upcoming_cost = 0.0

    for sub in subscriptions:
        if sub.status == STATUS_ACTIVE:
            active_count += 1

        if sub.status in _COSTED_STATUSES:
            monthly_cost += monthly_equivalent(sub)

        if is_upcoming(sub, now):
            upcoming_renewals += 1
            amount = coerce_amount(sub.amount)
            if amount is not None:
                upcoming_cost += amount

    return SubscriptionStats(
        active_count=active_count,
        monthly_cost=monthly_cost,
        upcoming_renewals=upcoming_renewals,
        upcoming_cost=upcoming_cost,
    )


class StatsService:
    """Loads a user's subscriptions and aggregates them at the current time."""

    def __init__(self, repo: SubscriptionRepository, clock: Callable[[], datetime]):
        self.repo = repo
        self.clock = clock

    def get_stats(self, user_id: int) -> SubscriptionStats:
        stats = compute_stats(self.repo.list_for_user(user_id), self.clock())
        logger.debug(f"Stats for user {user_id}: {stats}")
        return stats
