"""
services/renewal_service.py
---------------------------
Renewal: push a subscription's next payment date forward by one billing
cycle and mark it active again.
"""

from dataclasses import replace
from datetime import datetime

from dateutil.relativedelta import relativedelta

from models.subscription import STATUS_ACTIVE, Subscription

CYCLE_DELTAS = {
    "Monthly": relativedelta(months=1),
    "Quarterly": relativedelta(months=3),
    "Semi-Annually": relativedelta(months=6),
    "Annually": relativedelta(years=1),
}

# Unknown cycles renew monthly. Stats aggregation deliberately uses a
# different rule for them (zero contribution).
DEFAULT_DELTA = relativedelta(months=1)


def advance_payment_date(current: datetime, billing_cycle: str) -> datetime:
    """
    Advance a payment date by one billing cycle.

    Calendar months are added with relativedelta, which clamps to the last
    day of a shorter target month: Jan 31 + 1 month is Feb 29 in a leap
    year and Feb 28 otherwise. Time of day and tzinfo are kept.
    """
    return current + CYCLE_DELTAS.get(billing_cycle, DEFAULT_DELTA)


def renew(subscription: Subscription) -> Subscription:
    """Return a renewed copy: next date advanced, status reset to 'active'."""
    return replace(
        subscription,
        next_payment_date=advance_payment_date(
            subscription.next_payment_date, subscription.billing_cycle
        ),
        status=STATUS_ACTIVE,
    )
