"""
models/stats.py
---------------
Aggregate spend figures shown on the dashboard.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubscriptionStats:
    active_count: int
    monthly_cost: float
    upcoming_renewals: int
    upcoming_cost: float

    def to_dict(self) -> dict:
        # camelCase keys are what the dashboard client reads
        return {
            "activeCount": self.active_count,
            "monthlyCost": self.monthly_cost,
            "upcomingRenewals": self.upcoming_renewals,
            "upcomingCost": self.upcoming_cost,
        }
