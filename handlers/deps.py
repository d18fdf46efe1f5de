"""
handlers/deps.py
----------------
The per-app service container and its accessor for request handlers.
"""

from dataclasses import dataclass

from flask import current_app

from security.rate_limiter import RateLimiter
from services.stats_service import StatsService
from services.subscription_service import SubscriptionService
from services.user_service import UserService

EXTENSION_KEY = "subtrack"


@dataclass
class ServiceContainer:
    users: UserService
    subscriptions: SubscriptionService
    stats: StatsService
    rate_limiter: RateLimiter


def get_services() -> ServiceContainer:
    return current_app.extensions[EXTENSION_KEY]
