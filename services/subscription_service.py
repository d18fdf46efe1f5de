"""
services/subscription_service.py
---------------------------------
Business logic for a user's own subscriptions: CRUD with ownership
checks, and the renew operation.
"""

from dataclasses import replace

import pytz

from models.subscription import Subscription
from repositories.base import SubscriptionRepository
from services.renewal_service import renew
from utils.errors import ForbiddenError, NotFoundError
from utils.logger import get_logger
from utils.validators import parse_subscription_payload

logger = get_logger(__name__)


class SubscriptionService:
    """
    Handles subscription operations on behalf of an authenticated user.

    Every method takes the acting user's id; touching another user's
    subscription raises ForbiddenError.
    """

    def __init__(self, repo: SubscriptionRepository, tz: pytz.BaseTzInfo):
        self.repo = repo
        self.tz = tz

    def list_for_user(self, user_id: int) -> list[Subscription]:
        return self.repo.list_for_user(user_id)

    def get(self, user_id: int, subscription_id: int) -> Subscription:
        """
        Fetch a subscription owned by ``user_id``.

        Raises:
            NotFoundError: No such subscription.
            ForbiddenError: It belongs to someone else.
        """
        subscription = self.repo.get_by_id(subscription_id)
        if subscription is None:
            raise NotFoundError("Subscription not found")
        if subscription.user_id != user_id:
            logger.warning(f"User {user_id} tried to access subscription #{subscription_id}")
            raise ForbiddenError("Forbidden")
        return subscription

    def create(self, user_id: int, payload: dict) -> Subscription:
        fields = parse_subscription_payload(payload, self.tz)
        return self.repo.add(Subscription(user_id=user_id, **fields))

    def update(self, user_id: int, subscription_id: int, payload: dict) -> Subscription:
        """Full replace of the editable fields; id, owner and created_at are kept."""
        existing = self.get(user_id, subscription_id)
        fields = parse_subscription_payload(payload, self.tz)
        updated = self.repo.update(replace(existing, **fields))
        if updated is None:
            raise NotFoundError("Subscription not found")
        return updated

    def delete(self, user_id: int, subscription_id: int) -> None:
        self.get(user_id, subscription_id)
        if not self.repo.delete(subscription_id):
            raise NotFoundError("Subscription not found")

    def renew(self, user_id: int, subscription_id: int) -> Subscription:
        """Advance the next payment date one cycle and set status 'active', in one write."""
        existing = self.get(user_id, subscription_id)
        renewed = self.repo.update(renew(existing))
        if renewed is None:
            raise NotFoundError("Subscription not found")
        logger.info(
            f"Renewed subscription #{subscription_id}: next payment {renewed.next_payment_date:%Y-%m-%d}"
        )
        return renewed
