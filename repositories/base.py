"""
repositories/base.py
--------------------
Repository interfaces. Services depend on these, never on a concrete
storage backend, so PostgreSQL and in-memory storage are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Optional

from models.subscription import Subscription
from models.user import User


class SubscriptionRepository(ABC):
    """Storage contract for subscriptions."""

    @abstractmethod
    def add(self, subscription: Subscription) -> Subscription:
        """Persist a new subscription; returns it with `id` and `created_at` set."""

    @abstractmethod
    def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        """Fetch one subscription regardless of owner."""

    @abstractmethod
    def list_for_user(self, user_id: int) -> list[Subscription]:
        """All subscriptions owned by a user."""

    @abstractmethod
    def list_active(self) -> list[Subscription]:
        """Every subscription with status 'active', across all users."""

    @abstractmethod
    def update(self, subscription: Subscription) -> Optional[Subscription]:
        """Replace all mutable fields in one atomic write. None if it no longer exists."""

    @abstractmethod
    def delete(self, subscription_id: int) -> bool:
        """Remove a subscription. False if it did not exist."""


class UserRepository(ABC):
    """Storage contract for users."""

    @abstractmethod
    def add(self, user: User) -> User:
        """Persist a new user; returns it with `id` and `created_at` set."""

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive lookup."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup."""

    @abstractmethod
    def update(self, user: User) -> Optional[User]:
        """Replace all mutable fields. None if the user no longer exists."""
