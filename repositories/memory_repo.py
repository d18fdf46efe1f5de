"""
repositories/memory_repo.py
---------------------------
In-process storage backends. Used by the test suite and by
STORAGE_BACKEND=memory for local development. Data is lost on restart.
"""

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from models.subscription import STATUS_ACTIVE, Subscription
from models.user import User
from repositories.base import SubscriptionRepository, UserRepository


class InMemorySubscriptionRepository(SubscriptionRepository):
    """Dict-backed subscription store. Returns copies so callers can't mutate stored state."""

    def __init__(self):
        self._items: dict[int, Subscription] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def add(self, subscription: Subscription) -> Subscription:
        with self._lock:
            subscription.id = self._next_id
            subscription.created_at = datetime.now(timezone.utc)
            self._next_id += 1
            self._items[subscription.id] = replace(subscription)
        return subscription

    def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        with self._lock:
            item = self._items.get(subscription_id)
            return replace(item) if item else None

    def list_for_user(self, user_id: int) -> list[Subscription]:
        with self._lock:
            return [replace(s) for s in self._items.values() if s.user_id == user_id]

    def list_active(self) -> list[Subscription]:
        with self._lock:
            return [replace(s) for s in self._items.values() if s.status == STATUS_ACTIVE]

    def update(self, subscription: Subscription) -> Optional[Subscription]:
        with self._lock:
            if subscription.id not in self._items:
                return None
            self._items[subscription.id] = replace(subscription)
            return replace(subscription)

    def delete(self, subscription_id: int) -> bool:
        with self._lock:
            return self._items.pop(subscription_id, None) is not None


class InMemoryUserRepository(UserRepository):
    """Dict-backed user store with case-insensitive username/email lookups."""

    def __init__(self):
        self._items: dict[int, User] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def add(self, user: User) -> User:
        with self._lock:
            user.id = self._next_id
            user.username = user.username.lower()
            user.email = user.email.lower()
            user.created_at = datetime.now(timezone.utc)
            self._next_id += 1
            self._items[user.id] = replace(user)
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            item = self._items.get(user_id)
            return replace(item) if item else None

    def get_by_username(self, username: str) -> Optional[User]:
        return self._find(lambda u: u.username == username.lower())

    def get_by_email(self, email: str) -> Optional[User]:
        return self._find(lambda u: u.email == email.lower())

    def update(self, user: User) -> Optional[User]:
        with self._lock:
            if user.id not in self._items:
                return None
            stored = replace(user, email=user.email.lower())
            self._items[user.id] = stored
            return replace(stored)

    def _find(self, predicate) -> Optional[User]:
        with self._lock:
            for user in self._items.values():
                if predicate(user):
                    return replace(user)
        return None
