"""
Shared fixtures: in-memory storage, a fake email sender, a fixed clock
and a Flask test client wired to all of them.
"""

from datetime import datetime

import pytest
import pytz
from werkzeug.security import generate_password_hash

from app import create_app
from models.subscription import Subscription
from models.user import User
from repositories.memory_repo import InMemorySubscriptionRepository, InMemoryUserRepository

NOW = datetime(2024, 6, 7, 9, 0, tzinfo=pytz.utc)


class FakeEmailSender:
    """Records messages instead of talking to SMTP."""

    def __init__(self):
        self.sent = []
        self.fail_for = set()
        self.raise_for = set()

    def send(self, to, subject, body, html=None):
        if to in self.raise_for:
            raise ConnectionError("SMTP connection refused")
        if to in self.fail_for:
            return False
        self.sent.append({"to": to, "subject": subject, "body": body, "html": html})
        return True


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def make_subscription(user_id=1, **overrides) -> Subscription:
    fields = dict(
        user_id=user_id,
        name="Netflix",
        category="Entertainment",
        plan="Premium",
        amount=14.99,
        billing_cycle="Monthly",
        next_payment_date=datetime(2024, 6, 10, 12, 0, tzinfo=pytz.utc),
        status="active",
        reminder="None",
    )
    fields.update(overrides)
    return Subscription(**fields)


def make_user(**overrides) -> User:
    fields = dict(
        username="alice",
        email="alice@example.com",
        password_hash=generate_password_hash("secret123"),
        name="Alice",
        currency="USD",
        email_notifications=True,
        reminder_days=3,
    )
    fields.update(overrides)
    return User(**fields)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def subscription_repo():
    return InMemorySubscriptionRepository()


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def app_factory(subscription_repo, user_repo, clock):
    def factory(**overrides):
        settings = {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "STORAGE_BACKEND": "memory",
            "TIMEZONE": "UTC",
            "RATE_LIMIT_REQUESTS": 1000,
            "RATE_LIMIT_WINDOW_SECONDS": 60,
        }
        settings.update(overrides)
        return create_app(
            settings,
            subscription_repo=subscription_repo,
            user_repo=user_repo,
            clock=clock,
        )
    return factory


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username="alice", email="alice@example.com", password="secret123"):
    return client.post(
        "/api/register",
        json={"username": username, "email": email, "password": password, "name": username.title()},
    )


@pytest.fixture
def auth_client(client):
    """A client already logged in as 'alice'."""
    response = register(client)
    assert response.status_code == 201
    return client


SUBSCRIPTION_PAYLOAD = {
    "name": "Spotify",
    "category": "Music",
    "plan": "Family",
    "amount": 16.99,
    "billing_cycle": "Monthly",
    "next_payment_date": "2024-06-10",
    "reminder": "3 days before",
    "notes": "shared with family",
}
