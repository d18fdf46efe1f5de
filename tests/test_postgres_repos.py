"""
Postgres repositories against a scripted connection: SQL parameters,
commit / rollback / release, and row mapping.
"""

from datetime import datetime
from decimal import Decimal

import psycopg2
import pytest
import pytz

from conftest import make_subscription, make_user
from repositories import subscription_repo as subscription_module
from repositories import user_repo as user_module
from repositories.subscription_repo import PostgresSubscriptionRepository
from repositories.user_repo import PostgresUserRepository

CREATED = datetime(2024, 6, 1, 12, 0, tzinfo=pytz.utc)
DUE = datetime(2024, 6, 10, 12, 0, tzinfo=pytz.utc)


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = conn.rowcount

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        if self.conn.error is not None:
            raise self.conn.error
        self.conn.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.conn.rows[0] if self.conn.rows else None

    def fetchall(self):
        return list(self.conn.rows)


class FakeConnection:
    def __init__(self, rows=(), rowcount=0, error=None):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.error = error
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.released = False

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True


@pytest.fixture
def use_connection(monkeypatch):
    """Route both repositories to the given FakeConnection."""
    def install(conn):
        def release(released):
            released.released = True

        for module in (subscription_module, user_module):
            monkeypatch.setattr(module, "get_connection", lambda: conn)
            monkeypatch.setattr(module, "release_connection", release)
        return conn

    return install


def _subscription_row(**overrides):
    row = dict(id=7, user_id=1, name="Netflix", category="Entertainment", plan="Premium",
               amount=Decimal("14.99"), billing_cycle="Monthly", next_payment_date=DUE,
               status="active", reminder="None", notes=None, created_at=CREATED)
    row.update(overrides)
    return tuple(row.values())


def _user_row(**overrides):
    row = dict(id=3, username="alice", email="alice@example.com", password_hash="hash",
               name="Alice", currency="USD", email_notifications=True, reminder_days=3,
               deactivated=False, created_at=CREATED)
    row.update(overrides)
    return tuple(row.values())


# ── Subscriptions ─────────────────────────────────────────

def test_add_subscription_commits_and_sets_id(use_connection):
    conn = use_connection(FakeConnection(rows=[(7, CREATED)]))
    sub = PostgresSubscriptionRepository().add(make_subscription())

    assert (sub.id, sub.created_at) == (7, CREATED)
    sql, params = conn.executed[0]
    assert sql.startswith("INSERT INTO subscriptions")
    assert params[:2] == (1, "Netflix")
    assert conn.committed and conn.released and not conn.rolled_back


def test_add_subscription_rolls_back_on_error(use_connection):
    conn = use_connection(FakeConnection(error=psycopg2.DataError("numeric field overflow")))
    with pytest.raises(psycopg2.DataError):
        PostgresSubscriptionRepository().add(make_subscription())
    assert conn.rolled_back and conn.released and not conn.committed


def test_get_subscription_maps_row(use_connection):
    conn = use_connection(FakeConnection(rows=[_subscription_row()]))
    sub = PostgresSubscriptionRepository().get_by_id(7)

    assert sub.id == 7
    assert sub.amount == 14.99 and isinstance(sub.amount, float)
    assert sub.next_payment_date == DUE
    assert conn.executed[0][1] == (7,)
    assert conn.released


def test_get_missing_subscription_is_none(use_connection):
    conn = use_connection(FakeConnection())
    assert PostgresSubscriptionRepository().get_by_id(99) is None
    assert conn.released


def test_list_active_filters_on_status(use_connection):
    conn = use_connection(FakeConnection(rows=[_subscription_row(id=1), _subscription_row(id=2, user_id=5)]))
    subs = PostgresSubscriptionRepository().list_active()

    assert [(s.id, s.user_id) for s in subs] == [(1, 1), (2, 5)]
    sql, params = conn.executed[0]
    assert "WHERE status = %s" in sql
    assert params == ("active",)


def test_list_for_user_filters_on_owner(use_connection):
    conn = use_connection(FakeConnection(rows=[_subscription_row()]))
    assert len(PostgresSubscriptionRepository().list_for_user(1)) == 1
    assert conn.executed[0][1] == (1,)


def test_update_missing_subscription_is_none(use_connection):
    conn = use_connection(FakeConnection())
    assert PostgresSubscriptionRepository().update(make_subscription(id=99)) is None
    assert conn.committed and conn.released


def test_update_subscription_returns_stored_row(use_connection):
    conn = use_connection(FakeConnection(rows=[_subscription_row(status="canceled")]))
    updated = PostgresSubscriptionRepository().update(make_subscription(id=7, status="canceled"))

    assert updated.status == "canceled"
    assert conn.executed[0][1][-1] == 7


def test_update_subscription_rolls_back_on_error(use_connection):
    conn = use_connection(FakeConnection(error=psycopg2.OperationalError("connection lost")))
    with pytest.raises(psycopg2.OperationalError):
        PostgresSubscriptionRepository().update(make_subscription(id=7))
    assert conn.rolled_back and conn.released


@pytest.mark.parametrize("rowcount, expected", [(1, True), (0, False)])
def test_delete_subscription_reports_rowcount(use_connection, rowcount, expected):
    conn = use_connection(FakeConnection(rowcount=rowcount))
    assert PostgresSubscriptionRepository().delete(7) is expected
    assert conn.committed and conn.released


# ── Users ─────────────────────────────────────────────────

def test_add_user_lowercases_identity(use_connection):
    conn = use_connection(FakeConnection(rows=[(3, CREATED)]))
    user = PostgresUserRepository().add(make_user(username="Alice", email="Alice@Example.com"))

    assert (user.id, user.username, user.email) == (3, "alice", "alice@example.com")
    assert conn.executed[0][1][:2] == ("alice", "alice@example.com")
    assert conn.committed and conn.released


def test_add_user_rolls_back_on_duplicate(use_connection):
    conn = use_connection(FakeConnection(error=psycopg2.IntegrityError("duplicate key")))
    with pytest.raises(psycopg2.IntegrityError):
        PostgresUserRepository().add(make_user())
    assert conn.rolled_back and conn.released


def test_user_lookups_are_case_insensitive(use_connection):
    conn = use_connection(FakeConnection(rows=[_user_row()]))
    repo = PostgresUserRepository()

    assert repo.get_by_username("ALICE").id == 3
    assert repo.get_by_email("Alice@Example.COM").email == "alice@example.com"
    assert [params for _, params in conn.executed] == [("alice",), ("alice@example.com",)]


def test_missing_user_is_none(use_connection):
    use_connection(FakeConnection())
    assert PostgresUserRepository().get_by_id(42) is None


def test_update_user_maps_returned_row(use_connection):
    conn = use_connection(FakeConnection(rows=[_user_row(deactivated=True)]))
    user = PostgresUserRepository().update(make_user(id=3, deactivated=True))

    assert user.deactivated is True
    assert "password_hash" not in user.to_dict()
    assert conn.committed and conn.released
