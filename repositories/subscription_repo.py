"""
repositories/subscription_repo.py
---------------------------------
PostgreSQL data access for subscriptions.
All SQL queries related to the `subscriptions` table live here.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.subscription import STATUS_ACTIVE, Subscription
from repositories.base import SubscriptionRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, user_id, name, category, plan, amount, billing_cycle, "
    "next_payment_date, status, reminder, notes, created_at"
)


class PostgresSubscriptionRepository(SubscriptionRepository):
    """Repository for CRUD operations on the subscriptions table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, subscription: Subscription) -> Subscription:
        """
        Insert a new subscription.

        Args:
            subscription: The Subscription to persist.

        Returns:
            The same object with its `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO subscriptions
                (user_id, name, category, plan, amount, billing_cycle,
                 next_payment_date, status, reminder, notes)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    subscription.user_id, subscription.name, subscription.category,
                    subscription.plan, subscription.amount, subscription.billing_cycle,
                    subscription.next_payment_date, subscription.status,
                    subscription.reminder, subscription.notes,
                ))
                row = cur.fetchone()
                subscription.id = row[0]
                subscription.created_at = row[1]
            conn.commit()
            logger.info(f"Added subscription '{subscription.name}' #{subscription.id} for user {subscription.user_id}")
            return subscription
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add subscription: {e}")
            raise
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, subscription_id: int) -> Optional[Subscription]:
        sql = f"SELECT {_COLUMNS} FROM subscriptions WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (subscription_id,))
                row = cur.fetchone()
                return self._row_to_subscription(row) if row else None
        finally:
            release_connection(conn)

    def list_for_user(self, user_id: int) -> list[Subscription]:
        sql = f"SELECT {_COLUMNS} FROM subscriptions WHERE user_id = %s ORDER BY next_payment_date ASC;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return [self._row_to_subscription(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def list_active(self) -> list[Subscription]:
        """
        Get every active subscription across all users.
        Used by the daily reminder job.
        """
        sql = f"SELECT {_COLUMNS} FROM subscriptions WHERE status = %s ORDER BY id ASC;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (STATUS_ACTIVE,))
                return [self._row_to_subscription(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, subscription: Subscription) -> Optional[Subscription]:
        sql = f"""
            UPDATE subscriptions
            SET name = %s, category = %s, plan = %s, amount = %s, billing_cycle = %s,
                next_payment_date = %s, status = %s, reminder = %s, notes = %s
            WHERE id = %s
            RETURNING {_COLUMNS};
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    subscription.name, subscription.category, subscription.plan,
                    subscription.amount, subscription.billing_cycle,
                    subscription.next_payment_date, subscription.status,
                    subscription.reminder, subscription.notes, subscription.id,
                ))
                row = cur.fetchone()
            conn.commit()
            if row is None:
                return None
            logger.info(f"Updated subscription #{subscription.id}")
            return self._row_to_subscription(row)
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update subscription #{subscription.id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, subscription_id: int) -> bool:
        sql = "DELETE FROM subscriptions WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (subscription_id,))
                deleted = cur.rowcount > 0
            conn.commit()
            if deleted:
                logger.info(f"Deleted subscription #{subscription_id}")
            return deleted
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete subscription #{subscription_id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_subscription(row: tuple) -> Subscription:
        """Convert a database row tuple to a Subscription domain object."""
        return Subscription(
            id=row[0],
            user_id=row[1],
            name=row[2],
            category=row[3],
            plan=row[4],
            amount=float(row[5]),
            billing_cycle=row[6],
            next_payment_date=row[7],
            status=row[8],
            reminder=row[9],
            notes=row[10],
            created_at=row[11],
        )
