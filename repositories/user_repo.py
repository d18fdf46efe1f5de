"""
repositories/user_repo.py
--------------------------
PostgreSQL data access for user records.
"""

from typing import Optional

from db.connection import get_connection, release_connection
from models.user import User
from repositories.base import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, username, email, password_hash, name, currency, "
    "email_notifications, reminder_days, deactivated, created_at"
)


class PostgresUserRepository(UserRepository):
    """Repository for CRUD operations on the users table."""

    def add(self, user: User) -> User:
        """
        Insert a new user. Username and email are stored lower-case.

        Returns:
            The same object with its `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO users
                (username, email, password_hash, name, currency,
                 email_notifications, reminder_days, deactivated)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        user.username = user.username.lower()
        user.email = user.email.lower()
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    user.username, user.email, user.password_hash, user.name,
                    user.currency, user.email_notifications, user.reminder_days,
                    user.deactivated,
                ))
                row = cur.fetchone()
                user.id = row[0]
                user.created_at = row[1]
            conn.commit()
            logger.info(f"Created user '{user.username}' #{user.id}")
            return user
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to create user '{user.username}': {e}")
            raise
        finally:
            release_connection(conn)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE id = %s;", user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE username = %s;", username.lower())

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE email = %s;", email.lower())

    def update(self, user: User) -> Optional[User]:
        sql = f"""
            UPDATE users
            SET email = %s, password_hash = %s, name = %s, currency = %s,
                email_notifications = %s, reminder_days = %s, deactivated = %s
            WHERE id = %s
            RETURNING {_COLUMNS};
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    user.email.lower(), user.password_hash, user.name, user.currency,
                    user.email_notifications, user.reminder_days, user.deactivated,
                    user.id,
                ))
                row = cur.fetchone()
            conn.commit()
            return self._row_to_user(row) if row else None
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update user #{user.id}: {e}")
            raise
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_one(self, sql: str, param) -> Optional[User]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (param,))
                row = cur.fetchone()
                return self._row_to_user(row) if row else None
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        """Convert a database row tuple to a User domain object."""
        return User(
            id=row[0],
            username=row[1],
            email=row[2],
            password_hash=row[3],
            name=row[4],
            currency=row[5],
            email_notifications=row[6],
            reminder_days=row[7],
            deactivated=row[8],
            created_at=row[9],
        )
