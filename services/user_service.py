"""
services/user_service.py
------------------------
Accounts: registration, login checks, profile and preference updates.
"""

from dataclasses import replace
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from models.user import User
from repositories.base import UserRepository
from utils.errors import AuthError, ConflictError, NotFoundError, ValidationError
from utils.logger import get_logger
from utils.validators import (
    MAX_NAME_LENGTH,
    parse_settings_payload,
    validate_email,
    validate_username,
)

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def _check_password_strength(password) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password"
        )
    return password


def _optional_name(value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or len(value.strip()) > MAX_NAME_LENGTH:
        raise ValidationError(f"name must be at most {MAX_NAME_LENGTH} characters", "name")
    return value.strip() or None


class UserService:
    """Handles all business logic for user accounts."""

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get(self, user_id: int) -> User:
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(self, payload: dict) -> User:
        """
        Create an account.

        Args:
            payload: {'username', 'email', 'password', optional 'name'}.

        Raises:
            ValidationError: Missing or malformed fields.
            ConflictError: Username or email already taken.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        username = validate_username(payload.get("username"))
        email = validate_email(payload.get("email"))
        password = _check_password_strength(payload.get("password"))

        if self.repo.get_by_username(username):
            raise ConflictError("Username already exists")
        if self.repo.get_by_email(email):
            raise ConflictError("Email already in use")

        user = self.repo.add(User(
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            name=_optional_name(payload.get("name")),
        ))
        logger.info(f"Registered user '{user.username}' #{user.id}")
        return user

    def authenticate(self, username, password) -> Optional[User]:
        """
        Check login credentials.

        Returns:
            The user, or None if the credentials don't match.

        Raises:
            AuthError: The account is deactivated.
        """
        if not isinstance(username, str) or not isinstance(password, str):
            return None
        user = self.repo.get_by_username(username.strip())
        if user is None or not check_password_hash(user.password_hash, password):
            return None
        if user.deactivated:
            raise AuthError("Account is deactivated")
        return user

    def update_profile(self, user_id: int, payload: dict) -> User:
        """Change name and/or email. Email must not belong to another user."""
        if not isinstance(payload, dict) or (not payload.get("name") and not payload.get("email")):
            raise ValidationError("No update data provided")
        user = self.get(user_id)

        changes = {}
        if payload.get("name"):
            changes["name"] = _optional_name(payload["name"])
        if payload.get("email"):
            email = validate_email(payload["email"])
            other = self.repo.get_by_email(email)
            if other and other.id != user_id:
                raise ConflictError("Email already in use")
            changes["email"] = email

        return self._save(replace(user, **changes))

    def update_settings(self, user_id: int, payload: dict) -> User:
        """Update currency, email_notifications and/or reminder_days."""
        settings = parse_settings_payload(payload)
        user = self._save(replace(self.get(user_id), **settings))
        logger.info(f"Updated settings for user {user_id}: {settings}")
        return user

    def change_password(self, user_id: int, current_password, new_password) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        user = self.get(user_id)
        if not check_password_hash(user.password_hash, current_password):
            raise ValidationError("Current password is incorrect", "currentPassword")
        _check_password_strength(new_password)
        self._save(replace(user, password_hash=generate_password_hash(new_password)))
        logger.info(f"Password changed for user {user_id}")

    def deactivate(self, user_id: int) -> None:
        self._save(replace(self.get(user_id), deactivated=True))
        logger.info(f"Deactivated user {user_id}")

    def _save(self, user: User) -> User:
        saved = self.repo.update(user)
        if saved is None:
            raise NotFoundError("User not found")
        return saved
