"""
security/auth.py
-----------------
Session authentication for the REST API.
Blocks any request without a logged-in, active user.
"""

from functools import wraps
from typing import Callable

from flask import g, session

from utils.errors import AuthError
from utils.logger import get_logger

logger = get_logger(__name__)


def login_user(user_id: int) -> None:
    session.clear()
    session["user_id"] = user_id
    session.permanent = True


def logout_user() -> None:
    session.clear()


def login_required(func: Callable):
    """
    Decorator that restricts a handler to authenticated users only.

    Usage:
        @bp.get("/api/thing")
        @login_required
        def thing():
            user = g.user
            ...

    Behavior:
        - Loads the session's user into ``flask.g.user``.
        - Missing, deleted or deactivated users get 401 Unauthorized.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        from handlers.deps import get_services

        user_id = session.get("user_id")
        if user_id is None:
            raise AuthError("Unauthorized")

        user = get_services().users.repo.get_by_id(user_id)
        if user is None or user.deactivated:
            logger.warning(f"Rejected session for unknown or deactivated user {user_id}")
            session.clear()
            raise AuthError("Unauthorized")

        g.user = user
        return func(*args, **kwargs)

    return wrapper
