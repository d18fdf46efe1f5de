"""
app.py
------
Flask application factory.

Wires repositories -> services -> blueprints, and renders every
AppError (and any unexpected exception) as a JSON error body.
"""

from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

import config
from handlers.auth_handler import auth_bp
from handlers.deps import EXTENSION_KEY, ServiceContainer
from handlers.stats_handler import stats_bp
from handlers.subscription_handler import subscription_bp
from handlers.user_handler import user_bp
from repositories.base import SubscriptionRepository, UserRepository
from security.rate_limiter import RateLimiter
from services.stats_service import StatsService
from services.subscription_service import SubscriptionService
from services.user_service import UserService
from utils.clock import get_timezone, system_clock
from utils.errors import AppError
from utils.logger import get_logger

logger = get_logger(__name__)


def build_repositories(backend: str) -> tuple[SubscriptionRepository, UserRepository]:
    """Pick the storage backend named by STORAGE_BACKEND."""
    if backend == "memory":
        from repositories.memory_repo import InMemorySubscriptionRepository, InMemoryUserRepository
        logger.warning("Using in-memory storage; data will be lost on restart.")
        return InMemorySubscriptionRepository(), InMemoryUserRepository()
    if backend == "postgres":
        from repositories.subscription_repo import PostgresSubscriptionRepository
        from repositories.user_repo import PostgresUserRepository
        return PostgresSubscriptionRepository(), PostgresUserRepository()
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}' (expected 'postgres' or 'memory')")


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        body = {"message": error.message}
        field = getattr(error, "field", None)
        if field:
            body["field"] = field
        return jsonify(body), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.error(f"Unhandled error: {error}", exc_info=True)
        return jsonify({"message": "Internal server error"}), 500


def create_app(
    overrides: Optional[dict] = None,
    subscription_repo: Optional[SubscriptionRepository] = None,
    user_repo: Optional[UserRepository] = None,
    clock=None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        overrides: Extra Flask config (tests pass TESTING, rate limits, ...).
        subscription_repo, user_repo: Storage to use; built from
            STORAGE_BACKEND when omitted.
        clock: Callable returning the current aware datetime.
    """
    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.SECRET_KEY,
        PERMANENT_SESSION_LIFETIME=timedelta(days=7),
        STORAGE_BACKEND=config.STORAGE_BACKEND,
        TIMEZONE=config.TIMEZONE,
        RATE_LIMIT_REQUESTS=config.RATE_LIMIT_REQUESTS,
        RATE_LIMIT_WINDOW_SECONDS=config.RATE_LIMIT_WINDOW_SECONDS,
    )
    if overrides:
        app.config.update(overrides)

    if subscription_repo is None or user_repo is None:
        built_subs, built_users = build_repositories(app.config["STORAGE_BACKEND"])
        subscription_repo = subscription_repo or built_subs
        user_repo = user_repo or built_users

    tz = get_timezone(app.config["TIMEZONE"])
    clock = clock or system_clock(tz)

    app.extensions[EXTENSION_KEY] = ServiceContainer(
        users=UserService(user_repo),
        subscriptions=SubscriptionService(subscription_repo, tz),
        stats=StatsService(subscription_repo, clock),
        rate_limiter=RateLimiter(
            app.config["RATE_LIMIT_REQUESTS"], app.config["RATE_LIMIT_WINDOW_SECONDS"]
        ),
    )

    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(subscription_bp)
    app.register_blueprint(stats_bp)
    _register_error_handlers(app)

    logger.info(f"App created (storage={app.config['STORAGE_BACKEND']}, tz={tz.zone})")
    return app
