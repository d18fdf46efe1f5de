"""
handlers/auth_handler.py
------------------------
Register, log in, log out, and fetch the current user.
"""

from flask import Blueprint, g, jsonify, request

from handlers.deps import get_services
from security.auth import login_required, login_user, logout_user
from security.rate_limiter import rate_limited
from utils.logger import get_logger

logger = get_logger(__name__)
auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.post("/register")
@rate_limited
def register():
    """Create an account and log it in. 201 with the user."""
    user = get_services().users.register(request.get_json(silent=True))
    login_user(user.id)
    return jsonify(user.to_dict()), 201


@auth_bp.post("/login")
@rate_limited
def login():
    data = request.get_json(silent=True) or {}
    user = get_services().users.authenticate(data.get("username"), data.get("password"))
    if user is None:
        logger.info(f"Failed login for '{data.get('username')}'")
        return jsonify({"message": "Invalid username or password"}), 401
    login_user(user.id)
    return jsonify(user.to_dict()), 200


@auth_bp.post("/logout")
def logout():
    logout_user()
    return jsonify({"message": "Logged out"}), 200


@auth_bp.get("/user")
@login_required
def current_user():
    return jsonify(g.user.to_dict())
