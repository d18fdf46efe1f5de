"""
handlers/user_handler.py
------------------------
Account management: profile, preferences (currency, reminders),
password change and deactivation.
"""

from flask import Blueprint, g, jsonify, request

from handlers.deps import get_services
from security.auth import login_required, logout_user
from security.rate_limiter import rate_limited

user_bp = Blueprint("user", __name__, url_prefix="/api/user")


@user_bp.put("/profile")
@login_required
@rate_limited
def update_profile():
    user = get_services().users.update_profile(g.user.id, request.get_json(silent=True))
    return jsonify(user.to_dict())


@user_bp.put("/settings")
@login_required
@rate_limited
def update_settings():
    """
    Body may contain any of:
        currency: one of the supported ISO codes
        email_notifications: bool
        reminder_days: int, default reminder lead time
    """
    user = get_services().users.update_settings(g.user.id, request.get_json(silent=True))
    return jsonify(user.to_dict())


@user_bp.post("/change-password")
@login_required
@rate_limited
def change_password():
    data = request.get_json(silent=True) or {}
    get_services().users.change_password(
        g.user.id, data.get("currentPassword"), data.get("newPassword")
    )
    return jsonify({"message": "Password changed successfully"})


@user_bp.post("/deactivate")
@login_required
def deactivate():
    get_services().users.deactivate(g.user.id)
    logout_user()
    return jsonify({"message": "Account deactivated"})
