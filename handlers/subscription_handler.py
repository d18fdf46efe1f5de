"""
handlers/subscription_handler.py
--------------------------------
REST endpoints for the logged-in user's subscriptions.
Parses ids and bodies, delegates to SubscriptionService, returns JSON.
"""

from flask import Blueprint, g, jsonify, request

from handlers.deps import get_services
from security.auth import login_required
from security.rate_limiter import rate_limited
from utils.validators import parse_subscription_id

subscription_bp = Blueprint("subscriptions", __name__, url_prefix="/api/subscriptions")


@subscription_bp.get("")
@login_required
def list_subscriptions():
    subscriptions = get_services().subscriptions.list_for_user(g.user.id)
    return jsonify([s.to_dict() for s in subscriptions])


@subscription_bp.get("/<subscription_id>")
@login_required
def get_subscription(subscription_id):
    sub = get_services().subscriptions.get(g.user.id, parse_subscription_id(subscription_id))
    return jsonify(sub.to_dict())


@subscription_bp.post("")
@login_required
@rate_limited
def create_subscription():
    sub = get_services().subscriptions.create(g.user.id, request.get_json(silent=True))
    return jsonify(sub.to_dict()), 201


@subscription_bp.put("/<subscription_id>")
@login_required
@rate_limited
def update_subscription(subscription_id):
    sub = get_services().subscriptions.update(
        g.user.id, parse_subscription_id(subscription_id), request.get_json(silent=True)
    )
    return jsonify(sub.to_dict())


@subscription_bp.delete("/<subscription_id>")
@login_required
@rate_limited
def delete_subscription(subscription_id):
    get_services().subscriptions.delete(g.user.id, parse_subscription_id(subscription_id))
    return "", 204


@subscription_bp.post("/<subscription_id>/renew")
@login_required
@rate_limited
def renew_subscription(subscription_id):
    """Extend by one billing cycle and set status back to 'active'."""
    sub = get_services().subscriptions.renew(g.user.id, parse_subscription_id(subscription_id))
    return jsonify(sub.to_dict())
