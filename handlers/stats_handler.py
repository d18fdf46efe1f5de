"""
handlers/stats_handler.py
-------------------------
Dashboard statistics and a health check.
"""

from flask import Blueprint, g, jsonify

from handlers.deps import get_services
from security.auth import login_required

stats_bp = Blueprint("stats", __name__, url_prefix="/api")


@stats_bp.get("/stats")
@login_required
def get_stats():
    return jsonify(get_services().stats.get_stats(g.user.id).to_dict())


@stats_bp.get("/health")
def health():
    return jsonify({"status": "ok"})
