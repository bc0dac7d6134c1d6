"""
Admin routes — user management.

GET /api/admin/users           — list all users
PUT /api/admin/users/:id/role  — change a user's role

All endpoints require @admin_required.
"""
import logging

from flask import Blueprint, request, jsonify

from models import db
from models.user import User, ROLES
from decorators.admin_required import admin_required
from routes.body import text_field

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/users", methods=["GET"])
@admin_required
def list_users():
    """List all users, newest first."""
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify([u.to_dict() for u in users])


@admin_bp.route("/users/<int:user_id>/role", methods=["PUT"])
@admin_required
def set_user_role(user_id):
    """
    Change a user's role.

    Body: { "role": "WRITER"|"EDITOR"|"ADMIN" }
    """
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"error": "User not found"}), 404

    body = request.get_json(silent=True) or {}
    role = text_field(body, "role").upper()

    if role not in ROLES:
        return jsonify({"error": "Role must be one of WRITER, EDITOR, ADMIN"}), 400

    user.role = role
    db.session.commit()

    logger.info("[OK] Updated role for user %s (id=%d) to %s", user.email, user_id, role)
    return jsonify(user.to_dict())
