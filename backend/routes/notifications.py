"""
Notification routes — the current user's inbox.

GET    /api/notifications           — list (unreadOnly, limit)
PATCH  /api/notifications/:id/read  — mark one as read
POST   /api/notifications/read-all  — mark all as read
DELETE /api/notifications/:id       — delete one

Other users' notifications are reported as 404.
"""
import logging

from flask import Blueprint, request, jsonify, g

from models import db
from models.notification import Notification
from decorators.login_required import login_required

logger = logging.getLogger(__name__)

notifications_bp = Blueprint("notifications", __name__)


def _own_notification(notification_id):
    notification = db.session.get(Notification, notification_id)
    if notification is None or notification.user_id != g.current_user.id:
        return None
    return notification


@notifications_bp.route("", methods=["GET"])
@login_required
def list_notifications():
    query = Notification.query.filter_by(user_id=g.current_user.id)

    if (request.args.get("unreadOnly") or "").lower() == "true":
        query = query.filter(Notification.read.is_(False))

    limit = request.args.get("limit", default=20, type=int)

    notifications = (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(max(limit, 1))
        .all()
    )
    return jsonify([n.to_dict() for n in notifications])


@notifications_bp.route("/<int:notification_id>/read", methods=["PATCH"])
@login_required
def mark_read(notification_id):
    notification = _own_notification(notification_id)
    if notification is None:
        return jsonify({"error": "Notification not found"}), 404

    notification.read = True
    db.session.commit()
    return jsonify(notification.to_dict())


@notifications_bp.route("/read-all", methods=["POST"])
@login_required
def mark_all_read():
    updated = Notification.query.filter_by(
        user_id=g.current_user.id, read=False
    ).update({"read": True})
    db.session.commit()

    logger.info("[OK] Marked %d notifications read for %s", updated, g.current_user.email)
    return jsonify({"message": "All notifications marked as read", "updated": updated})


@notifications_bp.route("/<int:notification_id>", methods=["DELETE"])
@login_required
def delete_notification(notification_id):
    notification = _own_notification(notification_id)
    if notification is None:
        return jsonify({"error": "Notification not found"}), 404

    db.session.delete(notification)
    db.session.commit()
    return jsonify({"message": "Notification deleted"})
