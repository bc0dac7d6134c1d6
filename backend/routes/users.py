"""
User routes — the signed-in user's own profile.

GET   /api/users/me        — profile
PATCH /api/users/me        — update name / avatar
GET   /api/users/me/stats  — article, comment and published counts
"""
import logging

from flask import Blueprint, request, jsonify, g

from models import db
from models.article import Article
from models.comment import Comment
from decorators.login_required import login_required
from routes.body import text_field

logger = logging.getLogger(__name__)

users_bp = Blueprint("users", __name__)


@users_bp.route("/me", methods=["GET"])
@login_required
def get_me():
    return jsonify(g.current_user.to_dict())


@users_bp.route("/me", methods=["PATCH"])
@login_required
def update_me():
    """Update profile. Body: { name?, avatar? } — empty values are ignored."""
    body = request.get_json(silent=True) or {}
    user = g.current_user

    name = text_field(body, "name")
    if name:
        user.name = name
    avatar = text_field(body, "avatar")
    if avatar:
        user.avatar = avatar

    db.session.commit()
    logger.info("[OK] Profile updated: %s", user.email)
    return jsonify(user.to_dict())


@users_bp.route("/me/stats", methods=["GET"])
@login_required
def my_stats():
    """Dashboard counters for the current user."""
    user_id = g.current_user.id
    return jsonify({
        "articlesCount": Article.query.filter_by(author_id=user_id).count(),
        "commentsCount": Comment.query.filter_by(user_id=user_id).count(),
        "publishedCount": Article.query.filter_by(
            author_id=user_id, status="PUBLISHED"
        ).count(),
    })
