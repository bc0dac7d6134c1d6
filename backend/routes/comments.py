"""
Comment routes — threaded discussion on articles.

POST   /api/comments                      — add comment or reply
GET    /api/comments/article/:articleId   — top-level comments with replies
PATCH  /api/comments/:id                  — edit / resolve (owner only)
DELETE /api/comments/:id                  — delete with replies (owner, ADMIN)
"""
import logging

from flask import Blueprint, request, jsonify, g

from models import db
from models.article import Article
from models.comment import Comment
from decorators.login_required import login_required
from routes.body import text_field
from services import notification_service
from services.live_update_service import broker

logger = logging.getLogger(__name__)

comments_bp = Blueprint("comments", __name__)


@comments_bp.route("", methods=["POST"])
@login_required
def create_comment():
    """
    Add a comment. Body: { articleId, content, parentId? }

    The article author is notified unless they wrote the comment.
    """
    body = request.get_json(silent=True) or {}
    article_id = body.get("articleId")
    content = text_field(body, "content")
    parent_id = body.get("parentId")

    if not article_id or not content:
        return jsonify({"error": "articleId and content are required"}), 400

    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    if parent_id:
        parent = db.session.get(Comment, parent_id)
        if not parent or parent.article_id != article.id:
            return jsonify({"error": "Parent comment not found on this article"}), 400

    comment = Comment(
        article_id=article.id,
        user_id=g.current_user.id,
        content=content,
        parent_id=parent_id or None,
    )
    db.session.add(comment)
    notification_service.notify_comment(article, g.current_user)
    db.session.commit()

    logger.info("[OK] Comment %d added to article %d", comment.id, article.id)

    payload = comment.to_dict()
    broker.broadcast(article.id, {"type": "comment-added", "comment": payload})
    return jsonify(payload), 201


@comments_bp.route("/article/<int:article_id>", methods=["GET"])
@login_required
def list_comments(article_id):
    """Top-level comments newest first, replies oldest first."""
    comments = (
        Comment.query
        .filter_by(article_id=article_id, parent_id=None)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    return jsonify([c.to_dict(include_replies=True) for c in comments])


@comments_bp.route("/<int:comment_id>", methods=["PATCH"])
@login_required
def update_comment(comment_id):
    """Edit content or toggle resolved. Body: { content?, resolved? }"""
    comment = db.session.get(Comment, comment_id)
    if not comment:
        return jsonify({"error": "Comment not found"}), 404

    if comment.user_id != g.current_user.id:
        return jsonify({"error": "Insufficient permissions"}), 403

    body = request.get_json(silent=True) or {}
    content = text_field(body, "content")
    if content:
        comment.content = content
    if "resolved" in body:
        comment.resolved = bool(body["resolved"])

    db.session.commit()
    return jsonify(comment.to_dict())


@comments_bp.route("/<int:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id):
    comment = db.session.get(Comment, comment_id)
    if not comment:
        return jsonify({"error": "Comment not found"}), 404

    if comment.user_id != g.current_user.id and g.current_user.role != "ADMIN":
        return jsonify({"error": "Insufficient permissions"}), 403

    db.session.delete(comment)
    db.session.commit()

    logger.info("[OK] Comment %d deleted by %s", comment_id, g.current_user.email)
    return jsonify({"message": "Comment deleted successfully"})
