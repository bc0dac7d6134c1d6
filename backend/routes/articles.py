"""
Article routes — CRUD, versions, review workflow and live updates.

POST   /api/articles              — create (always DRAFT)
GET    /api/articles              — list (status, authorId, search, page, limit)
GET    /api/articles/:id          — full article with sources, comments, logs
PATCH  /api/articles/:id          — update (author, EDITOR, ADMIN)
DELETE /api/articles/:id          — delete (author, ADMIN)
GET    /api/articles/:id/versions — version history, newest first
POST   /api/articles/:id/submit   — DRAFT → IN_REVIEW, notify editors
POST   /api/articles/:id/publish  — → PUBLISHED (EDITOR, ADMIN)
GET    /api/articles/stream/:id   — server-sent events for open editors
"""
import logging

from flask import Blueprint, Response, request, jsonify, g, current_app

from models import db
from models.article import Article
from models.article_version import ArticleVersion
from models.comment import Comment
from models.agent_log import AgentLog
from decorators.login_required import login_required
from decorators.role_required import role_required
from routes.body import text_field
from services import article_service, notification_service
from services.workflow_service import apply_transition, WorkflowError
from services.live_update_service import broker

logger = logging.getLogger(__name__)

articles_bp = Blueprint("articles", __name__)

EDIT_ROLES = ("EDITOR", "ADMIN")


def _is_author(article):
    return article.author_id == g.current_user.id


def _int_arg(name, default):
    try:
        return max(int(request.args.get(name) or default), 1)
    except ValueError:
        return default


@articles_bp.route("/stream/<int:article_id>", methods=["GET"])
@login_required
def stream_article(article_id):
    """Open an SSE stream of update events for one article."""
    keepalive = current_app.config.get("SSE_KEEPALIVE_SECONDS") or 15
    return Response(
        broker.stream(article_id, g.current_user.id, keepalive=keepalive),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@articles_bp.route("", methods=["POST"])
@login_required
def create_article():
    """
    Create a new article owned by the caller.

    Body: { title, content?, summary?, tags? }
    """
    body = request.get_json(silent=True) or {}
    title = text_field(body, "title")
    tags = body.get("tags") or []

    if not title:
        return jsonify({"error": "title is required"}), 400
    if not isinstance(tags, list):
        return jsonify({"error": "tags must be a list"}), 400

    article = Article(
        title=title,
        content=text_field(body, "content", strip=False),
        summary=text_field(body, "summary", strip=False) or None,
        tags=tags,
        author_id=g.current_user.id,
        status="DRAFT",
    )
    db.session.add(article)
    db.session.commit()

    logger.info("[OK] Article created: %d by %s", article.id, g.current_user.email)
    return jsonify(article.to_dict()), 201


@articles_bp.route("", methods=["GET"])
@login_required
def list_articles():
    """
    List articles with optional filters.

    Query params:
      - status: DRAFT, IN_REVIEW, PUBLISHED, ARCHIVED
      - authorId: only this author's articles
      - search: case-insensitive match on title or content
      - page: page number (default 1)
      - limit: items per page (default 10)
    """
    query = Article.query

    status = request.args.get("status")
    if status:
        query = query.filter(Article.status == status.upper())

    author_id = request.args.get("authorId", type=int)
    if author_id:
        query = query.filter(Article.author_id == author_id)

    search = request.args.get("search")
    if search:
        pattern = f"%{search}%"
        query = query.filter(db.or_(
            Article.title.ilike(pattern),
            Article.content.ilike(pattern),
        ))

    page = _int_arg("page", 1)
    limit = _int_arg("limit", 10)

    pagination = query.order_by(
        Article.updated_at.desc(), Article.id.desc()
    ).paginate(page=page, per_page=limit, error_out=False)

    articles = []
    for a in pagination.items:
        item = a.to_dict()
        item["commentsCount"] = len(a.comments)
        item["versionsCount"] = len(a.versions)
        articles.append(item)

    return jsonify({
        "articles": articles,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": pagination.total,
            "pages": pagination.pages,
        },
    })


@articles_bp.route("/<int:article_id>", methods=["GET"])
@login_required
def get_article(article_id):
    """Get a single article with everything the editor view needs."""
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    comments = (
        Comment.query
        .filter_by(article_id=article.id, parent_id=None)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    logs = (
        AgentLog.query
        .filter_by(article_id=article.id)
        .order_by(AgentLog.created_at.desc(), AgentLog.id.desc())
        .limit(10)
        .all()
    )

    result = article.to_dict()
    result["author"]["role"] = article.author.role
    result["sources"] = [s.to_dict() for s in article.sources]
    result["citations"] = [c.to_dict(include_source=True) for c in article.citations]
    result["comments"] = [c.to_dict(include_replies=True) for c in comments]
    result["factChecks"] = [f.to_dict() for f in article.fact_checks]
    result["agentLogs"] = [log.to_dict() for log in logs]
    return jsonify(result)


@articles_bp.route("/<int:article_id>", methods=["PATCH"])
@login_required
def update_article(article_id):
    """
    Update an article (author, EDITOR or ADMIN).

    Body: any of { title, content, summary, status, tags, featuredImage }.
    A content change snapshots the previous version first.
    """
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    user = g.current_user
    if not _is_author(article) and user.role not in EDIT_ROLES:
        return jsonify({"error": "Insufficient permissions"}), 403

    body = request.get_json(silent=True) or {}
    try:
        previous_status = article_service.apply_update(article, user, body)
    except WorkflowError as exc:
        return jsonify({"error": str(exc)}), exc.status_code
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    if previous_status is not None:
        if article.status == "PUBLISHED":
            notification_service.notify_published(article, user)
        elif article.status == "IN_REVIEW":
            notification_service.notify_review_requested(article, user)
        else:
            notification_service.notify_status_change(article, user, previous_status)

    db.session.commit()

    payload = article.to_dict()
    broker.broadcast(article.id, {
        "type": "article-updated",
        "article": payload,
        "updatedBy": user.id,
    })
    return jsonify(payload)


@articles_bp.route("/<int:article_id>", methods=["DELETE"])
@login_required
def delete_article(article_id):
    """Delete an article (author or ADMIN)."""
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    if not _is_author(article) and g.current_user.role != "ADMIN":
        return jsonify({"error": "Insufficient permissions"}), 403

    db.session.delete(article)
    db.session.commit()

    logger.info("[OK] Article deleted: %d by %s", article_id, g.current_user.email)
    broker.broadcast(article_id, {"type": "article-deleted", "articleId": article_id})
    return jsonify({"message": "Article deleted successfully"})


@articles_bp.route("/<int:article_id>/versions", methods=["GET"])
@login_required
def list_versions(article_id):
    """Version history, highest version_number first."""
    versions = (
        ArticleVersion.query
        .filter_by(article_id=article_id)
        .order_by(ArticleVersion.version_number.desc())
        .all()
    )
    return jsonify([v.to_dict() for v in versions])


@articles_bp.route("/<int:article_id>/submit", methods=["POST"])
@login_required
def submit_for_review(article_id):
    """Move a draft to IN_REVIEW (author or ADMIN) and notify every editor."""
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    if not _is_author(article) and g.current_user.role != "ADMIN":
        return jsonify({"error": "Only the author or admin can submit for review"}), 403

    try:
        previous = apply_transition(article, g.current_user, "IN_REVIEW")
    except WorkflowError as exc:
        return jsonify({"error": str(exc)}), exc.status_code

    if previous is not None:
        notification_service.notify_review_requested(article, g.current_user)
    db.session.commit()

    payload = article.to_dict()
    broker.broadcast(article.id, {
        "type": "article-status-changed",
        "article": payload,
        "updatedBy": g.current_user.id,
    })
    return jsonify(payload)


@articles_bp.route("/<int:article_id>/publish", methods=["POST"])
@role_required(*EDIT_ROLES)
def publish_article(article_id):
    """Publish an article (EDITOR or ADMIN) and tell the author."""
    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    try:
        previous = apply_transition(article, g.current_user, "PUBLISHED")
    except WorkflowError as exc:
        return jsonify({"error": str(exc)}), exc.status_code

    if previous is not None:
        notification_service.notify_published(article, g.current_user)
    db.session.commit()

    payload = article.to_dict()
    broker.broadcast(article.id, {"type": "article-published", "article": payload})
    return jsonify(payload)

