"""
Source routes — research sources and citations for articles.

POST   /api/sources                      — add source (title fetched if missing)
GET    /api/sources/article/:articleId   — sources with their citations
PATCH  /api/sources/:id                  — update credibility score / summary
DELETE /api/sources/:id                  — delete source and its citations
POST   /api/sources/citations            — quote a source in its article
"""
import logging
from datetime import datetime

from flask import Blueprint, request, jsonify

from models import db
from models.article import Article
from models.source import Source, Citation
from decorators.login_required import login_required
from routes.body import text_field
from services.page_fetch_service import fetch_page, is_http_url

logger = logging.getLogger(__name__)

sources_bp = Blueprint("sources", __name__)


def _parse_date(value):
    """ISO date/datetime string → datetime, None if empty. Raises ValueError."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@sources_bp.route("", methods=["POST"])
@login_required
def create_source():
    """
    Add a source to an article.

    Body: { articleId, url, title?, publisher?, publishedAt?, summary? }
    """
    body = request.get_json(silent=True) or {}
    article_id = body.get("articleId")
    url = text_field(body, "url")
    title = text_field(body, "title")

    if not article_id:
        return jsonify({"error": "articleId is required"}), 400
    if not is_http_url(url):
        return jsonify({"error": "A valid http(s) url is required"}), 400

    try:
        published_at = _parse_date(body.get("publishedAt"))
    except ValueError:
        return jsonify({"error": "publishedAt must be an ISO date"}), 400

    article = db.session.get(Article, article_id)
    if not article:
        return jsonify({"error": "Article not found"}), 404

    if not title:
        page = fetch_page(url)
        title = (page or {}).get("title") or ""
        if not title:
            return jsonify({"error": "title is required (could not read one from the page)"}), 400

    source = Source(
        article_id=article.id,
        url=url,
        title=title,
        publisher=body.get("publisher"),
        published_at=published_at,
        summary=body.get("summary"),
    )
    db.session.add(source)
    db.session.commit()

    logger.info("[OK] Source %d added to article %d", source.id, article.id)
    return jsonify(source.to_dict()), 201


@sources_bp.route("/article/<int:article_id>", methods=["GET"])
@login_required
def list_sources(article_id):
    sources = (
        Source.query
        .filter_by(article_id=article_id)
        .order_by(Source.created_at.desc(), Source.id.desc())
        .all()
    )
    return jsonify([s.to_dict(include_citations=True) for s in sources])


@sources_bp.route("/<int:source_id>", methods=["PATCH"])
@login_required
def update_source(source_id):
    """Body: { credibilityScore? (0..1), summary? }"""
    source = db.session.get(Source, source_id)
    if not source:
        return jsonify({"error": "Source not found"}), 404

    body = request.get_json(silent=True) or {}

    if body.get("credibilityScore") is not None:
        try:
            score = float(body["credibilityScore"])
        except (TypeError, ValueError):
            return jsonify({"error": "credibilityScore must be a number"}), 400
        if not 0 <= score <= 1:
            return jsonify({"error": "credibilityScore must be between 0 and 1"}), 400
        source.credibility_score = score

    if body.get("summary"):
        source.summary = body["summary"]

    db.session.commit()
    return jsonify(source.to_dict())


@sources_bp.route("/<int:source_id>", methods=["DELETE"])
@login_required
def delete_source(source_id):
    source = db.session.get(Source, source_id)
    if not source:
        return jsonify({"error": "Source not found"}), 404

    db.session.delete(source)
    db.session.commit()
    return jsonify({"message": "Source deleted successfully"})


@sources_bp.route("/citations", methods=["POST"])
@login_required
def create_citation():
    """Body: { articleId, sourceId, quote, context?, position? }"""
    body = request.get_json(silent=True) or {}
    article_id = body.get("articleId")
    source_id = body.get("sourceId")
    quote = text_field(body, "quote")

    if not article_id or not source_id or not quote:
        return jsonify({"error": "articleId, sourceId, and quote are required"}), 400

    try:
        article_id = int(article_id)
    except (TypeError, ValueError):
        return jsonify({"error": "articleId must be an integer"}), 400

    source = db.session.get(Source, source_id)
    if not source or source.article_id != article_id:
        return jsonify({"error": "Source does not belong to this article"}), 400

    citation = Citation(
        article_id=source.article_id,
        source_id=source.id,
        quote=quote,
        context=body.get("context"),
        position=body.get("position"),
    )
    db.session.add(citation)
    db.session.commit()

    return jsonify(citation.to_dict(include_source=True)), 201
