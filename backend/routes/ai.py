"""
AI routes — research, writing, fact-checking, editorial and image tools.

POST /api/ai/research              — research report on a topic
POST /api/ai/generate-article      — article draft from a brief
POST /api/ai/fact-check            — verdict on a claim (persisted per article)
POST /api/ai/editorial-review      — editor's critique of a draft
POST /api/ai/generate-image        — best Unsplash match for a description
POST /api/ai/search-images         — several Unsplash results
POST /api/ai/generate-image-dalle  — DALL-E 3 image
POST /api/ai/generate-caption      — photo caption
POST /api/ai/assess-source         — source credibility assessment

Provider failures come back as { success: false, error } with HTTP 502.
When articleId is given, research/writing/fact-check/editorial calls are
recorded as AgentLog rows whether they succeed or fail.
"""
import json
import logging
import time

from flask import Blueprint, request, jsonify

from models import db
from models.article import Article
from models.agent_log import AgentLog
from models.fact_check import FactCheck
from decorators.login_required import login_required
from routes.body import text_field
from services import ai_service, image_service
from services.ai_service import AIResponseError
from services.llm_service import LLMAPIError
from services.image_service import ImageAPIError

logger = logging.getLogger(__name__)

ai_bp = Blueprint("ai", __name__)

AGENT_ERRORS = (LLMAPIError, AIResponseError)


def _failure(exc):
    return jsonify({"success": False, "error": str(exc)}), 502


def _record_agent_log(article_id, agent_type, input_payload, status,
                      output=None, error_message=None, usage=None,
                      duration_ms=None):
    """Write one AgentLog row; skipped when the article does not exist."""
    if not article_id or db.session.get(Article, article_id) is None:
        return None
    log = AgentLog(
        article_id=article_id,
        agent_type=agent_type,
        input=json.dumps(input_payload),
        output=output,
        status=status,
        error_message=error_message,
        usage=usage,
        duration_ms=duration_ms,
    )
    db.session.add(log)
    db.session.commit()
    return log


def _run_agent(agent_type, article_id, input_payload, agent_fn, *args, **kwargs):
    """
    Call an agent and log the result as an AgentLog.

    Returns:
        The agent's result dict.

    Raises:
        LLMAPIError / AIResponseError: logged and re-raised.
    """
    start_ms = int(time.time() * 1000)
    try:
        result = agent_fn(*args, **kwargs)
    except AGENT_ERRORS as exc:
        duration_ms = int(time.time() * 1000) - start_ms
        logger.error("[ERR] %s agent failed: %s", agent_type, exc)
        _record_agent_log(
            article_id, agent_type, input_payload, "error",
            error_message=str(exc), duration_ms=duration_ms,
        )
        raise

    duration_ms = int(time.time() * 1000) - start_ms
    _record_agent_log(
        article_id, agent_type, input_payload, "success",
        output=result.get("data"), usage=result.get("usage"),
        duration_ms=duration_ms,
    )
    return result


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@ai_bp.route("/research", methods=["POST"])
@login_required
def research():
    """Body: { topic, keywords?, articleId? }"""
    body = request.get_json(silent=True) or {}
    topic = text_field(body, "topic")
    keywords = body.get("keywords") or []
    article_id = body.get("articleId")

    if not topic:
        return jsonify({"error": "topic is required"}), 400
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        return jsonify({"error": "keywords must be a list of strings"}), 400

    try:
        result = _run_agent(
            "RESEARCH", article_id, {"topic": topic, "keywords": keywords},
            ai_service.research, topic, keywords,
        )
    except AGENT_ERRORS as exc:
        return _failure(exc)

    return jsonify({"success": True, "data": result["data"], "usage": result["usage"]})


@ai_bp.route("/generate-article", methods=["POST"])
@login_required
def generate_article():
    """Body: { brief, sources?, style?, articleId? }"""
    body = request.get_json(silent=True) or {}
    brief = text_field(body, "brief")
    sources = body.get("sources") or []
    style = body.get("style") or "professional"
    article_id = body.get("articleId")

    if not brief:
        return jsonify({"error": "brief is required"}), 400
    if not isinstance(sources, list) or not all(isinstance(s, dict) for s in sources):
        return jsonify({"error": "sources must be a list of objects"}), 400

    try:
        result = _run_agent(
            "WRITING", article_id, {"brief": brief, "style": style},
            ai_service.write_article, brief, sources, style,
        )
    except AGENT_ERRORS as exc:
        return _failure(exc)

    return jsonify({"success": True, "data": result["data"], "usage": result["usage"]})


@ai_bp.route("/fact-check", methods=["POST"])
@login_required
def fact_check():
    """Body: { claim, context?, articleId? } — persists a FactCheck per article."""
    body = request.get_json(silent=True) or {}
    claim = text_field(body, "claim")
    context = text_field(body, "context")
    article_id = body.get("articleId")

    if not claim:
        return jsonify({"error": "claim is required"}), 400

    try:
        result = _run_agent(
            "FACT_CHECKING", article_id, {"claim": claim, "context": context},
            ai_service.fact_check, claim, context,
        )
    except AGENT_ERRORS as exc:
        return _failure(exc)

    if article_id and db.session.get(Article, article_id) is not None:
        parsed = result["parsed"]
        caveats = parsed.get("caveats")
        db.session.add(FactCheck(
            article_id=article_id,
            claim=claim,
            verdict=parsed.get("verdict"),
            explanation=parsed.get("explanation"),
            confidence=_to_float(parsed.get("confidence")),
            sources=parsed.get("sources") or [],
            caveats=caveats if isinstance(caveats, str) or caveats is None else json.dumps(caveats),
        ))
        db.session.commit()
        logger.info("[OK] Fact check stored for article %s", article_id)

    return jsonify({"success": True, "data": result["data"], "usage": result["usage"]})


@ai_bp.route("/editorial-review", methods=["POST"])
@login_required
def editorial_review():
    """Body: { content, guidelines?, articleId? }"""
    body = request.get_json(silent=True) or {}
    content = text_field(body, "content", strip=False)
    guidelines = body.get("guidelines") or {}
    article_id = body.get("articleId")

    if not content.strip():
        return jsonify({"error": "content is required"}), 400
    if not isinstance(guidelines, dict):
        return jsonify({"error": "guidelines must be an object"}), 400

    try:
        result = _run_agent(
            "EDITORIAL", article_id,
            {"contentLength": len(content), "guidelines": guidelines},
            ai_service.editorial_review, content, guidelines,
        )
    except AGENT_ERRORS as exc:
        return _failure(exc)

    return jsonify({"success": True, "data": result["data"], "usage": result["usage"]})


@ai_bp.route("/generate-image", methods=["POST"])
@login_required
def generate_image():
    """Body: { description, style? } — best Unsplash match."""
    body = request.get_json(silent=True) or {}
    description = text_field(body, "description")
    if not description:
        return jsonify({"error": "description is required"}), 400

    try:
        image = image_service.find_image(description)
    except ImageAPIError as exc:
        return _failure(exc)

    return jsonify({"success": True, **image})


@ai_bp.route("/search-images", methods=["POST"])
@login_required
def search_images():
    """Body: { query, count? }"""
    body = request.get_json(silent=True) or {}
    query = text_field(body, "query")
    if not query:
        return jsonify({"error": "query is required"}), 400

    try:
        count = int(body.get("count") or 5)
    except (TypeError, ValueError):
        return jsonify({"error": "count must be an integer"}), 400

    try:
        result = image_service.search_images(query, count)
    except ImageAPIError as exc:
        return _failure(exc)

    return jsonify({"success": True, **result})


@ai_bp.route("/generate-image-dalle", methods=["POST"])
@login_required
def generate_image_dalle():
    """Body: { description, style? }"""
    body = request.get_json(silent=True) or {}
    description = text_field(body, "description")
    style = body.get("style") or "photorealistic"
    if not description:
        return jsonify({"error": "description is required"}), 400

    try:
        image = ai_service.generate_image_dalle(description, style)
    except LLMAPIError as exc:
        return _failure(exc)

    return jsonify({"success": True, **image})


@ai_bp.route("/generate-caption", methods=["POST"])
@login_required
def generate_caption():
    """Body: { imageDescription, articleContext? }"""
    body = request.get_json(silent=True) or {}
    image_description = text_field(body, "imageDescription")
    if not image_description:
        return jsonify({"error": "imageDescription is required"}), 400

    try:
        result = ai_service.generate_caption(
            image_description, text_field(body, "articleContext")
        )
    except LLMAPIError as exc:
        return _failure(exc)

    return jsonify({"success": True, "caption": result["caption"], "usage": result["usage"]})


@ai_bp.route("/assess-source", methods=["POST"])
@login_required
def assess_source():
    """Body: { sourceUrl, sourceContent? }"""
    body = request.get_json(silent=True) or {}
    source_url = text_field(body, "sourceUrl")
    if not source_url:
        return jsonify({"error": "sourceUrl is required"}), 400

    try:
        result = ai_service.assess_source(source_url, text_field(body, "sourceContent"))
    except LLMAPIError as exc:
        return _failure(exc)

    return jsonify({"success": True, "data": result["data"]})
