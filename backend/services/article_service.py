"""
Article service — edits with version snapshots.

apply_update() is the single path for PATCH: it snapshots the previous
title/content into ArticleVersion when content changes, routes status
changes through the workflow rules, and leaves committing to the caller.
"""
import logging

from models import db
from models.article_version import ArticleVersion
from services import workflow_service

logger = logging.getLogger(__name__)

# request body key -> model attribute
EDITABLE_FIELDS = {
    "title": "title",
    "content": "content",
    "summary": "summary",
    "tags": "tags",
    "featuredImage": "featured_image",
}


def snapshot_version(article, user):
    """Save the article's current title/content as the next version."""
    count = ArticleVersion.query.filter_by(article_id=article.id).count()
    version = ArticleVersion(
        article_id=article.id,
        user_id=user.id,
        title=article.title,
        content=article.content or "",
        version_number=count + 1,
    )
    db.session.add(version)
    logger.info("[OK] Article %d snapshot v%d", article.id, version.version_number)
    return version


def apply_update(article, user, body):
    """
    Apply a partial update from a request body.

    Returns:
        Previous status if the status changed, otherwise None.

    Raises:
        ValueError: invalid field values.
        WorkflowError / WorkflowPermissionError: illegal status change.
    """
    for key in ("title", "content"):
        if key in body and not isinstance(body[key], str):
            raise ValueError(f"{key} must be a string")
    for key in ("summary", "featuredImage"):
        if body.get(key) is not None and not isinstance(body[key], str):
            raise ValueError(f"{key} must be a string or null")
    if "title" in body and not body["title"].strip():
        raise ValueError("Title cannot be empty")
    if "tags" in body and not isinstance(body["tags"], list):
        raise ValueError("tags must be a list")

    # Validate the status change before touching anything else
    status = body.get("status")
    if status is not None:
        workflow_service.check_transition(article, user, status)

    if "content" in body and body["content"] != article.content:
        snapshot_version(article, user)

    for key, attr in EDITABLE_FIELDS.items():
        if key in body:
            value = body[key]
            if key == "title":
                value = value.strip()
            setattr(article, attr, value)

    if status is not None:
        return workflow_service.apply_transition(article, user, status)
    return None
