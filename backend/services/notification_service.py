"""
Notification service — fan-out of inbox entries for workflow events.

All helpers add rows to the session; the caller commits.
"""
import logging

from models import db
from models.notification import Notification
from models.user import User

logger = logging.getLogger(__name__)


def _article_link(article):
    return f"/articles/{article.id}"


def notify(user_id, type_, title, message, link=None):
    notification = Notification(
        user_id=user_id,
        type=type_,
        title=title,
        message=message,
        link=link,
    )
    db.session.add(notification)
    return notification


def notify_review_requested(article, actor):
    """Tell every EDITOR except the submitter that an article is waiting for review."""
    editors = User.query.filter(User.role == "EDITOR", User.id != actor.id).all()
    for editor in editors:
        notify(
            editor.id,
            "review",
            "Article submitted for review",
            f'Article "{article.title}" was submitted for review.',
            _article_link(article),
        )
    logger.info("[OK] Review requested for article %d: %d editors notified", article.id, len(editors))
    return len(editors)


def notify_comment(article, commenter):
    """Tell the article's author about a new comment, unless they wrote it."""
    if article.author_id == commenter.id:
        return None
    return notify(
        article.author_id,
        "comment",
        "New Comment",
        f"{commenter.name} commented on your article",
        _article_link(article),
    )


def notify_published(article, publisher):
    """Tell the author their article went live, unless they published it."""
    if article.author_id == publisher.id:
        return None
    return notify(
        article.author_id,
        "published",
        "Article published",
        f'Your article "{article.title}" was published by {publisher.name}.',
        _article_link(article),
    )


def notify_status_change(article, actor, previous):
    """Tell the author about any other status change made by someone else."""
    if article.author_id == actor.id:
        return None
    return notify(
        article.author_id,
        "status",
        "Article status changed",
        f'"{article.title}" moved from {previous} to {article.status}.',
        _article_link(article),
    )
