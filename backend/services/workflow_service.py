"""
Workflow service — role-gated article status transitions.

  DRAFT     → IN_REVIEW   author, ADMIN
  IN_REVIEW → PUBLISHED   EDITOR, ADMIN
  DRAFT     → PUBLISHED   EDITOR, ADMIN
  IN_REVIEW → DRAFT       author, EDITOR, ADMIN (sent back)
  PUBLISHED → ARCHIVED    EDITOR, ADMIN
  ARCHIVED  → DRAFT       EDITOR, ADMIN

Setting the status an article already has is a no-op.
"""
import logging
from datetime import datetime, timezone

from models.article import STATUSES

logger = logging.getLogger(__name__)

AUTHOR = "author"

TRANSITIONS = {
    ("DRAFT", "IN_REVIEW"): {AUTHOR, "ADMIN"},
    ("IN_REVIEW", "PUBLISHED"): {"EDITOR", "ADMIN"},
    ("DRAFT", "PUBLISHED"): {"EDITOR", "ADMIN"},
    ("IN_REVIEW", "DRAFT"): {AUTHOR, "EDITOR", "ADMIN"},
    ("PUBLISHED", "ARCHIVED"): {"EDITOR", "ADMIN"},
    ("ARCHIVED", "DRAFT"): {"EDITOR", "ADMIN"},
}


class WorkflowError(Exception):
    """Unknown status or a transition that does not exist."""

    status_code = 400


class WorkflowPermissionError(WorkflowError):
    """The transition exists but this user may not perform it."""

    status_code = 403


def can_transition(article, user, new_status):
    """True if user may move article to new_status (no-ops included)."""
    try:
        check_transition(article, user, new_status)
    except WorkflowError:
        return False
    return True


def check_transition(article, user, new_status):
    """
    Validate a status change without applying it.

    Returns:
        False for a no-op, True for a real transition.

    Raises:
        WorkflowError: unknown status or illegal transition.
        WorkflowPermissionError: user lacks the role for this transition.
    """
    if new_status not in STATUSES:
        raise WorkflowError(f"Unknown status '{new_status}'")
    if new_status == article.status:
        return False

    allowed = TRANSITIONS.get((article.status, new_status))
    if allowed is None:
        raise WorkflowError(
            f"Cannot move article from {article.status} to {new_status}"
        )

    if user.role in allowed:
        return True
    if AUTHOR in allowed and article.author_id == user.id:
        return True
    raise WorkflowPermissionError(
        f"Not allowed to move article from {article.status} to {new_status}"
    )


def apply_transition(article, user, new_status):
    """
    Change article.status (caller commits).

    Returns:
        The previous status, or None if nothing changed.
    """
    if not check_transition(article, user, new_status):
        return None

    previous = article.status
    article.status = new_status
    if new_status == "PUBLISHED":
        article.published_at = datetime.now(timezone.utc)
    logger.info(
        "[OK] Article %d: %s -> %s by %s", article.id, previous, new_status, user.email
    )
    return previous
