"""
AgentLog model — audit log for every AI agent call tied to an article.

One row per call. Tracks:
  - The agent type (RESEARCH, WRITING, FACT_CHECKING, EDITORIAL)
  - Status (success, error)
  - Input/output text, provider usage and timing
  - Error messages if the call failed
"""
from datetime import datetime, timezone

from models import db

AGENT_TYPES = ("RESEARCH", "WRITING", "FACT_CHECKING", "EDITORIAL")


class AgentLog(db.Model):
    """Represents a single AI agent call."""

    __tablename__ = "agent_logs"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False)
    agent_type = db.Column(db.String(50), nullable=False)
    input = db.Column(db.Text)
    output = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False)
    error_message = db.Column(db.Text)
    usage = db.Column(db.JSON)
    duration_ms = db.Column(db.Integer)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self):
        """Serialize agent log to dictionary for API responses."""
        return {
            "id": self.id,
            "articleId": self.article_id,
            "agentType": self.agent_type,
            "input": self.input,
            "output": self.output,
            "status": self.status,
            "errorMessage": self.error_message,
            "usage": self.usage,
            "durationMs": self.duration_ms,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<AgentLog {self.id} ({self.agent_type}: {self.status})>"
