"""
FactCheck model — persisted verdict from the fact-checking agent.

verdict is one of true / false / partially-true / unverified, as returned
by the model; confidence is 0..1.
"""
from datetime import datetime, timezone

from models import db


class FactCheck(db.Model):
    """A fact-check result attached to an article."""

    __tablename__ = "fact_checks"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False)
    claim = db.Column(db.Text, nullable=False)
    verdict = db.Column(db.String(50))
    explanation = db.Column(db.Text)
    confidence = db.Column(db.Float)
    sources = db.Column(db.JSON, default=list)
    caveats = db.Column(db.Text)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self):
        return {
            "id": self.id,
            "articleId": self.article_id,
            "claim": self.claim,
            "verdict": self.verdict,
            "explanation": self.explanation,
            "confidence": self.confidence,
            "sources": self.sources or [],
            "caveats": self.caveats,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<FactCheck {self.id} ({self.verdict})>"
