"""
Source and Citation models — research material attached to an article.

A Source is a referenced web page; a Citation is a quote taken from one
of the article's sources.
"""
from datetime import datetime, timezone

from models import db


class Source(db.Model):
    """A web source referenced by an article."""

    __tablename__ = "sources"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False)
    url = db.Column(db.Text, nullable=False)
    title = db.Column(db.String(500), nullable=False)
    publisher = db.Column(db.String(255))
    published_at = db.Column(db.DateTime)
    summary = db.Column(db.Text)
    credibility_score = db.Column(db.Float)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    citations = db.relationship(
        "Citation", backref="source", lazy=True,
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_citations=False):
        result = {
            "id": self.id,
            "articleId": self.article_id,
            "url": self.url,
            "title": self.title,
            "publisher": self.publisher,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "summary": self.summary,
            "credibilityScore": self.credibility_score,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_citations:
            result["citations"] = [c.to_dict() for c in self.citations]
        return result

    def __repr__(self):
        return f"<Source {self.id} {self.url}>"


class Citation(db.Model):
    """A quote from a source, placed in an article."""

    __tablename__ = "citations"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False)
    source_id = db.Column(db.Integer, db.ForeignKey("sources.id"), nullable=False)
    quote = db.Column(db.Text, nullable=False)
    context = db.Column(db.Text)
    position = db.Column(db.Integer)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self, include_source=False):
        result = {
            "id": self.id,
            "articleId": self.article_id,
            "sourceId": self.source_id,
            "quote": self.quote,
            "context": self.context,
            "position": self.position,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_source:
            result["source"] = self.source.to_dict() if self.source else None
        return result

    def __repr__(self):
        return f"<Citation {self.id} source={self.source_id}>"
