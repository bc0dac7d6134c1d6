"""
Article model — the unit of newsroom work.

Status lifecycle (see services/workflow_service.py):
  DRAFT → IN_REVIEW → PUBLISHED → ARCHIVED

Every article owns its versions, comments, sources, citations,
fact checks and agent logs; deleting the article deletes all of them.
"""
from datetime import datetime, timezone

from models import db

STATUSES = ("DRAFT", "IN_REVIEW", "PUBLISHED", "ARCHIVED")


class Article(db.Model):
    """Represents a news article."""

    __tablename__ = "articles"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    summary = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default="DRAFT")
    tags = db.Column(db.JSON, default=list)
    featured_image = db.Column(db.Text)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    published_at = db.Column(db.DateTime)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    versions = db.relationship(
        "ArticleVersion", backref="article", lazy=True,
        cascade="all, delete-orphan",
    )
    comments = db.relationship(
        "Comment", backref="article", lazy=True,
        cascade="all, delete-orphan",
    )
    sources = db.relationship(
        "Source", backref="article", lazy=True,
        cascade="all, delete-orphan",
    )
    citations = db.relationship(
        "Citation", backref="article", lazy=True,
        cascade="all, delete-orphan",
    )
    fact_checks = db.relationship(
        "FactCheck", backref="article", lazy=True,
        cascade="all, delete-orphan",
    )
    agent_logs = db.relationship(
        "AgentLog", backref="article", lazy=True,
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        """Serialize article to dictionary for API responses."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "summary": self.summary,
            "status": self.status,
            "tags": self.tags or [],
            "featuredImage": self.featured_image,
            "authorId": self.author_id,
            "author": self.author.to_public_dict() if self.author else None,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Article {self.id} ({self.status})>"
