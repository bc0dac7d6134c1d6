"""
ArticleVersion model — snapshot of an article taken before its content
was overwritten. version_number starts at 1 and grows per article.
"""
from datetime import datetime, timezone

from models import db


class ArticleVersion(db.Model):
    """A prior title/content pair of an article."""

    __tablename__ = "article_versions"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(500), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    version_number = db.Column(db.Integer, nullable=False)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    user = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "articleId": self.article_id,
            "userId": self.user_id,
            "user": self.user.to_public_dict() if self.user else None,
            "title": self.title,
            "content": self.content,
            "versionNumber": self.version_number,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ArticleVersion article={self.article_id} v{self.version_number}>"
