"""
Comment model — threaded editorial discussion on an article.

Top-level comments have parent_id NULL. Replies point at their parent
and are returned oldest first; deleting a comment deletes its replies.
"""
from datetime import datetime, timezone

from models import db


class Comment(db.Model):
    """A comment or reply on an article."""

    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    article_id = db.Column(db.Integer, db.ForeignKey("articles.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    parent_id = db.Column(db.Integer, db.ForeignKey("comments.id"))
    content = db.Column(db.Text, nullable=False)
    resolved = db.Column(db.Boolean, default=False)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user = db.relationship("User")
    replies = db.relationship(
        "Comment",
        backref=db.backref("parent", remote_side=[id]),
        order_by="Comment.id",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self, include_replies=False):
        """Serialize comment; replies are nested one level when requested."""
        result = {
            "id": self.id,
            "articleId": self.article_id,
            "userId": self.user_id,
            "parentId": self.parent_id,
            "user": self.user.to_public_dict() if self.user else None,
            "content": self.content,
            "resolved": self.resolved,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_replies:
            result["replies"] = [r.to_dict() for r in self.replies]
        return result

    def __repr__(self):
        return f"<Comment {self.id} on article {self.article_id}>"
