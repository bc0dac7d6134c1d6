"""
User model — newsroom accounts.

role is one of WRITER, EDITOR, ADMIN. First user created becomes ADMIN.
provider is 'local' (email + password) or 'google' (ID-token sign-in);
Google-only accounts have no password_hash.
"""
from datetime import datetime, timezone

from models import db

ROLES = ("WRITER", "EDITOR", "ADMIN")


class User(db.Model):
    """Represents a newsroom user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255))
    name = db.Column(db.String(255), nullable=False, default="")
    avatar = db.Column(db.Text)
    role = db.Column(db.String(20), nullable=False, default="WRITER")
    provider = db.Column(db.String(20), nullable=False, default="local")
    provider_id = db.Column(db.String(255))
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )
    last_login_at = db.Column(db.DateTime)

    articles = db.relationship("Article", backref="author", lazy=True)

    def to_dict(self):
        """Serialize user to dictionary for API responses."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
            "role": self.role,
            "provider": self.provider,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
        }

    def to_public_dict(self):
        """Minimal user info embedded in articles, comments, versions."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
        }

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
