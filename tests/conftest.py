"""
Shared pytest fixtures for newsroom API tests.

Uses TestConfig (SQLite in-memory) so tests run without PostgreSQL.
Session-scoped app fixture creates tables once.
Per-test db_session rolls back after each test for isolation.
"""
import sys
import os
import uuid
from unittest.mock import patch, MagicMock

import pytest

# Add backend to Python path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from app import create_app  # noqa: E402
from config import TestConfig  # noqa: E402
from models import db as _db  # noqa: E402
from models.user import User  # noqa: E402
from models.article import Article  # noqa: E402
from services.auth_service import generate_jwt  # noqa: E402


def unique_email(prefix="user"):
    return f"{prefix}-{uuid.uuid4().hex[:10]}@newsroom.test"


@pytest.fixture(scope="session")
def app():
    """Create Flask app with TestConfig (SQLite in-memory) once per session."""
    app = create_app(config_class=TestConfig)
    with app.app_context():
        _db.create_all()
    yield app


@pytest.fixture(scope="function")
def client(app):
    """Flask test client for making HTTP requests."""
    return app.test_client()


@pytest.fixture(scope="function")
def db_session(app):
    """
    Per-test database session with rollback.

    Uses a savepoint (nested transaction) so each test's data is
    rolled back without affecting the session-scoped table creation.
    Compatible with Flask-SQLAlchemy 3.x.
    """
    with app.app_context():
        _db.session.begin_nested()

        yield _db.session

        _db.session.rollback()


@pytest.fixture()
def make_user(db_session):
    """Factory fixture to create a User in the test database."""
    def _make_user(email=None, role="WRITER", name="Test User"):
        user = User(
            email=email or unique_email(role.lower()),
            name=name,
            role=role,
            provider="local",
        )
        db_session.add(user)
        db_session.flush()
        return user
    return _make_user


@pytest.fixture()
def headers_for(app):
    """Authorization headers for an existing user."""
    def _headers_for(user):
        with app.app_context():
            token = generate_jwt(user)
        return {"Authorization": f"Bearer {token}"}
    return _headers_for


@pytest.fixture()
def auth_headers(make_user, headers_for):
    """
    Create a user and return Authorization headers with a valid JWT.

    Usage: headers = auth_headers("EDITOR")
    """
    def _auth_headers(role="WRITER", email=None):
        return headers_for(make_user(email=email, role=role))
    return _auth_headers


@pytest.fixture()
def make_article(db_session):
    """Factory fixture to create an Article for a given author."""
    def _make_article(author, title="City council votes on budget",
                      content="Original body.", status="DRAFT", tags=None):
        article = Article(
            title=title,
            content=content,
            status=status,
            tags=tags or [],
            author_id=author.id,
        )
        db_session.add(article)
        db_session.flush()
        return article
    return _make_article


@pytest.fixture()
def mock_verify_google_token():
    """Patch google.oauth2.id_token.verify_oauth2_token to return test claims."""
    with patch("services.auth_service.id_token.verify_oauth2_token") as mock:
        mock.return_value = {
            "sub": "google-test-sub-123",
            "email": "googleuser@newsroom.test",
            "name": "Google User",
            "picture": "https://example.com/photo.jpg",
        }
        yield mock


def mock_response(status_code=200, json_data=None, text=""):
    """Create a mock requests.Response."""
    mock = MagicMock()
    mock.status_code = status_code
    mock.json.return_value = json_data if json_data is not None else {}
    mock.text = text
    return mock


def chat_response(content, usage=None):
    """Chat completions payload with one assistant message."""
    return mock_response(200, {
        "choices": [{"message": {"content": content}}],
        "usage": usage or {"total_tokens": 42},
    })
