"""
Flask configuration classes.

Config reads from environment variables with sensible defaults.
TestConfig overrides for pytest with SQLite in-memory.

The postgres:// → postgresql:// fix handles hosted connection strings
that still use the older 'postgres://' prefix, which SQLAlchemy 1.4+
no longer accepts.
"""
import os


def _split_csv(raw):
    return [part.strip().lower() for part in (raw or "").split(",") if part.strip()]


class Config:
    """Base configuration for Flask app."""

    # Flask core
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-me"

    # Database
    _raw_db_url = os.environ.get("DATABASE_URL") or "sqlite:///newsroom_dev.db"
    SQLALCHEMY_DATABASE_URI = _raw_db_url.replace(
        "postgres://", "postgresql://", 1
    )

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,  # Verify connections before use
        "pool_recycle": 300,    # Recycle connections every 5 minutes
    }

    # JWT settings (default 7 days)
    JWT_EXPIRY_HOURS = int(os.environ.get("JWT_EXPIRY_HOURS") or "168")

    # Google sign-in
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID") or ""
    # Empty list = any domain may sign in
    ALLOWED_EMAIL_DOMAINS = _split_csv(os.environ.get("ALLOWED_EMAIL_DOMAINS"))

    # OpenAI (primary LLM provider)
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY") or ""
    OPENAI_API_URL = os.environ.get("OPENAI_API_URL") or "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL = os.environ.get("OPENAI_MODEL") or "gpt-4"
    OPENAI_WRITING_MODEL = os.environ.get("OPENAI_WRITING_MODEL") or "gpt-4-turbo-preview"
    OPENAI_IMAGE_URL = os.environ.get("OPENAI_IMAGE_URL") or "https://api.openai.com/v1/images/generations"

    # Groq (fallback LLM provider, OpenAI-compatible)
    GROQ_API_KEY = os.environ.get("GROQ_API_KEY") or ""
    GROQ_API_URL = os.environ.get("GROQ_API_URL") or "https://api.groq.com/openai/v1/chat/completions"
    GROQ_MODEL = os.environ.get("GROQ_MODEL") or "llama-3.3-70b-versatile"

    LLM_TIMEOUT_SECONDS = int(os.environ.get("LLM_TIMEOUT_SECONDS") or "60")

    # Unsplash image search
    UNSPLASH_ACCESS_KEY = os.environ.get("UNSPLASH_ACCESS_KEY") or ""
    UNSPLASH_API_URL = os.environ.get("UNSPLASH_API_URL") or "https://api.unsplash.com/search/photos"

    # Live updates (server-sent events)
    SSE_KEEPALIVE_SECONDS = int(os.environ.get("SSE_KEEPALIVE_SECONDS") or "15")

    # CORS — frontend URL for allowed origins
    FRONTEND_URL = os.environ.get("FRONTEND_URL") or "http://localhost:3000"


class TestConfig(Config):
    """Test configuration — SQLite in-memory, no external dependencies."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}  # No pool settings needed for SQLite
    GOOGLE_CLIENT_ID = "test-client-id"
    ALLOWED_EMAIL_DOMAINS = []
    OPENAI_API_KEY = "test-openai-key"
    GROQ_API_KEY = "test-groq-key"
    UNSPLASH_ACCESS_KEY = "test-unsplash-key"
    LLM_TIMEOUT_SECONDS = 5
    SSE_KEEPALIVE_SECONDS = 1
