"""
Flask application factory.

Creates and configures the Flask app with:
  - SQLAlchemy database connection
  - CORS for frontend communication
  - Route registration
  - JSON error handlers
  - Health check endpoint
  - Structured logging with [OK]/[ERR] markers (no Unicode)
"""
import logging
import sys
from datetime import datetime, timezone

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes import register_routes


def create_app(config_class=Config):
    """
    Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config).
                      Pass TestConfig for testing with SQLite in-memory.

    Returns:
        Configured Flask app instance.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Set up logging — [OK]/[ERR] markers, no Unicode symbols
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    app.logger.handlers = [handler]
    app.logger.setLevel(logging.INFO)

    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=[app.config["FRONTEND_URL"]], supports_credentials=True)

    register_routes(app)
    _register_error_handlers(app)

    # Health check endpoint — confirms API is running
    @app.route("/health")
    @app.route("/api/health")
    def health():
        """Return service health status."""
        app.logger.info("[OK] Health check passed")
        return jsonify({
            "status": "ok",
            "service": "newsroom-api",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    app.logger.info("[OK] Newsroom API initialized")
    return app


def _register_error_handlers(app):
    """JSON bodies for every error that escapes a route."""

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc):
        db.session.rollback()
        app.logger.error("[ERR] Integrity error: %s", exc.orig)
        return jsonify({
            "error": "Conflict",
            "message": "Resource already exists",
        }), 409

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc):
        db.session.rollback()
        app.logger.exception("[ERR] Unhandled error: %s", exc)
        return jsonify({"error": "Internal Server Error"}), 500
