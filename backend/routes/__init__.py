"""
Route registration for the Flask app.

Registers all route blueprints:
  - auth routes (register, login, Google sign-in, me, logout)
  - user routes (own profile and stats)
  - admin routes (user roles)
  - article routes (CRUD, versions, workflow, live stream)
  - comment routes (threaded comments)
  - notification routes (inbox)
  - source routes (sources and citations)
  - ai routes (research, writing, fact-check, images)
"""
from routes.auth import auth_bp
from routes.users import users_bp
from routes.admin import admin_bp
from routes.articles import articles_bp
from routes.comments import comments_bp
from routes.notifications import notifications_bp
from routes.sources import sources_bp
from routes.ai import ai_bp


def register_routes(app):
    """
    Register all route blueprints with the Flask app.

    Args:
        app: Flask application instance.
    """
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(articles_bp, url_prefix="/api/articles")
    app.register_blueprint(comments_bp, url_prefix="/api/comments")
    app.register_blueprint(notifications_bp, url_prefix="/api/notifications")
    app.register_blueprint(sources_bp, url_prefix="/api/sources")
    app.register_blueprint(ai_bp, url_prefix="/api/ai")
