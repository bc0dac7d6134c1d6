"""
SQLAlchemy database instance and model imports.

All models are imported here so that `from models import db` gives access
to the shared db instance, and `from models import User, Article, ...`
gives access to all model classes.
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Import all models so they register with SQLAlchemy metadata
from models.user import User  # noqa: E402, F401
from models.article import Article  # noqa: E402, F401
from models.article_version import ArticleVersion  # noqa: E402, F401
from models.comment import Comment  # noqa: E402, F401
from models.notification import Notification  # noqa: E402, F401
from models.source import Source, Citation  # noqa: E402, F401
from models.fact_check import FactCheck  # noqa: E402, F401
from models.agent_log import AgentLog  # noqa: E402, F401
