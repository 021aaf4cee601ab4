"""ORM Models — SQLAlchemy declarative models for articles, likes and attachments.

Invariants:
    - All models inherit from Base (db/base.py)
    - No foreign keys from likes/attachments to articles: deletion cleanup is
      asynchronous, rows may outlive their article until the cleanup queue runs

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from article_service.models.article import Article  # noqa: F401
from article_service.models.article_like import ArticleLike  # noqa: F401
from article_service.models.attachment import FileAttachment  # noqa: F401
