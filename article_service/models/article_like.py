"""ArticleLike ORM — one row per (author, article) like.

Invariants:
    - Composite primary key (author_id, article_id) is the only duplicate-like guard
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from article_service.db.base import Base


class ArticleLike(Base):
    __tablename__ = "likes"

    author_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    article_id: Mapped[str] = mapped_column(
        String(26), primary_key=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
