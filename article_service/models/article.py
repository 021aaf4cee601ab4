"""Article ORM — persists article metadata.

Invariants:
    - id is a 26-char time-ordered id minted by core/article_ids.py (never by the DB)
    - original_article_id is null for originals, set for forks (single back-reference)
    - like_count mirrors the number of ArticleLike rows, maintained by like/unlike
    - version starts at 1 and increments on every update

Design Decisions:
    - No relationship() to likes/attachments: those rows are cleaned up asynchronously
      after the article row is gone
    - (created_at, id) index serves the created_at DESC, id DESC page ordering
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from article_service.core.domain_types import ArticleId, AuthorId, ArticleRecord
from article_service.db.base import Base


class Article(Base):
    """Article row — title/content mutable, identity and authorship immutable."""
    __tablename__ = "articles"
    __table_args__ = (
        Index("ix_articles_created_at_id", "created_at", "id"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    author_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True,
    )
    original_article_id: Mapped[str | None] = mapped_column(
        String(26), nullable=True, index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    like_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )

    def to_record(self) -> ArticleRecord:
        return ArticleRecord(
            id=ArticleId(self.id),
            author_id=AuthorId(self.author_id),
            original_article_id=(
                ArticleId(self.original_article_id)
                if self.original_article_id else None
            ),
            title=self.title,
            content=self.content,
            created_at=self.created_at,
            updated_at=self.updated_at,
            like_count=self.like_count,
            version=self.version,
        )
