"""Relational Article Store — article rows, likes, and consistent pagination.

Invariants:
    - Every operation validates its input before any persistence call
    - One session (unit of work) per call; records returned are detached snapshots
    - update/delete report NotFound on zero affected rows; update re-reads the row
    - rewrite verifies the original exists before inserting the fork
    - like: unique violation → AlreadyExists; unlike: zero rows deleted → FailedPrecondition
    - like/unlike adjust articles.like_count in the same transaction as the Like row
    - remove_likes() is idempotent: zero rows removed is success
    - Pagination count and slice run in one transaction at the configured isolation level,
      ordered created_at DESC, id DESC

Design Decisions:
    - Isolation level is a constructor argument: REPEATABLE READ on PostgreSQL,
      SERIALIZABLE on SQLite (which has no REPEATABLE READ)
    - Ids minted in Python (core/article_ids.py), so ordering by id matches creation order
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import select, update, delete, func, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from article_service.core.article_ids import new_article_id
from article_service.core.domain_types import (
    ArticleId, AuthorId, ArticleRecord, ArticlePage,
)
from article_service.core.errors import (
    NotFoundError, AlreadyExistsError, FailedPreconditionError, ErrorContext,
)
from article_service.core.validation import require_fields, require_page, page_offset
from article_service.infrastructure.database import DatabaseSessionManager
from article_service.models.article import Article
from article_service.models.article_like import ArticleLike

logger = logging.getLogger(__name__)


class SqlArticleStore:
    """ArticleStore backed by SQLAlchemy async sessions."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        pagination_isolation_level: str | None = "REPEATABLE READ",
        id_factory: Callable[[], ArticleId] = new_article_id,
    ):
        self._db = db
        self._isolation_level = pagination_isolation_level
        self._new_id = id_factory

    # ─── Articles ────────────────────────────────────────────────

    async def create_article(
        self, author_id: AuthorId, title: str, content: str,
    ) -> ArticleRecord:
        require_fields(
            "create_article", author_id=author_id, title=title, content=content,
        )
        async with self._db.session() as db:
            article = Article(
                id=self._new_id(), author_id=author_id,
                title=title, content=content,
            )
            db.add(article)
            await db.commit()
            await db.refresh(article)
            return article.to_record()

    async def update_article(
        self, article_id: ArticleId, title: str, content: str,
    ) -> ArticleRecord:
        require_fields(
            "update_article", article_id=article_id, title=title, content=content,
        )
        async with self._db.session() as db:
            result = await db.execute(
                update(Article)
                .where(Article.id == article_id)
                .values(
                    title=title,
                    content=content,
                    updated_at=datetime.now(timezone.utc),
                    version=Article.version + 1,
                )
            )
            if result.rowcount == 0:
                raise NotFoundError(
                    "Article", article_id,
                    ErrorContext(operation="update_article", article_id=article_id),
                )
            await db.commit()
            article = await self._fetch(db, article_id, "update_article")
            return article.to_record()

    async def rewrite_article(
        self, author_id: AuthorId, original_article_id: ArticleId,
        title: str, content: str,
    ) -> ArticleRecord:
        require_fields(
            "rewrite_article", author_id=author_id,
            original_article_id=original_article_id,
            title=title, content=content,
        )
        async with self._db.session() as db:
            original = await db.scalar(
                select(Article.id).where(Article.id == original_article_id),
            )
            if original is None:
                raise NotFoundError(
                    "Original article", original_article_id,
                    ErrorContext(
                        operation="rewrite_article",
                        article_id=original_article_id, author_id=author_id,
                    ),
                )
            fork = Article(
                id=self._new_id(), author_id=author_id,
                original_article_id=original_article_id,
                title=title, content=content,
            )
            db.add(fork)
            await db.commit()
            await db.refresh(fork)
            return fork.to_record()

    async def delete_article(self, article_id: ArticleId) -> None:
        require_fields("delete_article", article_id=article_id)
        async with self._db.session() as db:
            result = await db.execute(
                delete(Article).where(Article.id == article_id),
            )
            if result.rowcount == 0:
                raise NotFoundError(
                    "Article", article_id,
                    ErrorContext(operation="delete_article", article_id=article_id),
                )
            await db.commit()

    async def get_article(self, article_id: ArticleId) -> ArticleRecord:
        require_fields("get_article", article_id=article_id)
        async with self._db.session() as db:
            article = await self._fetch(db, article_id, "get_article")
            return article.to_record()

    # ─── Likes ───────────────────────────────────────────────────

    async def like_article(self, author_id: AuthorId, article_id: ArticleId) -> None:
        require_fields("like_article", author_id=author_id, article_id=article_id)
        context = ErrorContext(
            operation="like_article", article_id=article_id, author_id=author_id,
        )
        async with self._db.session() as db:
            await self._fetch(db, article_id, "like_article")
            db.add(ArticleLike(author_id=author_id, article_id=article_id))
            try:
                await db.flush()
            except IntegrityError as e:
                await db.rollback()
                raise AlreadyExistsError(
                    "author has already liked this article", context,
                ) from e
            await db.execute(
                update(Article)
                .where(Article.id == article_id)
                .values(like_count=Article.like_count + 1)
            )
            await db.commit()

    async def unlike_article(self, author_id: AuthorId, article_id: ArticleId) -> None:
        require_fields("unlike_article", author_id=author_id, article_id=article_id)
        async with self._db.session() as db:
            result = await db.execute(
                delete(ArticleLike).where(
                    ArticleLike.author_id == author_id,
                    ArticleLike.article_id == article_id,
                )
            )
            if result.rowcount == 0:
                raise FailedPreconditionError(
                    "author has not liked this article",
                    ErrorContext(
                        operation="unlike_article",
                        article_id=article_id, author_id=author_id,
                    ),
                )
            await db.execute(
                update(Article)
                .where(Article.id == article_id)
                .values(like_count=case(
                    (Article.like_count > 0, Article.like_count - 1), else_=0,
                ))
            )
            await db.commit()

    async def has_liked_article(
        self, author_id: AuthorId, article_id: ArticleId,
    ) -> bool:
        require_fields(
            "has_liked_article", author_id=author_id, article_id=article_id,
        )
        async with self._db.session() as db:
            count = await db.scalar(
                select(func.count())
                .select_from(ArticleLike)
                .where(
                    ArticleLike.author_id == author_id,
                    ArticleLike.article_id == article_id,
                )
            )
            return bool(count)

    async def remove_likes(self, article_id: ArticleId) -> int:
        """Delete every like of a deleted article; returns the number removed."""
        require_fields("remove_likes", article_id=article_id)
        async with self._db.session() as db:
            result = await db.execute(
                delete(ArticleLike).where(ArticleLike.article_id == article_id),
            )
            await db.commit()
            return result.rowcount

    # ─── Pagination ──────────────────────────────────────────────

    async def list_articles(self, page: int, page_size: int) -> ArticlePage:
        require_page("list_articles", page, page_size)
        return await self._paginate(
            select(Article), select(func.count()).select_from(Article),
            page, page_size,
        )

    async def list_articles_by_author(
        self, author_id: AuthorId, page: int, page_size: int,
    ) -> ArticlePage:
        require_fields("list_articles_by_author", author_id=author_id)
        require_page("list_articles_by_author", page, page_size)
        return await self._paginate(
            select(Article).where(Article.author_id == author_id),
            select(func.count())
            .select_from(Article)
            .where(Article.author_id == author_id),
            page, page_size,
        )

    async def _paginate(
        self, rows_query: Select, count_query: Select, page: int, page_size: int,
    ) -> ArticlePage:
        async with self._db.session() as db:
            if self._isolation_level:
                # must run before the first statement of the transaction
                await db.connection(
                    execution_options={"isolation_level": self._isolation_level},
                )
            total = await db.scalar(count_query)
            result = await db.execute(
                rows_query
                .order_by(Article.created_at.desc(), Article.id.desc())
                .offset(page_offset(page, page_size))
                .limit(page_size)
            )
            articles = [a.to_record() for a in result.scalars().all()]
            await db.commit()
        return ArticlePage(
            articles=articles, total_count=total or 0,
            page=page, page_size=page_size,
        )

    async def _fetch(
        self, db: AsyncSession, article_id: ArticleId, operation: str,
    ) -> Article:
        article = await db.scalar(select(Article).where(Article.id == article_id))
        if article is None:
            raise NotFoundError(
                "Article", article_id,
                ErrorContext(operation=operation, article_id=article_id),
            )
        return article
