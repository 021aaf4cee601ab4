"""Boundary Protocols — contracts between the orchestrator and its collaborators.

Invariants:
    - The orchestrator depends only on these Protocol types, never on SQLAlchemy,
      MinIO or httpx directly
    - Implementations are constructed once at startup and passed in by parameter
    - Every method raises core/errors.py types; nothing else crosses the boundary

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: every implementation does IO
"""

from typing import Protocol

from article_service.core.domain_types import (
    ArticleId, AuthorId, StorageKey,
    ArticleRecord, AttachmentRecord, ArticlePage, AuthorIdentity,
)


class ArticleStore(Protocol):
    """Contract for article and like persistence — the relational store."""
    async def create_article(
        self, author_id: AuthorId, title: str, content: str,
    ) -> ArticleRecord: ...
    async def update_article(
        self, article_id: ArticleId, title: str, content: str,
    ) -> ArticleRecord: ...
    async def rewrite_article(
        self, author_id: AuthorId, original_article_id: ArticleId,
        title: str, content: str,
    ) -> ArticleRecord: ...
    async def delete_article(self, article_id: ArticleId) -> None: ...
    async def get_article(self, article_id: ArticleId) -> ArticleRecord: ...
    async def like_article(self, author_id: AuthorId, article_id: ArticleId) -> None: ...
    async def unlike_article(self, author_id: AuthorId, article_id: ArticleId) -> None: ...
    async def has_liked_article(
        self, author_id: AuthorId, article_id: ArticleId,
    ) -> bool: ...
    async def list_articles(self, page: int, page_size: int) -> ArticlePage: ...
    async def list_articles_by_author(
        self, author_id: AuthorId, page: int, page_size: int,
    ) -> ArticlePage: ...


class LikeCleanup(Protocol):
    """Contract for dropping every like of a deleted article (idempotent)."""
    async def remove_likes(self, article_id: ArticleId) -> int: ...


class AttachmentIndex(Protocol):
    """Contract for the rows linking stored blobs to articles."""
    async def add(
        self, storage_key: StorageKey, article_id: ArticleId,
    ) -> AttachmentRecord: ...
    async def list_for_article(self, article_id: ArticleId) -> list[AttachmentRecord]: ...
    async def list_for_articles(
        self, article_ids: list[ArticleId],
    ) -> dict[ArticleId, list[AttachmentRecord]]: ...
    async def remove(self, storage_key: StorageKey) -> None: ...


class ObjectStore(Protocol):
    """Contract for blob storage with time-limited access URLs."""
    async def put(self, original_name: str, data: bytes) -> tuple[StorageKey, str]: ...
    async def delete(self, storage_key: StorageKey) -> None: ...
    async def url_for(self, storage_key: StorageKey) -> str: ...


class IdentityResolver(Protocol):
    """Contract for looking up an author's display identity."""
    async def resolve(self, author_id: AuthorId) -> AuthorIdentity: ...
