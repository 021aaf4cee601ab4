"""Domain Types — identities and immutable records passed between core and shell.

Invariants:
    - ArticleId, AuthorId, StorageKey wrap str — never pass ORM rows across the core boundary
    - Records are frozen: stores return snapshots, callers never mutate them
    - ArticleView is the only shape returned by the orchestrator for a single article

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - Frozen dataclasses over dicts: field names checked at construction time
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ArticleId = NewType("ArticleId", str)
AuthorId = NewType("AuthorId", str)
StorageKey = NewType("StorageKey", str)


# ─── Stored Records ──────────────────────────────────────────────

@dataclass(frozen=True)
class ArticleRecord:
    """Article metadata as persisted in the relational store."""
    id: ArticleId
    author_id: AuthorId
    original_article_id: ArticleId | None
    title: str
    content: str
    created_at: datetime
    updated_at: datetime | None
    like_count: int
    version: int


@dataclass(frozen=True)
class AttachmentRecord:
    """Index row linking a stored blob to its owning article."""
    storage_key: StorageKey
    article_id: ArticleId


@dataclass(frozen=True)
class ArticlePage:
    """One page of article records plus the total at the same snapshot."""
    articles: list[ArticleRecord]
    total_count: int
    page: int
    page_size: int


# ─── Inputs ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class FileUpload:
    """A file attached to a create/rewrite request."""
    name: str
    content: bytes


# ─── Read Models ─────────────────────────────────────────────────

@dataclass(frozen=True)
class AuthorIdentity:
    """Display identity resolved from the identity service."""
    full_name: str
    username: str
    profile_pic_url: str


@dataclass(frozen=True)
class AttachmentView:
    """Attachment with a freshly minted, time-limited URL."""
    storage_key: StorageKey
    url: str


@dataclass(frozen=True)
class ArticleView:
    """Article decorated with attachment URLs and author identity."""
    article: ArticleRecord
    author: AuthorIdentity
    attachments: list[AttachmentView] = field(default_factory=list)


@dataclass(frozen=True)
class ArticlePageView:
    """Decorated page returned by list operations."""
    articles: list[ArticleView]
    total_count: int
    page: int
    page_size: int
