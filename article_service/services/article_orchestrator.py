"""Article Orchestrator — the public article operations over store, object store and identity.

Invariants:
    - Errors from collaborators are forwarded unchanged; the orchestrator only adds log
      context (operation, ids). The sole reinterpretation is has_liked → AlreadyExists /
      FailedPrecondition
    - create/rewrite persist the article row first, then store+index each file in order;
      a failure mid-loop leaves earlier blobs, index rows and the article row in place
    - delete: fetch (NotFound propagates), list attachments, delete the row synchronously,
      then hand blobs/index rows/likes to the cleanup queue; cleanup never fails the call
    - Reads mint fresh URLs and resolve identity for every article; any single failure
      fails the whole response (no partial pages)

Design Decisions:
    - Collaborators arrive as Protocol-typed constructor parameters, built once at startup
    - Per-page decoration: one attachment query for the page, then URL minting and identity
      lookups run concurrently in one asyncio.TaskGroup (first failure cancels the
      rest and propagates unwrapped)
"""

import asyncio
import logging
from collections.abc import Sequence

from article_service.core.domain_types import (
    ArticleId, AuthorId,
    ArticleRecord, AttachmentView,
    ArticlePage, ArticlePageView, ArticleView, FileUpload,
)
from article_service.core.errors import (
    ArticleServiceError, AlreadyExistsError, FailedPreconditionError, ErrorContext,
)
from article_service.core.repository_protocols import (
    ArticleStore, AttachmentIndex, ObjectStore, IdentityResolver,
)
from article_service.services.cleanup_queue import CleanupJob, CleanupQueue

logger = logging.getLogger(__name__)


class ArticleOrchestrator:
    """Composes the relational store, object store and identity resolver."""

    def __init__(
        self,
        store: ArticleStore,
        attachments: AttachmentIndex,
        objects: ObjectStore,
        identities: IdentityResolver,
        cleanup: CleanupQueue,
    ):
        self._store = store
        self._attachments = attachments
        self._objects = objects
        self._identities = identities
        self._cleanup = cleanup

    # ─── Writes ──────────────────────────────────────────────────

    async def create_article(
        self, author_id: AuthorId, title: str, content: str,
        files: Sequence[FileUpload] = (),
    ) -> ArticleView:
        try:
            article = await self._store.create_article(author_id, title, content)
            attachments = await self._attach_files("create_article", article, files)
            return await self._decorate(article, attachments)
        except ArticleServiceError as e:
            self._log_failure("create_article", e, author_id=author_id)
            raise

    async def rewrite_article(
        self, author_id: AuthorId, original_article_id: ArticleId,
        title: str, content: str, files: Sequence[FileUpload] = (),
    ) -> ArticleView:
        try:
            article = await self._store.rewrite_article(
                author_id, original_article_id, title, content,
            )
            attachments = await self._attach_files("rewrite_article", article, files)
            return await self._decorate(article, attachments)
        except ArticleServiceError as e:
            self._log_failure(
                "rewrite_article", e,
                author_id=author_id, article_id=original_article_id,
            )
            raise

    async def update_article(
        self, article_id: ArticleId, title: str, content: str,
    ) -> ArticleView:
        try:
            article = await self._store.update_article(article_id, title, content)
            return (await self._decorate_many([article]))[0]
        except ArticleServiceError as e:
            self._log_failure("update_article", e, article_id=article_id)
            raise

    async def delete_article(self, article_id: ArticleId) -> bool:
        try:
            article = await self._store.get_article(article_id)
            attachments = await self._attachments.list_for_article(article.id)
            await self._store.delete_article(article.id)
        except ArticleServiceError as e:
            self._log_failure("delete_article", e, article_id=article_id)
            raise
        self._cleanup.enqueue(CleanupJob(
            article_id=article.id,
            storage_keys=[a.storage_key for a in attachments],
        ))
        logger.info(
            "Article deleted",
            extra={"operation": "delete_article", "article_id": article.id},
        )
        return True

    async def like_article(self, author_id: AuthorId, article_id: ArticleId) -> bool:
        try:
            if await self._store.has_liked_article(author_id, article_id):
                raise AlreadyExistsError(
                    "author has already liked this article",
                    ErrorContext(
                        operation="like_article",
                        article_id=article_id, author_id=author_id,
                    ),
                )
            await self._store.like_article(author_id, article_id)
        except ArticleServiceError as e:
            self._log_failure(
                "like_article", e, author_id=author_id, article_id=article_id,
            )
            raise
        return True

    async def unlike_article(self, author_id: AuthorId, article_id: ArticleId) -> bool:
        try:
            if not await self._store.has_liked_article(author_id, article_id):
                raise FailedPreconditionError(
                    "author has not liked this article",
                    ErrorContext(
                        operation="unlike_article",
                        article_id=article_id, author_id=author_id,
                    ),
                )
            await self._store.unlike_article(author_id, article_id)
        except ArticleServiceError as e:
            self._log_failure(
                "unlike_article", e, author_id=author_id, article_id=article_id,
            )
            raise
        return True

    # ─── Reads ───────────────────────────────────────────────────

    async def get_article(self, article_id: ArticleId) -> ArticleView:
        try:
            article = await self._store.get_article(article_id)
            return (await self._decorate_many([article]))[0]
        except ArticleServiceError as e:
            self._log_failure("get_article", e, article_id=article_id)
            raise

    async def list_articles(self, page: int, page_size: int) -> ArticlePageView:
        try:
            result = await self._store.list_articles(page, page_size)
            return await self._decorate_page(result)
        except ArticleServiceError as e:
            self._log_failure("list_articles", e)
            raise

    async def list_articles_by_author(
        self, author_id: AuthorId, page: int, page_size: int,
    ) -> ArticlePageView:
        try:
            result = await self._store.list_articles_by_author(
                author_id, page, page_size,
            )
            return await self._decorate_page(result)
        except ArticleServiceError as e:
            self._log_failure("list_articles_by_author", e, author_id=author_id)
            raise

    # ─── Helpers ─────────────────────────────────────────────────

    async def _attach_files(
        self, operation: str, article: ArticleRecord, files: Sequence[FileUpload],
    ) -> list[AttachmentView]:
        """Store and index each file in order. No rollback on failure."""
        attached = []
        for upload in files:
            try:
                storage_key, url = await self._objects.put(upload.name, upload.content)
                await self._attachments.add(storage_key, article.id)
            except ArticleServiceError as e:
                logger.error(
                    f"Attachment failed after {len(attached)} of {len(files)} files; "
                    f"article row and earlier attachments left in place: {e.message}",
                    extra={
                        "operation": operation,
                        "article_id": article.id,
                        "author_id": article.author_id,
                        "error_code": e.code,
                    },
                )
                raise
            attached.append(AttachmentView(storage_key=storage_key, url=url))
        return attached

    async def _decorate(
        self, article: ArticleRecord, attachments: list[AttachmentView],
    ) -> ArticleView:
        author = await self._identities.resolve(article.author_id)
        return ArticleView(article=article, author=author, attachments=attachments)

    async def _decorate_page(self, page: ArticlePage) -> ArticlePageView:
        return ArticlePageView(
            articles=await self._decorate_many(page.articles),
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
        )

    async def _decorate_many(self, articles: list[ArticleRecord]) -> list[ArticleView]:
        """Mint URLs and resolve identities for a page; the first failure cancels the rest."""
        if not articles:
            return []
        by_article = await self._attachments.list_for_articles(
            [a.id for a in articles],
        )
        records = [by_article.get(a.id, []) for a in articles]
        try:
            async with asyncio.TaskGroup() as tg:
                authors = [
                    tg.create_task(self._identities.resolve(a.author_id))
                    for a in articles
                ]
                urls = [
                    [tg.create_task(self._objects.url_for(r.storage_key)) for r in rs]
                    for rs in records
                ]
        except ExceptionGroup as eg:
            raise eg.exceptions[0]
        return [
            ArticleView(
                article=article,
                author=author.result(),
                attachments=[
                    AttachmentView(storage_key=r.storage_key, url=url.result())
                    for r, url in zip(rs, url_tasks)
                ],
            )
            for article, author, rs, url_tasks in zip(articles, authors, records, urls)
        ]

    def _log_failure(
        self, operation: str, e: ArticleServiceError,
        article_id: str | None = None, author_id: str | None = None,
    ) -> None:
        logger.warning(
            f"{operation} failed: {e.message}",
            extra={
                "operation": operation,
                "article_id": article_id,
                "author_id": author_id,
                "error_code": e.code,
            },
        )
