"""Attachment Index — relational rows linking stored blobs to articles.

Invariants:
    - add() writes one row per stored blob; storage_key uniqueness enforced by the primary key
    - remove() is idempotent (zero rows is success) so cleanup can retry
    - list_for_articles() issues one query for a whole page of articles
"""

import logging
from collections import defaultdict

from sqlalchemy import select, delete

from article_service.core.domain_types import (
    ArticleId, StorageKey, AttachmentRecord,
)
from article_service.core.validation import require_fields
from article_service.infrastructure.database import DatabaseSessionManager
from article_service.models.attachment import FileAttachment

logger = logging.getLogger(__name__)


class SqlAttachmentIndex:
    """AttachmentIndex backed by SQLAlchemy async sessions."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def add(
        self, storage_key: StorageKey, article_id: ArticleId,
    ) -> AttachmentRecord:
        require_fields(
            "index_attachment", storage_key=storage_key, article_id=article_id,
        )
        async with self._db.session() as db:
            row = FileAttachment(storage_key=storage_key, article_id=article_id)
            db.add(row)
            await db.commit()
            return row.to_record()

    async def list_for_article(self, article_id: ArticleId) -> list[AttachmentRecord]:
        grouped = await self.list_for_articles([article_id])
        return grouped.get(article_id, [])

    async def list_for_articles(
        self, article_ids: list[ArticleId],
    ) -> dict[ArticleId, list[AttachmentRecord]]:
        if not article_ids:
            return {}
        async with self._db.session() as db:
            result = await db.execute(
                select(FileAttachment)
                .where(FileAttachment.article_id.in_(article_ids))
                .order_by(FileAttachment.created_at, FileAttachment.storage_key)
            )
            grouped: dict[ArticleId, list[AttachmentRecord]] = defaultdict(list)
            for row in result.scalars().all():
                record = row.to_record()
                grouped[record.article_id].append(record)
            return dict(grouped)

    async def remove(self, storage_key: StorageKey) -> None:
        async with self._db.session() as db:
            await db.execute(
                delete(FileAttachment)
                .where(FileAttachment.storage_key == storage_key)
            )
            await db.commit()
