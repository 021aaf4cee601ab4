"""FileAttachment ORM — index of blobs stored for an article.

Invariants:
    - storage_key is the primary key and the object-store key (uuid4 + extension)
    - article_id referenced an existing article when the row was written
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from article_service.core.domain_types import ArticleId, StorageKey, AttachmentRecord
from article_service.db.base import Base


class FileAttachment(Base):
    """Attachment index row — owned by exactly one article."""
    __tablename__ = "attachments"

    storage_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    article_id: Mapped[str] = mapped_column(
        String(26), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> AttachmentRecord:
        return AttachmentRecord(
            storage_key=StorageKey(self.storage_key),
            article_id=ArticleId(self.article_id),
        )
