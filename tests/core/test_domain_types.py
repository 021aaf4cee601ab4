"""Domain Types — identity wrappers and frozen records.

Tests:
    - NewType wrappers are plain str at runtime
    - Records are immutable snapshots
    - ArticleView defaults to no attachments
"""

import dataclasses
from datetime import datetime, timezone

import pytest

from article_service.core.domain_types import (
    ArticleId, AuthorId, StorageKey,
    ArticleRecord, ArticleView, AuthorIdentity, FileUpload,
)


def _record(**overrides) -> ArticleRecord:
    fields = dict(
        id=ArticleId("01ABC"), author_id=AuthorId("alice"), original_article_id=None,
        title="T", content="C", created_at=datetime.now(timezone.utc),
        updated_at=None, like_count=0, version=1,
    )
    fields.update(overrides)
    return ArticleRecord(**fields)


def test_identity_types_wrap_str():
    assert ArticleId("01ABC") == "01ABC"
    assert AuthorId("alice") == "alice"
    assert StorageKey("k.png") == "k.png"


def test_article_record_is_frozen():
    record = _record()
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.title = "changed"


def test_replace_produces_new_snapshot():
    record = _record()
    bumped = dataclasses.replace(record, version=2)
    assert record.version == 1
    assert bumped.version == 2


def test_article_view_defaults_to_no_attachments():
    view = ArticleView(
        article=_record(),
        author=AuthorIdentity(full_name="", username="alice", profile_pic_url=""),
    )
    assert view.attachments == []


def test_file_upload_holds_bytes():
    upload = FileUpload(name="a.bin", content=b"\x00\x01")
    assert upload.content == b"\x00\x01"
