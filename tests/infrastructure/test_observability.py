"""Structured Logging — context fields in JSON and text output, idempotent setup.

Invariants:
    - Only non-None context fields are emitted
    - The record's creation time is used, not the formatting time
    - Repeated setup_logging() calls leave one service handler
"""

import json
import logging

from article_service.infrastructure.observability import (
    ContextTextFormatter, JSONFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "article_service.test", logging.WARNING, __file__, 1,
        "like_article failed", None, None,
    )
    record.created = 0.0
    record.__dict__.update(extra)
    return record


def test_json_includes_context_fields():
    line = JSONFormatter().format(_record(
        operation="like_article", article_id="01ABC", author_id="bob",
        error_code="ALREADY_EXISTS",
    ))
    log = json.loads(line)
    assert log["level"] == "WARNING"
    assert log["message"] == "like_article failed"
    assert log["operation"] == "like_article"
    assert log["article_id"] == "01ABC"
    assert log["error_code"] == "ALREADY_EXISTS"
    assert log["timestamp"] == "1970-01-01T00:00:00+00:00"


def test_json_omits_unset_fields():
    log = json.loads(JSONFormatter().format(_record(storage_key=None)))
    assert "storage_key" not in log
    assert "article_id" not in log


def test_text_appends_context_as_key_value():
    line = ContextTextFormatter().format(_record(article_id="01ABC", attempt=2))
    assert line.startswith("1970-01-01T00:00:00+00:00 WARNING article_service.test:")
    assert line.endswith("like_article failed article_id=01ABC attempt=2")


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("DEBUG", "text")
        setup_logging("INFO", "json")
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0].formatter, JSONFormatter)
        assert root.level == logging.INFO
    finally:
        for handler in [h for h in root.handlers if h not in before]:
            root.removeHandler(handler)
        root.setLevel(level)
