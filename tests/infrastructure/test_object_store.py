"""Object Store Adapter — key generation, idempotent delete and error mapping over a mocked minio client.

Invariants:
    - put() writes under a generated key that keeps only the extension
    - A missing key on delete is success; any other S3 or transport failure → UNAVAILABLE
    - Presigned URLs use the configured lifetime
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from minio.error import S3Error
from urllib3.exceptions import MaxRetryError

from article_service.core.errors import UnavailableError
from article_service.infrastructure.object_store import MinioObjectStore


def _s3_error(code: str) -> S3Error:
    class _StubS3Error(S3Error):
        def __init__(self):
            Exception.__init__(self, code)

        def __str__(self):
            return f"S3 operation failed; code: {code}"

    _StubS3Error.code = code
    return _StubS3Error()


@pytest.fixture
def client():
    mock = MagicMock()
    mock.presigned_get_object.return_value = "https://minio.test/articles/key?X-Amz-Signature=abc"
    return mock


@pytest.fixture
def store(client):
    return MinioObjectStore(client, "articles", url_expiry_seconds=600)


async def test_put_uses_generated_key_and_returns_url(store, client):
    key, url = await store.put("../secret/diagram.png", b"png-bytes")

    assert key.endswith(".png")
    assert "secret" not in key
    assert url.startswith("https://minio.test/")
    kwargs = client.put_object.call_args.kwargs
    assert kwargs["bucket_name"] == "articles"
    assert kwargs["object_name"] == key
    assert kwargs["length"] == len(b"png-bytes")
    assert kwargs["content_type"] == "image/png"
    assert kwargs["data"].read() == b"png-bytes"


async def test_put_unknown_type_is_octet_stream(store, client):
    await store.put("blob", b"x")
    assert client.put_object.call_args.kwargs["content_type"] == "application/octet-stream"


async def test_put_transport_failure_is_unavailable(store, client):
    client.put_object.side_effect = MaxRetryError(None, "/articles/k", "refused")
    with pytest.raises(UnavailableError):
        await store.put("a.png", b"x")


async def test_url_uses_configured_lifetime(store, client):
    await store.url_for("k.png")
    kwargs = client.presigned_get_object.call_args.kwargs
    assert kwargs["expires"] == timedelta(seconds=600)
    assert kwargs["object_name"] == "k.png"


async def test_delete_missing_key_is_success(store, client):
    client.remove_object.side_effect = _s3_error("NoSuchKey")
    await store.delete("gone.png")
    client.remove_object.assert_called_once()


async def test_delete_other_s3_error_is_unavailable(store, client):
    client.remove_object.side_effect = _s3_error("AccessDenied")
    with pytest.raises(UnavailableError) as exc:
        await store.delete("k.png")
    assert exc.value.context.storage_key == "k.png"


async def test_ensure_bucket_creates_when_absent(store, client):
    client.bucket_exists.return_value = False
    await store.ensure_bucket()
    client.make_bucket.assert_called_once_with(bucket_name="articles")


async def test_ensure_bucket_skips_existing(store, client):
    client.bucket_exists.return_value = True
    await store.ensure_bucket()
    client.make_bucket.assert_not_called()
