"""Object Store Adapter — MinIO/S3 blob storage with presigned, time-limited URLs.

Invariants:
    - Storage keys come from core/storage_keys.py (uuid4 + extension), never the upload name
    - delete() is idempotent: a missing key is success
    - URL lifetime is fixed at construction (configuration), never caller-supplied
    - Every transport or S3 failure surfaces as UnavailableError; no retries here

Design Decisions:
    - The minio client is blocking: every call runs in a worker thread via asyncio.to_thread
    - Client injected by constructor so tests substitute a mock without patching imports
"""

import asyncio
import io
import logging
import mimetypes
from datetime import timedelta

from urllib3.exceptions import HTTPError as Urllib3HTTPError
from minio import Minio
from minio.error import MinioException, S3Error

from article_service.config import Settings
from article_service.core.domain_types import StorageKey
from article_service.core.errors import UnavailableError, ErrorContext
from article_service.core.storage_keys import make_storage_key

logger = logging.getLogger(__name__)

_SERVICE = "Object store"
_MISSING_KEY_CODES = frozenset({"NoSuchKey", "NoSuchObject"})
_TRANSPORT_ERRORS = (MinioException, Urllib3HTTPError, OSError)


class MinioObjectStore:
    """Stores article attachments in one bucket."""

    def __init__(self, client: Minio, bucket: str, url_expiry_seconds: int = 3_600):
        self._client = client
        self._bucket = bucket
        self._url_ttl = timedelta(seconds=url_expiry_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MinioObjectStore":
        client = Minio(
            endpoint=settings.object_store_endpoint,
            access_key=settings.object_store_access_key,
            secret_key=settings.object_store_secret_key,
            secure=settings.object_store_secure,
            region=settings.object_store_region,
        )
        return cls(
            client, settings.object_store_bucket,
            settings.object_store_url_expiry_seconds,
        )

    async def ensure_bucket(self) -> None:
        """Create the bucket on first start."""
        try:
            exists = await asyncio.to_thread(
                self._client.bucket_exists, bucket_name=self._bucket,
            )
            if not exists:
                await asyncio.to_thread(
                    self._client.make_bucket, bucket_name=self._bucket,
                )
                logger.info(f"Created bucket {self._bucket}")
        except _TRANSPORT_ERRORS as e:
            raise UnavailableError(
                str(e), _SERVICE, ErrorContext(operation="ensure_bucket"),
            ) from e

    async def put(self, original_name: str, data: bytes) -> tuple[StorageKey, str]:
        """Write a blob under a generated key; return the key and a fresh URL."""
        storage_key = make_storage_key(original_name)
        content_type = (
            mimetypes.guess_type(original_name)[0] or "application/octet-stream"
        )
        try:
            await asyncio.to_thread(
                self._client.put_object,
                bucket_name=self._bucket,
                object_name=storage_key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except _TRANSPORT_ERRORS as e:
            raise UnavailableError(
                str(e), _SERVICE,
                ErrorContext(operation="put_object", storage_key=storage_key),
            ) from e
        url = await self.url_for(storage_key)
        return storage_key, url

    async def delete(self, storage_key: StorageKey) -> None:
        try:
            await asyncio.to_thread(
                self._client.remove_object,
                bucket_name=self._bucket,
                object_name=storage_key,
            )
        except S3Error as e:
            if e.code in _MISSING_KEY_CODES:
                return
            raise UnavailableError(
                str(e), _SERVICE,
                ErrorContext(operation="remove_object", storage_key=storage_key),
            ) from e
        except _TRANSPORT_ERRORS as e:
            raise UnavailableError(
                str(e), _SERVICE,
                ErrorContext(operation="remove_object", storage_key=storage_key),
            ) from e

    async def url_for(self, storage_key: StorageKey) -> str:
        """Presigned GET URL valid for the configured lifetime."""
        try:
            return await asyncio.to_thread(
                self._client.presigned_get_object,
                bucket_name=self._bucket,
                object_name=storage_key,
                expires=self._url_ttl,
            )
        except _TRANSPORT_ERRORS as e:
            raise UnavailableError(
                str(e), _SERVICE,
                ErrorContext(operation="presign", storage_key=storage_key),
            ) from e
