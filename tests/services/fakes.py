"""In-memory collaborators for service tests.

FakeObjectStore and FakeIdentityResolver satisfy the ObjectStore and
IdentityResolver protocols and expose knobs for injecting failures.
"""

import asyncio

from article_service.core.domain_types import AuthorIdentity, StorageKey
from article_service.core.errors import (
    ErrorContext, NotFoundError, UnavailableError,
)
from article_service.core.storage_keys import make_storage_key


class FakeObjectStore:
    """Blob store keyed by storage key.

    fail_put_names: uploads with these original names fail with UNAVAILABLE
    fail_urls: url_for fails with UNAVAILABLE
    delete_failures: number of upcoming delete calls that fail
    url_gate: when set, url_for waits on it (cancellations counted in cancelled_urls)
    """

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_put_names: set[str] = set()
        self.fail_urls = False
        self.delete_failures = 0
        self.minted = 0
        self.url_gate: asyncio.Event | None = None
        self.cancelled_urls = 0

    async def put(self, original_name: str, content: bytes) -> tuple[StorageKey, str]:
        if original_name in self.fail_put_names:
            raise UnavailableError(
                "connection refused", "Object store",
                ErrorContext(operation="put_object"),
            )
        key = StorageKey(make_storage_key(original_name))
        self.blobs[key] = content
        return key, await self.url_for(key)

    async def delete(self, storage_key: StorageKey) -> None:
        if self.delete_failures > 0:
            self.delete_failures -= 1
            raise UnavailableError(
                "connection reset", "Object store",
                ErrorContext(operation="delete_object", storage_key=storage_key),
            )
        self.blobs.pop(storage_key, None)
        self.deleted.append(storage_key)

    async def url_for(self, storage_key: StorageKey) -> str:
        if self.url_gate is not None:
            try:
                await self.url_gate.wait()
            except asyncio.CancelledError:
                self.cancelled_urls += 1
                raise
        if self.fail_urls:
            raise UnavailableError(
                "presign failed", "Object store",
                ErrorContext(operation="presign_url", storage_key=storage_key),
            )
        self.minted += 1
        return f"https://objects.test/articles/{storage_key}?sig={self.minted}"


class FakeIdentityResolver:
    """Resolves any author to a synthetic profile unless told otherwise."""

    def __init__(self):
        self.missing: set[str] = set()
        self.unavailable = False
        self.delay = 0.0
        self.calls: list[str] = []

    async def resolve(self, author_id: str) -> AuthorIdentity:
        self.calls.append(author_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.unavailable:
            raise UnavailableError(
                "connect timeout", "Identity service",
                ErrorContext(operation="resolve_identity", author_id=author_id),
            )
        if author_id in self.missing:
            raise NotFoundError(
                "Author identity", author_id,
                ErrorContext(operation="resolve_identity", author_id=author_id),
            )
        return AuthorIdentity(
            full_name=f"Author {author_id}",
            username=author_id,
            profile_pic_url=f"https://pics.test/{author_id}.png",
        )
