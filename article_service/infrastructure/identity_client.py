"""Identity Resolver — HTTP lookup of an author's display identity.

Invariants:
    - 404 from the identity service → NotFoundError
    - Transport failure, timeout, 5xx, other unexpected status or malformed body → UnavailableError
    - Pure read: no cache, no retry, one call per resolve()
    - author_id is percent-encoded as a single path segment

Design Decisions:
    - One shared httpx.AsyncClient per process, closed in the FastAPI lifespan
    - Response body validated with a Pydantic model before it becomes a domain type
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from article_service.config import Settings
from article_service.core.domain_types import AuthorId, AuthorIdentity
from article_service.core.errors import (
    NotFoundError, UnavailableError, ErrorContext,
)

logger = logging.getLogger(__name__)

_SERVICE = "Identity service"


def _path_segment(author_id: str) -> str:
    """Percent-encode author_id so it stays a single, literal path segment."""
    segment = quote(author_id, safe="")
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


class _IdentityPayload(BaseModel):
    full_name: str = ""
    username: str
    profile_pic_url: str = ""


class HttpIdentityResolver:
    """Resolves author ids against the user service."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpIdentityResolver":
        return cls(httpx.AsyncClient(
            base_url=settings.identity_service_url.rstrip("/"),
            timeout=settings.identity_timeout_seconds,
        ))

    async def resolve(self, author_id: AuthorId) -> AuthorIdentity:
        context = ErrorContext(operation="resolve_identity", author_id=author_id)
        try:
            resp = await self._client.get(
                f"/api/v1/users/{_path_segment(author_id)}",
            )
        except httpx.HTTPError as e:
            raise UnavailableError(str(e) or type(e).__name__, _SERVICE, context) from e

        if resp.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError("Author identity", author_id, context)
        if resp.status_code != httpx.codes.OK:
            raise UnavailableError(
                f"unexpected status {resp.status_code}", _SERVICE, context,
            )
        try:
            payload = _IdentityPayload.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise UnavailableError("malformed identity payload", _SERVICE, context) from e
        return AuthorIdentity(
            full_name=payload.full_name,
            username=payload.username,
            profile_pic_url=payload.profile_pic_url,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
