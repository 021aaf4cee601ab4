"""Article Schemas — Pydantic request/response models for the article API.

Invariants:
    - File content travels as base64 in JSON and is decoded before reaching the orchestrator
    - Required text fields are plain str: emptiness is rejected by the relational store
      (INVALID_ARGUMENT), not by schema validation
    - Responses never carry persisted URLs; every url is minted for this response
"""

from datetime import datetime

from pydantic import BaseModel, Base64Bytes, Field

from article_service.core.domain_types import (
    ArticlePageView, ArticleView, FileUpload,
)


class FileUploadIn(BaseModel):
    """One attached file — original name (for its extension) and base64 content."""
    name: str = Field(max_length=255)
    content: Base64Bytes

    def to_domain(self) -> FileUpload:
        return FileUpload(name=self.name, content=self.content)


class ArticleCreate(BaseModel):
    author_id: str
    title: str
    content: str
    files: list[FileUploadIn] = Field(default_factory=list)


class ArticleUpdate(BaseModel):
    title: str
    content: str


class ArticleRewrite(BaseModel):
    """Fork of an existing article; the original id comes from the path."""
    author_id: str
    title: str
    content: str
    files: list[FileUploadIn] = Field(default_factory=list)


class LikeRequest(BaseModel):
    author_id: str


class SuccessResponse(BaseModel):
    success: bool = True


class AttachmentResponse(BaseModel):
    storage_key: str
    url: str


class AuthorResponse(BaseModel):
    full_name: str
    username: str
    profile_pic_url: str


class ArticleResponse(BaseModel):
    """Article with author identity and freshly minted attachment URLs."""
    id: str
    author_id: str
    original_article_id: str | None
    title: str
    content: str
    created_at: datetime
    updated_at: datetime | None
    like_count: int
    version: int
    files: list[AttachmentResponse]
    author: AuthorResponse

    @classmethod
    def from_view(cls, view: ArticleView) -> "ArticleResponse":
        article = view.article
        return cls(
            id=article.id,
            author_id=article.author_id,
            original_article_id=article.original_article_id,
            title=article.title,
            content=article.content,
            created_at=article.created_at,
            updated_at=article.updated_at,
            like_count=article.like_count,
            version=article.version,
            files=[
                AttachmentResponse(storage_key=a.storage_key, url=a.url)
                for a in view.attachments
            ],
            author=AuthorResponse(
                full_name=view.author.full_name,
                username=view.author.username,
                profile_pic_url=view.author.profile_pic_url,
            ),
        )


class ArticlePageResponse(BaseModel):
    articles: list[ArticleResponse]
    total_count: int
    page: int
    page_size: int

    @classmethod
    def from_view(cls, view: ArticlePageView) -> "ArticlePageResponse":
        return cls(
            articles=[ArticleResponse.from_view(a) for a in view.articles],
            total_count=view.total_count,
            page=view.page,
            page_size=view.page_size,
        )
