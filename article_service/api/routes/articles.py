"""Article Routes — HTTP surface for the nine article operations.

Invariants:
    - Handlers contain no business logic: parse, call the orchestrator, serialize
    - ArticleServiceError propagates to the global handler (status from error kind)
    - Pagination parameters are passed through unvalidated; the store rejects non-positive values
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from article_service.api.deps import get_orchestrator
from article_service.core.domain_types import ArticleId, AuthorId
from article_service.schemas.article import (
    ArticleCreate, ArticleUpdate, ArticleRewrite, LikeRequest,
    ArticleResponse, ArticlePageResponse, SuccessResponse,
)
from article_service.services.article_orchestrator import ArticleOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/articles", tags=["articles"])
authors_router = APIRouter(prefix="/api/v1/authors", tags=["articles"])


@router.post(
    "", response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_article(
    body: ArticleCreate,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    """Create an article and store its attached files."""
    view = await articles.create_article(
        AuthorId(body.author_id), body.title, body.content,
        [f.to_domain() for f in body.files],
    )
    return ArticleResponse.from_view(view)


@router.get("", response_model=ArticlePageResponse)
async def list_articles(
    page: int = Query(1),
    page_size: int = Query(10),
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    """Page through all articles, newest first."""
    view = await articles.list_articles(page, page_size)
    return ArticlePageResponse.from_view(view)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    view = await articles.get_article(ArticleId(article_id))
    return ArticleResponse.from_view(view)


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: str,
    body: ArticleUpdate,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    """Replace title and content; id, author and created_at never change."""
    view = await articles.update_article(
        ArticleId(article_id), body.title, body.content,
    )
    return ArticleResponse.from_view(view)


@router.delete("/{article_id}", response_model=SuccessResponse)
async def delete_article(
    article_id: str,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    """Delete the article row; attachments and likes are cleaned up in the background."""
    return SuccessResponse(success=await articles.delete_article(ArticleId(article_id)))


@router.post(
    "/{article_id}/rewrites", response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def rewrite_article(
    article_id: str,
    body: ArticleRewrite,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    """Fork an existing article into a new, independent one."""
    view = await articles.rewrite_article(
        AuthorId(body.author_id), ArticleId(article_id),
        body.title, body.content,
        [f.to_domain() for f in body.files],
    )
    return ArticleResponse.from_view(view)


@router.post("/{article_id}/likes", response_model=SuccessResponse)
async def like_article(
    article_id: str,
    body: LikeRequest,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    liked = await articles.like_article(AuthorId(body.author_id), ArticleId(article_id))
    return SuccessResponse(success=liked)


@router.delete("/{article_id}/likes/{author_id}", response_model=SuccessResponse)
async def unlike_article(
    article_id: str,
    author_id: str,
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    unliked = await articles.unlike_article(AuthorId(author_id), ArticleId(article_id))
    return SuccessResponse(success=unliked)


@authors_router.get("/{author_id}/articles", response_model=ArticlePageResponse)
async def list_articles_by_author(
    author_id: str,
    page: int = Query(1),
    page_size: int = Query(10),
    articles: ArticleOrchestrator = Depends(get_orchestrator),
):
    """Page through one author's articles, newest first."""
    view = await articles.list_articles_by_author(AuthorId(author_id), page, page_size)
    return ArticlePageResponse.from_view(view)
