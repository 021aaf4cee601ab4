"""Article Service API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ArticleServiceError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Every shared handle (database manager, object store, identity client, cleanup
      queue) is built once in the lifespan and passed by constructor to its users

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Components published on app.state and read through api/deps.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from article_service.api.error_handlers import register_error_handlers
from article_service.api.routes import articles, health
from article_service.config import get_settings
from article_service.infrastructure.database import DatabaseSessionManager
from article_service.infrastructure.identity_client import HttpIdentityResolver
from article_service.infrastructure.object_store import MinioObjectStore
from article_service.infrastructure.observability import setup_logging
from article_service.services.article_orchestrator import ArticleOrchestrator
from article_service.services.article_store import SqlArticleStore
from article_service.services.attachment_index import SqlAttachmentIndex
from article_service.services.cleanup_queue import CleanupQueue

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    objects = MinioObjectStore.from_settings(settings)
    await objects.ensure_bucket()
    identities = HttpIdentityResolver.from_settings(settings)
    store = SqlArticleStore(db, settings.pagination_isolation_level)
    attachments = SqlAttachmentIndex(db)
    cleanup = CleanupQueue(
        objects, attachments, store,
        workers=settings.cleanup_workers,
        max_retries=settings.cleanup_max_retries,
        base_delay_ms=settings.cleanup_base_delay_ms,
        max_delay_ms=settings.cleanup_max_delay_ms,
    )
    cleanup.start()

    app.state.db = db
    app.state.orchestrator = ArticleOrchestrator(
        store, attachments, objects, identities, cleanup,
    )
    logger.info("Article service started")
    try:
        yield
    finally:
        logger.info("Article service shutting down")
        await cleanup.stop()
        await identities.aclose()
        await db.dispose()


app = FastAPI(
    title="Article Service API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(articles.router)
app.include_router(articles.authors_router)

register_error_handlers(app)
