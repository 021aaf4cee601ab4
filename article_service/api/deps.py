"""API Dependencies — hand the lifespan-built components to route handlers.

Invariants:
    - Components live on app.state, set once by the lifespan
    - Tests swap them through app.dependency_overrides, never by patching modules
"""

from fastapi import Request

from article_service.infrastructure.database import DatabaseSessionManager
from article_service.services.article_orchestrator import ArticleOrchestrator


def get_orchestrator(request: Request) -> ArticleOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise RuntimeError("Article orchestrator not initialized")
    return orchestrator


def get_db_manager(request: Request) -> DatabaseSessionManager | None:
    return getattr(request.app.state, "db", None)
