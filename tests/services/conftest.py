"""Service test fixtures — SQLite-backed stores, fake collaborators, FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Stores and the cleanup queue receive the test DatabaseSessionManager by constructor
    - Routes reach the orchestrator through app.dependency_overrides only
    - The cleanup queue runs with zero backoff and is stopped after each test

Design Decisions:
    - File-backed SQLite over :memory: so concurrent sessions (page decoration in reads)
      each get their own connection
    - Pagination runs at SERIALIZABLE: SQLite has no REPEATABLE READ
    - Object store and identity service are in-memory fakes (tests/services/fakes.py)
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from httpx import ASGITransport, AsyncClient

import article_service.models  # noqa: F401  registers tables on Base.metadata
from article_service.api.deps import get_db_manager, get_orchestrator
from article_service.db.base import Base
from article_service.infrastructure.database import DatabaseSessionManager
from article_service.main import app
from article_service.services.article_orchestrator import ArticleOrchestrator
from article_service.services.article_store import SqlArticleStore
from article_service.services.attachment_index import SqlAttachmentIndex
from article_service.services.cleanup_queue import CleanupQueue

from fakes import FakeIdentityResolver, FakeObjectStore


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'articles.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
async def test_db(test_engine):
    """Raw session for asserting on rows directly."""
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def article_store(db_manager):
    return SqlArticleStore(db_manager, pagination_isolation_level="SERIALIZABLE")


@pytest.fixture
def attachment_index(db_manager):
    return SqlAttachmentIndex(db_manager)


@pytest.fixture
def fake_objects():
    return FakeObjectStore()


@pytest.fixture
def fake_identities():
    return FakeIdentityResolver()


@pytest.fixture
async def cleanup_queue(fake_objects, attachment_index, article_store):
    queue = CleanupQueue(
        fake_objects, attachment_index, article_store,
        workers=1, max_retries=2, base_delay_ms=0, max_delay_ms=0,
    )
    queue.start()
    yield queue
    await queue.stop(drain_timeout=1.0)


@pytest.fixture
def orchestrator(article_store, attachment_index, fake_objects, fake_identities, cleanup_queue):
    return ArticleOrchestrator(
        article_store, attachment_index, fake_objects, fake_identities, cleanup_queue,
    )


@pytest.fixture
async def client(orchestrator, db_manager):
    """FastAPI test client wired to the test orchestrator."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_db_manager] = lambda: db_manager
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
