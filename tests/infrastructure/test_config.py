"""Settings — environment overrides and database URL normalization."""

from article_service.config import Settings


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgres://u:p@db:5432/articles")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/articles"


def test_sqlite_url_left_alone():
    settings = Settings(database_url="sqlite+aiosqlite:///local.db")
    assert settings.database_url == "sqlite+aiosqlite:///local.db"


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("OBJECT_STORE_URL_EXPIRY_SECONDS", "120")
    monkeypatch.setenv("CLEANUP_MAX_RETRIES", "9")
    settings = Settings()
    assert settings.object_store_url_expiry_seconds == 120
    assert settings.cleanup_max_retries == 9
