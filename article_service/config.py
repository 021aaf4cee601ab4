"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded for production)
    - get_settings() is cached (lru_cache) — single instance per process
    - Presigned URL lifetime is configuration, never a request parameter

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://articles:articles@db:5432/article_service"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgres:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            for prefix in ("postgresql://", "postgres://"):
                if v.startswith(prefix):
                    return v.replace(prefix, "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    pagination_isolation_level: str = "REPEATABLE READ"

    # Object store (S3 / MinIO)
    object_store_endpoint: str = "localhost:9000"
    object_store_access_key: str = "admin"
    object_store_secret_key: str = "secretpass"
    object_store_bucket: str = "articles"
    object_store_secure: bool = False
    object_store_region: str = "us-east-1"
    object_store_url_expiry_seconds: int = 3_600

    # Identity service
    identity_service_url: str = "http://user-service:8080"
    identity_timeout_seconds: float = 5.0

    # Delete cleanup queue
    cleanup_workers: int = 2
    cleanup_max_retries: int = 5
    cleanup_base_delay_ms: int = 500
    cleanup_max_delay_ms: int = 30_000

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
