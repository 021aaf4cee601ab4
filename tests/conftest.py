"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real infrastructure
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("OBJECT_STORE_ENDPOINT", "objects.invalid:9000")
os.environ.setdefault("IDENTITY_SERVICE_URL", "http://identity.invalid")
os.environ.setdefault("LOG_FORMAT", "text")
