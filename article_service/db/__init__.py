"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - All sessions are async (AsyncSession), created by DatabaseSessionManager

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite in tests
"""
