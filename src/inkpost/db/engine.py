"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection
pooling, AsyncSession for per-request database access, dependency injection
via FastAPI.

The pool is bounded: pool_size steady connections plus max_overflow extra.
When all are checked out, new requests wait up to pool_timeout seconds for
one to free up before failing with a pool TimeoutError (rendered as 503).
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inkpost.config import Settings, settings
from inkpost.db.models import Base
from inkpost.errors import STORE_ERRORS, StoreUnavailableError


def build_engine(cfg: Settings) -> AsyncEngine:
    """Create the pooled engine described by `cfg`."""
    return create_async_engine(
        cfg.database_url,
        echo=cfg.debug,
        pool_size=cfg.db_pool_size,
        max_overflow=cfg.db_max_overflow,
        pool_timeout=cfg.db_pool_timeout,
        pool_pre_ping=True,
    )


engine = build_engine(settings)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def check_store(bind: AsyncEngine) -> None:
    """Round-trip a trivial query; raise StoreUnavailableError on failure."""
    try:
        async with bind.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (*STORE_ERRORS, OSError) as e:
        raise StoreUnavailableError(f"Database unreachable: {e}") from e


async def create_schema(bind: AsyncEngine) -> None:
    """Create all tables that don't exist yet (dev/test; prod uses Alembic)."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
