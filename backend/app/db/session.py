"""
Database session management.

The async engine is owned by the application: `create_app()` builds it during
startup, stores it on `app.state.engine` and disposes it at shutdown. Request
handlers get an AsyncSession through `get_session_generator`.
"""
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, Engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from backend.app.config import get_settings


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """
    Enable foreign key constraints for SQLite.

    Applies to every sync engine, including the one backing the async engine.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _ensure_sqlite_directory(db_url: str) -> None:
    if db_url.startswith("sqlite:///"):
        db_path = db_url.replace("sqlite:///", "")
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def to_async_url(db_url: str) -> str:
    """Convert sqlite:/// to sqlite+aiosqlite:/// for the async driver."""
    if db_url.startswith("sqlite:///"):
        return db_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return db_url


def get_sync_engine(db_url: Optional[str] = None) -> Engine:
    """
    Create a SYNC engine.

    Used by Alembic migrations and terminal scripts.
    """
    db_url = db_url or get_settings().DATABASE_URL
    _ensure_sqlite_directory(db_url)
    return create_engine(db_url, echo=False, poolclass=NullPool)


def get_async_engine(db_url: Optional[str] = None) -> AsyncEngine:
    """
    Create the async engine used by the FastAPI app.

    Args:
        db_url: Sync-style database URL; defaults to settings.DATABASE_URL
    """
    db_url = db_url or get_settings().DATABASE_URL
    _ensure_sqlite_directory(db_url)

    return create_async_engine(
        to_async_url(db_url),
        echo=False,
        # NullPool for SQLite - each connection is independent
        poolclass=NullPool,
        )


async def create_all_tables(engine: AsyncEngine) -> None:
    """Create every table from SQLModel metadata (scratch databases, tests)."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session_generator(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an async session bound to the application's engine.

    Usage in FastAPI:
        @router.get("/")
        async def endpoint(session: AsyncSession = Depends(get_session_generator)):
            ...

    Anything not committed by the endpoint is rolled back when the session closes.
    """
    engine: AsyncEngine = request.app.state.engine
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session
