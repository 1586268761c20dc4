"""
BizLedger FastAPI application.
Main entry point for the backend API.

The application factory owns the database engine: it is created on startup,
stored on app.state.engine and disposed on shutdown.
"""
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from alembic import command
from alembic.config import Config as AlembicConfig
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from backend.app.api.v1.router import router as api_v1_router
from backend.app.config import get_settings, set_test_mode, is_test_mode
from backend.app.db.session import get_async_engine
from backend.app.error_handlers import register_error_handlers
from backend.app.logging_config import (
    configure_logging,
    get_logger,
    bind_request_context,
    clear_request_context,
    )

# Check for --test flag in command line arguments
# Must run before create_app() reads settings below
if "--test" in sys.argv:
    set_test_mode(True)
    print("[BizLedger] Test mode enabled (--test flag detected)")
    sys.argv.remove("--test")  # Remove flag so uvicorn doesn't complain

logger = get_logger(__name__)

BACKEND_DIR = Path(__file__).parent.parent
ALEMBIC_INI = BACKEND_DIR / "alembic.ini"


def get_alembic_config(db_url: Optional[str] = None) -> AlembicConfig:
    """Alembic config pointing at backend/alembic and the given (sync) database URL."""
    cfg = AlembicConfig(str(ALEMBIC_INI))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", db_url or get_settings().DATABASE_URL)
    return cfg


def ensure_database_exists(db_url: Optional[str] = None) -> None:
    """
    Bring the database schema to the latest Alembic revision.

    Creates the SQLite file (and its directory) when missing. Safe to call on
    every startup: an up-to-date database is left untouched.
    """
    db_url = db_url or get_settings().DATABASE_URL

    if db_url.startswith("sqlite:///"):
        db_path = Path(db_url.replace("sqlite:///", "", 1))
        if not db_path.exists() or db_path.stat().st_size == 0:
            logger.warning("Database file not found or empty, creating it", db_path=str(db_path))
        db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Running Alembic migrations...")
    command.upgrade(get_alembic_config(db_url), "head")
    logger.info("Database schema is up to date")


def create_app(engine: Optional[AsyncEngine] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        engine: Pre-built async engine (tests). When omitted, one is created
            from settings during startup and migrations are applied.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        owns_engine = getattr(app.state, "engine", None) is None
        if owns_engine:
            if settings.AUTO_MIGRATE:
                ensure_database_exists(settings.DATABASE_URL)
            app.state.engine = get_async_engine(settings.DATABASE_URL)

        logger.info(
            "Starting BizLedger",
            version=settings.VERSION,
            database_url=settings.DATABASE_URL.split("///")[-1],  # Hide driver prefix in logs
            test_mode=is_test_mode(),
            )
        yield
        logger.info("Shutting down BizLedger")
        if owns_engine:
            await app.state.engine.dispose()
            app.state.engine = None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        lifespan=lifespan,
        )
    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_log_context(request: Request, call_next):
        clear_request_context()
        bind_request_context(method=request.method, path=request.url.path)
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    register_error_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    async def root():
        """Basic API information."""
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": f"{settings.API_V1_PREFIX}/docs",
            }

    return app


def _configure_default_logging() -> None:
    settings = get_settings()
    configure_logging(
        settings.LOG_LEVEL,
        enable_file_logging=not is_test_mode(),
        json_output=not settings.is_development,
        )


_configure_default_logging()

# ASGI entry point: uvicorn backend.app.main:app
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "backend.app.main:app",
        host="0.0.0.0",
        port=_settings.TEST_PORT if is_test_mode() else _settings.PORT,
        log_config=None,  # structlog owns the handlers
        )
