"""
FastAPI Application Entry Point.

Builds the notes API from explicitly passed configuration. The app
factory owns the process-wide database engine and token manager and
keeps them on app.state for the request dependencies.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notes_app.backend.api import health
from notes_app.backend.api.router import router as api_router
from notes_app.backend.core.bootstrap import ensure_schema
from notes_app.backend.core.config import (
    AppConfig,
    Settings,
    get_app_config,
    get_database_url,
    get_settings,
)
from notes_app.backend.core.database import Database
from notes_app.backend.core.exception_handlers import register_exception_handlers
from notes_app.backend.core.logging import get_logger, setup_logging
from notes_app.backend.core.middleware import RequestContextMiddleware
from notes_app.backend.core.security import TokenManager

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config: AppConfig = app.state.config
    database: Database = app.state.database

    setup_logging(app_config.logging)

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
            "dialect": database.engine.dialect.name,
        },
    )

    if app_config.database.auto_create_schema:
        await ensure_schema(database.engine)

    try:
        yield
    finally:
        await database.dispose()
        logger.info("Application shutting down")


def create_app(
    app_config: AppConfig | None = None,
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_config: Validated YAML configuration (loaded from config/ if omitted)
        settings: Secrets (read from config/.env and the environment if omitted)
        database: Pre-built database, mainly for tests; built from config if omitted
    """
    app_config = app_config or get_app_config()
    settings = settings or get_settings()
    app_settings = app_config.application

    if database is None:
        database = Database.from_url(
            get_database_url(app_config.database, settings),
            app_config.database,
        )

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.docs_enabled else None,
        redoc_url="/redoc" if app_settings.docs_enabled else None,
        openapi_url="/openapi.json" if app_settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.config = app_config
    app.state.database = database
    app.state.token_manager = TokenManager(settings.jwt_secret, app_config.security.jwt)

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix=app_settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn notes_app.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
