"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quickreps.api.v1 import api_router
from quickreps.buffer.registry import BufferRegistry
from quickreps.core.config import get_settings
from quickreps.core.errors import ApiError
from quickreps.core.logging import configure_logging
from quickreps.db.base import Base
from quickreps.db.session import async_session_maker, engine
from quickreps.models import *  # noqa: F401, F403 - register all models
from quickreps.services.sets_repository import DatabaseSetsRepository
from quickreps.services.telemetry import LoggingTelemetrySink

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging, optional table creation, buffer registry; shutdown: close buffers, dispose engine."""
    configure_logging(settings)
    if settings.auto_create_tables:
        # Local SQLite runs and tests; use Alembic in production
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    if not settings.database_url_override and not settings.database_password:
        logger.warning("DATABASE_PASSWORD is not set")
    app.state.buffers = BufferRegistry(
        lambda session: DatabaseSetsRepository(async_session_maker, session),
        LoggingTelemetrySink(),
        settings,
    )
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    await app.state.buffers.aclose()
    await engine.dispose()


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code.value},
        headers=exc.headers,
    )


def create_application() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow localhost in dev; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApiError, api_error_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
