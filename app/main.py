"""Application entrypoint for the account service.

This module wires together the FastAPI application with its lifespan hooks,
database metadata, Redis cleanup, error rendering, request logging and CORS
configuration.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import auth_router, users_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.db import models  # noqa: F401
from app.db.base import Base
from app.db.redis import close_redis_client
from app.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup and dispose shared clients on shutdown.

    Dependencies:
    - Uses the async SQLAlchemy engine from `app.db.session` to ensure the
      metadata defined in `app.db.base.Base` (and the imported models) exists.
    - Cleans up the Redis client via `close_redis_client` so connections are
      properly released when the FastAPI app stops.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started (OTP backend: %s)", settings.PROJECT_NAME, settings.PROJECT_VERSION, settings.OTP_BACKEND)
    yield
    await close_redis_client()
    await engine.dispose()


def create_application() -> FastAPI:
    """Assemble and configure the FastAPI application instance.

    - Injects the lifespan manager defined above to manage startup/shutdown.
    - Renders every failure as a `{"message": ...}` body.
    - Applies CORS settings sourced from environment-driven `settings`.
    - Registers the auth and user routers.
    """

    setup_logging(settings.LOG_LEVEL)

    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials="*" not in settings.ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    application.include_router(auth_router)
    application.include_router(users_router)

    @application.get("/")
    async def healthcheck():
        """Lightweight health endpoint used by uptime monitors."""
        return {"message": "Account Service is running!"}

    return application


app = create_application()
