"""FastAPI application factory.

create_app() returns a configured FastAPI instance: logging, exception
handlers, middleware, CORS and the /api routers. Lifespan handles the
optional schema bootstrap at startup and disposes the engine at shutdown.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkvault import __version__
from linkvault.api import api_router
from linkvault.config import settings
from linkvault.errors import register_exception_handlers
from linkvault.log import configure_logging
from linkvault.middleware.request_id import RequestIdMiddleware
from linkvault.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    from linkvault.db.engine import engine

    logger.info(
        "linkvault.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.auto_create_schema:
        from linkvault.db.models import Base

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("linkvault.schema_created")

    yield

    logger.info("linkvault.shutdown")
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(
        title="LinkVault",
        description="Personal link bookmarking API",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: linkvault.main:app)
app = create_app()
