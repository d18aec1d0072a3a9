"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. The token codec is built here from the frozen Settings and
parked on app.state, so the signing secret is read exactly once.
Lifespan manages startup/shutdown (database check, Redis, engine dispose).
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkpost import __version__
from inkpost.api import api_router
from inkpost.auth.jwt import TokenCodec
from inkpost.config import Settings, settings
from inkpost.errors import (
    STORE_ERRORS,
    InkpostError,
    StoreUnavailableError,
    inkpost_error_handler,
    store_error_handler,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. An unreachable database aborts startup; Redis is optional.
    Uvicorn drains in-flight requests (bounded by
    INKPOST_SHUTDOWN_GRACE_SECONDS) before the shutdown half runs.
    """
    cfg: Settings = app.state.settings
    logger.info(
        "inkpost.starting",
        version=__version__,
        environment=cfg.environment,
        port=cfg.port,
    )

    from inkpost.db.engine import check_store, engine

    try:
        await check_store(engine)
    except StoreUnavailableError as e:
        logger.error("inkpost.database_unavailable", error=e.message)
        raise
    logger.info("inkpost.database_connected")

    from inkpost.cache import close_redis, init_redis
    try:
        await init_redis(cfg.redis_url)
        logger.info("inkpost.redis_connected", url=cfg.redis_url)
    except Exception as e:
        logger.warning("inkpost.redis_unavailable", error=str(e))

    yield

    logger.info("inkpost.shutdown")
    await close_redis()
    await engine.dispose()


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    cfg = cfg or settings

    if cfg.uses_dev_secret:
        logger.warning(
            "inkpost.insecure_jwt_secret",
            message=(
                "INKPOST_JWT_SECRET is not set; signing tokens with the public "
                "development default. Never run like this outside development."
            ),
            environment=cfg.environment,
        )

    app = FastAPI(
        title="Inkpost",
        description="Authenticated blogging API: users, posts, ownership",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.token_codec = TokenCodec.from_settings(cfg)

    # ── Error rendering ──────────────────────────────────────
    app.add_exception_handler(InkpostError, inkpost_error_handler)
    for exc_type in STORE_ERRORS:
        app.add_exception_handler(exc_type, store_error_handler)

    # ── Middleware stack ─────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestContext → AuthRateLimit → CORS → handler

    from inkpost.middleware.rate_limit import AuthRateLimitMiddleware
    from inkpost.middleware.request_context import RequestContextMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=86400,
    )
    app.add_middleware(AuthRateLimitMiddleware, limit_per_minute=cfg.rate_limit_auth_rpm)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: inkpost.main:app)
app = create_app()
