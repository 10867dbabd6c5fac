"""FastAPI application factory.

App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown: logging, the database pool
(required, startup aborts if unreachable) and Redis (optional).
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ephemeris import __version__
from ephemeris.api import api_router
from ephemeris.config import settings
from ephemeris.errors import install_error_handlers
from ephemeris.log import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    configure_logging()
    logger.info(
        "ephemeris.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from ephemeris.db.engine import check_connection, engine

    # Fail fast: no point serving requests without the store
    await check_connection(engine)

    from ephemeris.cache import close_redis, init_redis
    try:
        await init_redis()
        logger.info("ephemeris.redis_connected", url=settings.redis_url)
    except Exception as e:
        logger.warning("ephemeris.redis_unavailable", error=str(e))
        # Redis is optional — the app works without rate limiting

    yield

    logger.info("ephemeris.shutdown")
    await close_redis()
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Ephemeris",
        description="Blogging backend — accounts, posts, comments and bearer-token sessions",
        version=__version__,
        lifespan=lifespan,
    )

    install_error_handlers(app)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from ephemeris.middleware.rate_limit import RateLimitMiddleware
    from ephemeris.middleware.request_id import RequestIdMiddleware
    from ephemeris.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-Request-ID"],
        max_age=3600,
    )

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: ephemeris.main:app)
app = create_app()
