from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from starlette.middleware.base import RequestResponseEndpoint

from src.marketplace_auth.api.v1.router import api_router
from src.marketplace_auth.core.config import get_settings
from src.marketplace_auth.core.db import dispose_engine, get_session
from src.marketplace_auth.core.exceptions import setup_exception_handlers
from src.marketplace_auth.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from src.marketplace_auth.core.rate_limit import limiter

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


async def _database_reachable() -> bool:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database check failed", error=str(e))
        return False
    return True


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login, verification and token management"},
    {"name": "users", "description": "Account administration (admin role)"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Marketplace account and authentication API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        lifespan=lifespan,
    )

    # Error envelopes carry the request_id
    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Add logging context middleware (inner, runs after the correlation id is set)
    @app.middleware("http")
    async def logging_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Bind request_id to log context for all requests."""
        clear_request_context()
        bind_request_context(correlation_id.get())
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Correlation ID middleware is added last so it is the outermost
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Report database reachability."""
        database_ok = await _database_reachable()
        health_status: dict[str, Any] = {
            "status": "healthy" if database_ok else "unhealthy",
            "database": "healthy" if database_ok else "unhealthy",
        }
        status_code = 200 if database_ok else 503
        return JSONResponse(content=health_status, status_code=status_code)

    @app.get("/ready")
    async def ready() -> JSONResponse:
        """Readiness probe: ready once the database answers."""
        if await _database_reachable():
            return JSONResponse(content={"status": "ready"}, status_code=200)
        return JSONResponse(content={"status": "not_ready"}, status_code=503)

    return app


app = create_app()
