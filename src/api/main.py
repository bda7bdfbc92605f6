from __future__ import annotations

import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from src.api.routes import register_routes
from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.errors import (
    AccessDeniedError,
    AnalyticsError,
    NotFoundError,
    RubricValidationError,
)
from src.infrastructure.db.session import dispose_engine
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()

_ERROR_STATUS: list[tuple[type[AnalyticsError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AccessDeniedError, status.HTTP_403_FORBIDDEN),
    (RubricValidationError, status.HTTP_409_CONFLICT),
]


def status_for_error(exc: AnalyticsError) -> int:
    """HTTP status for an analytics error that escaped its route handler."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    status_code = status_for_error(exc)
    await logger.awarning(
        "analytics_error_unhandled",
        error_type=exc.__class__.__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Build the read-only analytics API."""
    setup_logging()
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await logger.ainfo(
            "service_startup",
            version=settings.version,
            thresholds=settings.analytics.model_dump(),
        )
        try:
            yield
        finally:
            await dispose_engine()
            await logger.ainfo("service_shutdown")

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

    # Reports are only ever read, so dashboards get GET and nothing else
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment == "local" else list(settings.cors_origins),
        allow_credentials=settings.environment != "local",
        allow_methods=["GET"],
        allow_headers=["Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_exception_handler(AnalyticsError, analytics_error_handler)
    register_routes(app)

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid4())
        bind_contextvars(request_id=request_id, path=request.url.path, method=request.method)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            await logger.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response
        finally:
            clear_contextvars()

    return app


app = create_app()
