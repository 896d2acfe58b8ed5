from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.sdk.trace.export import SpanExporter
from starlette.middleware.base import BaseHTTPMiddleware

from home_service import __version__
from home_service.core.config import Settings, get_settings
from home_service.core.logging import configure_logging
from home_service.core.metrics import observe_request
from home_service.core.tracing import configure_tracing
from home_service.db.create_tables import create_all
from home_service.domain.errors import (
    ConcurrentModificationError,
    DuplicateResourceError,
    ResourceNotFoundError,
)
from home_service.routers import health as health_router
from home_service.routers import metrics as metrics_router
from home_service.routers import users as users_router
from home_service.services.user_service import UserService

logger = logging.getLogger("home_service.app")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, HSTS in prod)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line and one metrics sample per request, including failed ones."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed = time.perf_counter() - started
            route = getattr(request.scope.get("route"), "path", request.url.path)
            observe_request(request.method, route, status_code, elapsed)
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                status_code,
                elapsed * 1000,
            )


def _error(status_code: int, message: str, errors: dict | None = None) -> JSONResponse:
    body: dict = {"message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(body, status_code=status_code)


def _field_errors(exc: RequestValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if err.get("type") == "json_invalid":
            field = "body"
        else:
            field = loc[-1] if len(loc) > 1 else (loc[0] if loc else "body")
        errors.setdefault(field, err.get("msg", "invalid value"))
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """Translate error kinds into status codes and the uniform error body."""

    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        return _error(400, "Validation failed", _field_errors(exc))

    @app.exception_handler(ResourceNotFoundError)
    async def _not_found(request: Request, exc: ResourceNotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(DuplicateResourceError)
    async def _duplicate(request: Request, exc: DuplicateResourceError):
        return _error(409, exc.message)

    @app.exception_handler(ConcurrentModificationError)
    async def _stale(request: Request, exc: ConcurrentModificationError):
        return _error(409, exc.message)

    @app.exception_handler(Exception)
    async def _unclassified(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "An unexpected error occurred")


def create_app(
    settings: Settings | None = None,
    user_service: UserService | None = None,
    span_exporter: SpanExporter | None = None,
) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (`--factory`)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_schema_on_startup:
            create_all()
            logger.info("Database schema ensured")
        logger.info("%s started (env=%s)", settings.service_name, settings.app_env)
        yield

    app = FastAPI(
        title=settings.service_name,
        version=__version__,
        description="User management API",
        lifespan=lifespan,
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.state.settings = settings
    app.state.user_service = user_service or UserService()

    app.include_router(users_router.router, prefix=settings.api_prefix)
    app.include_router(health_router.router)
    if settings.metrics_enabled:
        app.include_router(metrics_router.router)

    app.state.tracer_provider = configure_tracing(app, settings, exporter=span_exporter)
    return app


app = create_app()
