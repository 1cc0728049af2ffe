from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from quotebook import __version__
from quotebook.core.config import Settings, get_settings
from quotebook.core.errors import QuoteError, StorageError, ValidationError
from quotebook.core.logging import configure_logging
from quotebook.repositories.base import QuoteRepository
from quotebook.repositories.factory import build_repository
from quotebook.routers import quotes as quotes_router
from quotebook.services.quote_service import QuoteService

logger = logging.getLogger(__name__)


API_CSP = "default-src 'self'"
# Swagger UI and ReDoc load their bundles, fonts and favicon from CDNs
DOCS_CSP = (
    "default-src 'self'; "
    "img-src 'self' data: https://fastapi.tiangolo.com https://cdn.redoc.ly; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://fonts.googleapis.com; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "font-src 'self' https://fonts.gstatic.com; "
    "worker-src 'self' blob:"
)
DOCS_PATHS = {"/docs", "/docs/oauth2-redirect", "/redoc"}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        policy = DOCS_CSP if request.url.path in DOCS_PATHS else API_CSP
        response.headers.setdefault("Content-Security-Policy", policy)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def quote_error_handler(request: Request, exc: QuoteError) -> JSONResponse:
    body = {"ok": False, "error": exc.code, "message": exc.message}
    if isinstance(exc, ValidationError):
        logger.warning("rejected %s %s: %s", request.method, request.url.path, exc.message)
        body["details"] = exc.errors
    elif isinstance(exc, StorageError):
        logger.error("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        body["message"] = "Storage unavailable"
    return JSONResponse(body, status_code=exc.status_code)


def _cors_origins(settings: Settings) -> list[str]:
    allowed = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed.update(
            {
                "http://localhost:8000",
                "http://127.0.0.1:8000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Settings | None = None, repository: QuoteRepository | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory quotebook.app:create_app``)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    repository = repository or build_repository(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("starting Quotebook API with %s backend", repository.kind)
        await repository.initialize()
        yield
        logger.info("shutting down Quotebook API")
        await repository.close()

    app = FastAPI(title="Quotebook API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.repository = repository
    app.state.quote_service = QuoteService(repository)

    origins = _cors_origins(settings)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(QuoteError, quote_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok", "backend": repository.kind}

    app.include_router(quotes_router.router)
    return app
