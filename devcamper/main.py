"""
DevCamper API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, collaborator construction, middleware,
       route mounting and lifecycle management in one place.
How:   `create_app(settings)` builds every collaborator from one frozen
       Settings object and stores it on `app.state`; dependencies read them
       from there.
Who:   uvicorn imports `devcamper.main:app`; tests call `create_app()` with
       their own Settings and swap fakes onto `app.state`.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware Chain:                                       │
    │  Rate Limit → Request ID → Access Log → GZip → CORS      │
    │                                                          │
    │  Routes (/api/v1):                                       │
    │  auth │ users │ bootcamps │ courses │ reviews │ /health  │
    │                                                          │
    │  app.state:                                              │
    │  settings, engine, session_factory, security,            │
    │  geocoder, mailer, file_service                          │
    │                                                          │
    │  Exception Handlers:                                     │
    │  DevCamperError → its status   RequestValidationError→400│
    │  IntegrityError → 409          Exception → 500           │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, upload directory
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from devcamper import __version__
from devcamper.config import Settings
from devcamper.database import build_engine, build_session_factory, dispose_engine
from devcamper.exceptions import DevCamperError, RateLimitExceededError
from devcamper.middleware.logging import RequestLoggingMiddleware
from devcamper.middleware.rate_limit import RateLimitMiddleware
from devcamper.middleware.request_id import RequestIDMiddleware, request_id_var
from devcamper.routes import auth, bootcamps, courses, health, reviews, users
from devcamper.services.email_service import EmailService
from devcamper.services.file_service import FileService
from devcamper.services.geocoder import build_geocoder
from devcamper.services.security import SecurityService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Third-party libraries that log every connection or query are raised to
    WARNING; the access log middleware replaces uvicorn's own access log.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "aiosmtplib"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("DevCamper API %s starting up (%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        if settings.is_production:
            raise
        # Outside production the server still starts; affected endpoints fail per request
        logger.warning("Configuration incomplete: %s", str(e))

    app.state.file_service.ensure_upload_root()
    logger.info("Upload directory: %s", app.state.file_service.upload_root)
    logger.info("Geocoder provider: %s", settings.geocoder_provider)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DevCamper API shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "request_id": request_id_var.get("")},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the `{success: false, error}` envelope.

    Handler hierarchy:
        DevCamperError          → exc.status_code (400/401/403/404/409/429/500/503)
        RequestValidationError  → 400, field messages joined with ", "
        IntegrityError          → 409 "Duplicate field value entered"
        Exception (fallback)    → 500 "Server Error"

    Context dicts and stack traces are logged, never returned.
    """

    @app.exception_handler(DevCamperError)
    async def handle_app_error(request: Request, exc: DevCamperError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        messages = []
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            prefix = f"{'.'.join(location)}: " if location else ""
            messages.append(f"{prefix}{error.get('msg', 'Invalid value')}")
        message = ", ".join(messages) or "Validation failed"
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return _error_response(400, message)

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning("[%s] Integrity error: %s", request_id_var.get(""), exc.orig)
        return _error_response(409, "Duplicate field value entered")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return _error_response(500, "Server Error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application around one Settings object.

    Args:
        settings: configuration to use; read from the environment when None
    """
    settings = settings or Settings()

    app = FastAPI(
        title="DevCamper API",
        description="Bootcamp directory: bootcamps, courses, reviews and users.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.security = SecurityService(settings)
    app.state.geocoder = build_geocoder(settings)
    app.state.mailer = EmailService(settings)
    app.state.file_service = FileService(settings.file_upload_path, settings.max_file_upload)

    # ── Middleware ────────────────────────────────────────────────────────
    # Starlette runs middleware in reverse order of addition, so the
    # execution order is: RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window,
    )

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(bootcamps.router)
    app.include_router(courses.bootcamp_courses_router)
    app.include_router(courses.router)
    app.include_router(reviews.bootcamp_reviews_router)
    app.include_router(reviews.router)
    app.include_router(health.router)

    return app


# uvicorn devcamper.main:app
app = create_app()
