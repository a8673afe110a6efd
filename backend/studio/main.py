"""
EdAiVi Studio Backend: FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   `create_app()` builds the document store (seeded when enabled),
       registers middleware, exception handlers, routers and the static
       frontend bundle.
Who:   uvicorn (`uvicorn studio.main:app`) and the test suite, which calls
       `create_app()` for a fresh, isolated store per test.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │  Middleware:  RateLimit → RequestID → Logging → GZip → CORS
    │  Routers:     /api/auth  /api/ai  /api/audio  /api/video │
    │               /api/scene /api/avatar /api/stream         │
    │               /ws  /health  /api  /api/status            │
    │  Static:      /static  and  / (index.html)               │
    │  Errors:      StudioError → its status, validation → 400,│
    │               HTTP 404 → JSON, anything else → 500       │
    └──────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

import pydantic
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from studio import __version__
from studio.config import settings
from studio.database import Store
from studio.exceptions import RateLimitExceededError, StudioError
from studio.middleware.logging import RequestLoggingMiddleware
from studio.middleware.rate_limit import RateLimitMiddleware
from studio.middleware.request_id import RequestIDMiddleware
from studio.routes import ai, audio, auth, avatar, health, realtime, scene, stream, video
from studio.schemas.common import error_body
from studio.seed import seed_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configure the root logger once: stdout, ISO timestamps, level from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("%s %s starting (%s)", settings.app_name, __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Development defaults are allowed; the server still starts.
        logger.warning("%s", e)

    if settings.dev_login_enabled:
        logger.info("Developer login is enabled for %s", settings.owner_email)
    logger.info("Documents loaded: %s", app.state.store.stats())
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("%s shutting down", settings.app_name)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

        StudioError (and subclasses)   → exc.status_code, exc.error_code
        RequestValidationError         → 400 (request body / params)
        pydantic.ValidationError       → 400 (a document rejected a value)
        HTTPException (404, 405, ...)  → its status; 404 adds path/method
        Exception                      → 500, details logged server-side only
    """

    @app.exception_handler(StudioError)
    async def handle_studio_error(request: Request, exc: StudioError):
        level = logging.ERROR if exc.status_code >= 500 else logging.INFO
        logger.log(level, "%s %s → %d %s: %s", request.method, request.url.path,
                   exc.status_code, exc.error_code, exc.message)
        headers = None
        if isinstance(exc, RateLimitExceededError):
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, exc.message, exc.context or None),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                "Request validation failed",
                {"errors": exc.errors()},
            ),
        )

    @app.exception_handler(pydantic.ValidationError)
    async def handle_model_validation(request: Request, exc: pydantic.ValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                "Invalid value",
                {"errors": exc.errors(include_url=False)},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content=error_body(
                    "not_found",
                    "Route not found",
                    {"path": request.url.path, "method": request.method},
                ),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body("http_error", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Static Frontend
# ══════════════════════════════════════════════════════════════════════════

def mount_frontend(app: FastAPI, static_dir: str) -> None:
    """Serve the prebuilt client bundle at /static and its index.html at /."""
    root = Path(static_dir)
    index = root / "index.html"
    if root.is_dir():
        app.mount("/static", StaticFiles(directory=str(root)), name="static")
    else:
        logger.debug("No frontend bundle at %s", root.resolve())

    @app.get("/", include_in_schema=False)
    async def frontend_index():
        if index.is_file():
            return FileResponse(str(index))
        return {
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs",
            "api": "/api",
        }


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[Store] = None) -> FastAPI:
    """
    Build a configured application.

    Args:
        store: document store to serve; a new one (seeded when
               `settings.seed_demo_data` is on) when omitted.
    """
    app = FastAPI(
        title="EdAiVi Studio API",
        description=(
            "Creative studio backend: audio, video, 3D scene and avatar projects, "
            "metered AI generation, live-stream sessions and a real-time room channel."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if store is None:
        store = Store()
        if settings.seed_demo_data:
            seed_store(store)
    app.state.store = store

    # Last added runs first: RateLimit → RequestID → Logging → GZip → CORS
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
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(ai.router)
    app.include_router(audio.router)
    app.include_router(video.router)
    app.include_router(scene.router)
    app.include_router(avatar.router)
    app.include_router(stream.router)
    app.include_router(realtime.router)

    mount_frontend(app, settings.static_dir)

    return app


app = create_app()
