"""
NutriTrack Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   App configuration, middleware, routes, error translation and the
       document store lifecycle are assembled in one place.
How:   `create_app()` returns a configured FastAPI instance; `app` is the
       module-level instance uvicorn serves (`uvicorn nutritrack.main:app`),
       and `run()` backs the `nutritrack` console script.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │  Middleware:  Request ID → Access Log → GZip → CORS  │
    │                                                      │
    │  Routes:  /users  /search-history                    │
    │           /consumption-history  /health              │
    │                                                      │
    │  Exception Handlers:                                 │
    │    RequestValidationError → 400 envelope             │
    │    NutriTrackError / Exception → 500 envelope        │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → Firestore client → services on app.state
    Shutdown: close the client (only if this process created it)
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from nutritrack import __version__
from nutritrack.config import settings
from nutritrack.database import close_store_client, create_store_client
from nutritrack.dependencies import install_services
from nutritrack.exceptions import NutriTrackError
from nutritrack.middleware.logging import RequestLoggingMiddleware
from nutritrack.middleware.request_id import RequestIDMiddleware, request_id_var
from nutritrack.routes import health, users
from nutritrack.routes.history import consumption_history_router, search_history_router

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] nutritrack.services.user_service: ...
    Output goes to stdout, where the container runtime collects it.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # gRPC and auth libraries log every channel event at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("grpc").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Own the document store client for the life of the process.

    When create_app() received a client (tests, scripts), services are
    already installed and that client is left for its owner to close.
    """
    setup_logging()
    logger.info("NutriTrack Backend %s starting (environment=%s)", __version__, settings.environment)

    owns_client = getattr(app.state, "store_client", None) is None
    if owns_client:
        install_services(app, create_store_client(settings))

    logger.info("Server ready at http://%s:%d", settings.api_host, settings.api_port)

    yield

    logger.info("NutriTrack Backend shutting down...")
    if owns_client:
        await close_store_client(app.state.store_client)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(exc: BaseException, message: str) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if not settings.is_production:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Translate exceptions that escape the routes into result envelopes.

    Expected outcomes never get here; they are Failure results already
    mapped to a status code by the route. What remains:
        RequestValidationError → 400 (malformed path, query or body)
        NutriTrackError        → 500
        Exception              → 500 (catch-all)
    The 500 responses carry the underlying message, plus the formatted
    stack trace when not running in production.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        ]
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), "; ".join(errors))
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "message": errors[0] if errors else "Malformed request",
                "errors": errors,
            },
        )

    @app.exception_handler(NutriTrackError)
    async def handle_app_error(request: Request, exc: NutriTrackError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            type(exc).__name__,
            exc.message,
            exc.context,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=_error_body(exc, exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            exc,
            exc_info=exc,
        )
        message = str(exc) or "An unexpected error occurred."
        return JSONResponse(status_code=500, content=_error_body(exc, message))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store_client: Optional[Any] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store_client: An already-built Firestore AsyncClient (or a fake with
            the same surface). When given, services are wired immediately
            and the lifespan will neither create nor close a client.
    """
    app = FastAPI(
        title="NutriTrack API",
        description=(
            "Users, product search history and consumption history for the "
            "NutriTrack nutrition-tracking app, stored in Cloud Firestore."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(search_history_router)
    app.include_router(consumption_history_router)
    app.include_router(health.router)

    if store_client is not None:
        install_services(app, store_client)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "nutritrack.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
