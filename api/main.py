"""
api/main.py -- FastAPI application entry point for the pet store.

Run with:      python main.py serve
               uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one log line per request with status and latency

Lifespan creates the single shared Engine and the two stores on startup and
disposes the engine on shutdown.

Every response body is an envelope: {"success": true, "data": ...} from the
routes, {"success": false, "error": {"message", "code"}} from the exception
handlers below.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.errors import InternalError
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.catalog import router as catalog_router
from api.routes.pets import router as pets_router
from auth.store import UserStore
from core.config import get_settings
from core.db import create_db_engine
from petstore.store import PetStore

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("petstore.api")

settings = get_settings()

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the process-wide Engine for the full server lifetime.

    Everything before yield runs on startup; everything after yield runs on
    shutdown. Both stores share the same Engine (one connection pool).
    """
    logger.info("Pet store API starting up")
    engine = create_db_engine(settings.database_url)
    app.state.engine = engine
    app.state.user_store = UserStore(engine)
    app.state.pet_store = PetStore(engine)
    logger.info("Database initialized")

    yield

    engine.dispose()
    logger.info("Pet store API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Pet Store API",
    description="JWT-authenticated CRUD over pets, categories and tags.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(pets_router, prefix="/pets", tags=["Pets"])
app.include_router(catalog_router, tags=["Catalog"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump(),
        headers=headers,
    )


def _internal_error_response() -> JSONResponse:
    err = InternalError()
    return _error_response(err.status_code, err.code, err.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTPException (ours and the framework's) as an envelope.

    Route and dependency code raises with detail={"code", "message"}. Framework
    errors (unknown route, wrong method) carry a plain string detail.
    """
    if isinstance(exc.detail, dict):
        return _error_response(
            exc.status_code,
            str(exc.detail.get("code", f"HTTP_{exc.status_code}")),
            str(exc.detail.get("message", "")),
            getattr(exc, "headers", None),
        )
    return _error_response(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body, path or query fails type validation."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")
    else:
        message = "Request validation failed"
    return _error_response(400, "VALIDATION_ERROR", message)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Map persistence failures to an opaque 500.

    The cause is logged with its traceback; the client sees only the code.
    """
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _internal_error_response()


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return _internal_error_response()


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)
