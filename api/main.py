"""
api/main.py -- FastAPI application entry point for the car catalog.

Run with:      uvicorn asgi:app --reload
               python main.py serve

Middleware stack (outermost to innermost):
  1. CORSMiddleware    -- adds CORS headers for the configured browser origins
  2. SlowAPIMiddleware -- enforces per-route rate limits from api.limiter

Lifespan builds the stores from Settings.database_url, injects them into the
services, and parks the services on app.state where routes and the auth
dependency pick them up. Shutdown disposes both engines.

Every response -- success or failure -- uses the envelope from
api/responses.py. Route handlers never build error bodies themselves: they
let core.errors exceptions propagate to the handlers registered below.
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
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import Envelope, HealthData
from api.responses import fail, ok
from api.routes.auth import router as auth_router
from api.routes.cars import router as cars_router
from auth.service import SessionService
from auth.store import UserStore
from catalog.service import CatalogService
from catalog.store import CarStore
from core.config import get_settings
from core.errors import CatalogError, InternalError

VERSION = "1.0.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("carcatalog.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the stores and services on startup; dispose engines on shutdown."""
    logger.info("Car catalog API starting up")
    app.state.user_store = UserStore(_settings.database_url)
    app.state.car_store = CarStore(_settings.database_url)
    app.state.sessions = SessionService(app.state.user_store, expire_seconds=_settings.token_expire_seconds)
    app.state.catalog = CatalogService(app.state.car_store)
    logger.info(
        "Stores initialized (%d users, %d cars)",
        app.state.user_store.count_users(),
        app.state.car_store.count_cars(),
    )

    yield

    app.state.car_store.close()
    app.state.user_store.close()
    logger.info("Car catalog API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Car Catalog API",
    description="Authenticated vehicle inventory with search, sorting and pagination.",
    version=VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


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

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(cars_router, prefix="/api", tags=["Cars"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same envelope so the client can read `error`
# without inspecting the status code first.
# ---------------------------------------------------------------------------


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Render ValidationError / AuthError / NotFoundError / ConflictError / InternalError."""
    return fail(exc.status_code, exc.message)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 with Retry-After when a rate limit is exceeded."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = fail(429, "Too many requests")
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON, wrong value types or a non-integer path id -> 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        where = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"Invalid request: {where}: {first.get('msg', 'invalid value')}" if where else "Invalid request"
    else:
        message = "Invalid request"
    return fail(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-raised HTTP errors.

    Starlette raises 404 for an unmatched path and 405 for a known path with
    the wrong method; both are an unmatched route to the client.
    """
    if exc.status_code in (404, 405):
        return fail(404, "Route not found")
    return fail(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected failures.

    The raw exception is logged server-side only; the client receives the
    generic InternalError message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    error = InternalError()
    return fail(error.status_code, error.message)


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py so it is reachable regardless of router state.
# No auth and no rate limit -- load balancers must not be throttled.
# ---------------------------------------------------------------------------


@app.get("/api/health", response_model=Envelope, tags=["Health"])
def health(request: Request) -> JSONResponse:
    """Return liveness, version and a database round-trip check."""
    try:
        db_ok = request.app.state.user_store.ping() and request.app.state.car_store.ping()
    except Exception:
        logger.exception("Health check database ping failed")
        db_ok = False
    components = {"app": "ok", "database": "ok" if db_ok else "error"}
    return ok(HealthData(version=VERSION, components=components))
