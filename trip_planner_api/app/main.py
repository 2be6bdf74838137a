"""
Main entrypoint for the Trip Planner API.

This module assembles the FastAPI application: logging, middleware,
exception handlers and the versioned router.  ``create_app`` builds a
configured app; the module‑level ``app`` is the instance served by
uvicorn, e.g.::

    uvicorn trip_planner_api.app.main:app --reload

The lifespan handler opens the SQLite connection and the HTTP client
used for exchange‑rate providers, and closes both on shutdown.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import connect, init_db
from .core.errors import AuthError, RateLimitError, TripPlannerError, ValidationError
from .core.logging_config import setup_logging
from .core.rate_limit import RateLimiter
from .services.rate_service import RateAggregator

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and the provider HTTP client; close them on exit."""
    config: Settings = app.state.settings
    app.state.db = connect(config.database_url)
    init_db(app.state.db)
    client = httpx.AsyncClient(timeout=config.rate_provider_timeout, follow_redirects=True)
    app.state.rates = RateAggregator(
        client,
        config.fallback_rates,
        timeout=config.rate_provider_timeout,
        max_days=config.timeseries_max_days,
    )
    logger.info("%s %s started (environment: %s)", config.project_name, config.api_version, config.environment)
    try:
        yield
    finally:
        logger.info("Shutting down gracefully...")
        await client.aclose()
        app.state.db.close()
        logger.info("Database closed")


def setup_middleware(app: FastAPI, config: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


def setup_exception_handlers(app: FastAPI, config: Settings) -> None:
    """Map application exceptions to JSON error responses."""

    @app.exception_handler(TripPlannerError)
    async def app_error_handler(request: Request, exc: TripPlannerError) -> JSONResponse:
        headers = {}
        if isinstance(exc, AuthError):
            headers["WWW-Authenticate"] = "Bearer"
        elif isinstance(exc, RateLimitError):
            headers["Retry-After"] = str(exc.retry_after)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = ValidationError.from_pydantic(exc)
        logger.debug("Validation failed for %s: %s", request.url.path, error.details)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"error": "Internal server error"}
        if config.debug:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    config : Settings, optional
        Settings to use instead of the process‑wide ``settings``.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    config = config or default_settings
    # Initialise logging before anything else so that startup
    # messages are formatted consistently.
    setup_logging(config.log_level, config.log_file or None)

    app = FastAPI(title=config.project_name, version=config.api_version, lifespan=lifespan)
    app.state.settings = config
    app.state.global_limiter = RateLimiter(config.rate_limit_max_requests, config.rate_limit_window_seconds)
    app.state.auth_limiter = RateLimiter(
        config.auth_rate_limit_max_requests,
        config.rate_limit_window_seconds,
        message="Too many authentication attempts, please try again later.",
    )

    setup_middleware(app, config)
    setup_exception_handlers(app, config)

    # Existing clients call the unversioned /api paths; /api/v1 mirrors them.
    app.include_router(v1_router, prefix="/api")
    app.include_router(v1_router, prefix="/api/v1", include_in_schema=False)

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
