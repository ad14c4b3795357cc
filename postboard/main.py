"""
Postboard API

Thin FastAPI backend for publishing blog posts.
"""

import logging
import time
from collections import defaultdict
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from postboard.config import get_settings
from postboard.errors import PostboardError
from postboard.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from postboard.routers import posts
from postboard.services.database import check_database_connectivity, init_db

logger = logging.getLogger(__name__)

settings = get_settings()

# Health check cache: (result_dict, timestamp)
_health_cache: tuple[dict[str, Any], float] | None = None
_HEALTH_CACHE_TTL = 30  # seconds


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    init_db()
    yield


app = FastAPI(
    title="Postboard API",
    description="Blog posts with drafts, scheduled publishing and per-author editing",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)
# Request ID wraps the security headers so its access log sees final responses
app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

# Routers
app.include_router(posts.router)


@app.exception_handler(PostboardError)
async def postboard_error_handler(
    request: Request, exc: PostboardError
) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.detail}, headers=headers
    )


def _field_name(loc: tuple[Any, ...]) -> str:
    """``("body", "title")`` -> ``"title"``; ``("query", "page")`` -> ``"page"``."""
    parts = [str(p) for p in loc[1:]] or [str(p) for p in loc]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reshape validation errors into a per-field message map."""
    errors: dict[str, list[str]] = defaultdict(list)
    for err in exc.errors():
        errors[_field_name(tuple(err["loc"]))].append(err["msg"])
    return JSONResponse(
        status_code=422,
        content={"message": "The given data was invalid.", "errors": dict(errors)},
    )


def _check_config() -> str:
    """Verify required configuration is loaded. Returns 'ok' or 'fail'."""
    s = get_settings()
    try:
        make_url(s.database_url)
    except ArgumentError:
        logger.warning("DATABASE_URL is not a valid SQLAlchemy URL")
        return "fail"
    if s.posts_per_page < 1:
        return "fail"
    return "ok"


def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    global _health_cache
    now = time.time()
    if _health_cache is not None:
        cached_result, cached_at = _health_cache
        if now - cached_at < _HEALTH_CACHE_TTL:
            return cached_result

    config_status = _check_config()
    database_status = "ok" if check_database_connectivity() else "fail"

    checks = {"config": config_status, "database": database_status}
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded — failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    result: dict[str, Any] = {
        "status": overall,
        "service": "postboard-api",
        "version": "0.1.0",
        "checks": checks,
    }
    _health_cache = (result, now)
    return result


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check verifying service dependencies."""
    result = _run_health_checks()
    return JSONResponse(content=result, status_code=200)
