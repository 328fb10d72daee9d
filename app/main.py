"""
Endevera - Marketing site API and investor member portal

Main FastAPI application with security hardening.
"""

import logging
import secrets
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.api import api_router
from app.core.config import get_settings
from app.core.database import close_db, engine, init_db
from app.core.errors import AppError
from app.core.logging import configure_logging
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.schemas.common import ErrorResponse, HealthResponse

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Application Lifespan (startup/shutdown)
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    logger.info("Starting Endevera API (%s)", settings.environment)

    await init_db()

    yield

    logger.info("Shutting down Endevera API")
    await close_db()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Endevera API",
    version=VERSION,
    description="Public site services and accredited investor member portal",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

# Per-client request limits (see app.core.rate_limit)
app.state.limiter = limiter


# =============================================================================
# Security Middleware
# =============================================================================

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Referrer policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Permissions policy (disable unused features)
        response.headers["Permissions-Policy"] = (
            "accelerometer=(), camera=(), geolocation=(), gyroscope=(), "
            "magnetometer=(), microphone=(), payment=(), usb=()"
        )

        # Strict CSP for API responses (the docs UI needs its CDN assets)
        if not request.url.path.startswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID for tracing and log each request."""

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = request.headers.get("X-Request-ID") or secrets.token_urlsafe(8)
        request.state.request_id = request_id

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The global handler renders the 500; record the request here
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "[%s] %s %s -> unhandled exception (%.1f ms, user=%s)",
                request_id, request.method, request.url.path, elapsed_ms,
                getattr(request.state, "user_id", None),
            )
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Request-ID"] = request_id
        # user_id is set by the token dependencies when a token was accepted
        logger.info(
            "[%s] %s %s -> %s (%.1f ms, user=%s)",
            request_id, request.method, request.url.path, response.status_code, elapsed_ms,
            getattr(request.state, "user_id", None),
        )
        return response


# =============================================================================
# Add Middleware (order matters - first added = last executed)
# =============================================================================

app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials="*" not in settings.cors_allow_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Trusted hosts (prevent host header attacks)
if "*" not in settings.trusted_hosts:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)


# =============================================================================
# Routes
# =============================================================================

@app.get("/", tags=["root"])
@limiter.exempt
def home():
    """Root endpoint."""
    return {
        "name": "Endevera API",
        "version": VERSION,
        "docs": None if settings.is_production else "/docs",
    }


@app.get("/api/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    db_status = "connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check database failure: %s", e)
        db_status = "unavailable"

    return HealthResponse(
        status="healthy" if db_status == "connected" else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.environment,
        version=VERSION,
        database=db_status,
    )


app.include_router(api_router, prefix="/api/v1")


# =============================================================================
# Error Handlers
# =============================================================================

def _error_response(status_code: int, error: str, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message},
        headers=headers,
    )


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return _error_response(exc.status_code, exc.error, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation error", message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error = "Not Found" if exc.status_code == 404 else "Request error"
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "The requested resource was not found"
    return _error_response(exc.status_code, error, message, getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to prevent information leakage."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.exception("[%s] Unhandled exception: %s", request_id, exc)

    body = ErrorResponse(
        error="Internal Server Error",
        message="An internal error occurred",
        requestId=request_id,
        detail=repr(exc) if settings.debug else None,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers={"X-Request-ID": request_id},
    )


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
