"""
API Router configuration.

Aggregates all v1 API endpoints with proper tagging and prefixes.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    admin,
    auth,
    chat,
    investor,
    portal,
)
from app.schemas.common import ErrorResponse

# Documented error shapes; every error body is {"error", "message"}
VALIDATION_ERRORS = {
    400: {"model": ErrorResponse, "description": "Missing or invalid input"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
}
AUTH_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or expired token"},
    403: {"model": ErrorResponse, "description": "Invalid token or insufficient role"},
}

api_router = APIRouter()

# Authentication (register/login/verify need no token)
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"],
    responses={**VALIDATION_ERRORS, **AUTH_ERRORS, 409: {"model": ErrorResponse}},
)

# Member portal (token required)
api_router.include_router(
    portal.router,
    prefix="/portal",
    tags=["portal"],
    responses={**AUTH_ERRORS, 404: {"model": ErrorResponse}},
)

# Accredited investor applications (public)
api_router.include_router(
    investor.router,
    prefix="/investor",
    tags=["investor"],
    responses={**VALIDATION_ERRORS, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)

# Application review (admin only)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    responses={**AUTH_ERRORS, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)

# AI assistant
api_router.include_router(
    chat.router,
    prefix="/chat",
    tags=["chat"],
    responses={
        **VALIDATION_ERRORS,
        502: {"model": ErrorResponse, "description": "AI service error"},
        503: {"model": ErrorResponse, "description": "AI service not configured"},
    },
)
