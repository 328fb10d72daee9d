"""
Per-client request rate limits.

Every route gets API_RATE_LIMIT through ``SlowAPIMiddleware``; routes with
their own ``@limiter.limit`` (the chat proxy) use that limit instead.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.errors import RateLimitError

logger = logging.getLogger(__name__)

API_RATE_LIMIT = "100 per 15 minutes"
CHAT_RATE_LIMIT = "10 per minute"
CHAT_RATE_LIMIT_MESSAGE = "Too many chat messages, please slow down."

limiter = Limiter(key_func=get_remote_address, default_limits=[API_RATE_LIMIT])


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Render a rejected request as a ``RateLimitError``.

    Must stay synchronous: SlowAPIMiddleware calls it directly.
    """
    error = RateLimitError(getattr(exc.limit, "error_message", None) or None)
    logger.warning(
        "Rate limit %s exceeded by %s on %s",
        exc.detail, get_remote_address(request), request.url.path,
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
