"""
HTTP middleware.
"""
import logging

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from wardrobe.core.config import settings
from wardrobe.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

RATE_LIMIT_EXEMPT_PATHS = {"/", "/health"}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject clients that exceed the per-address request quota.

    Runs before routing, so rejected requests never reach a handler. The
    limiter is read from ``app.state.rate_limiter``.
    """

    async def dispatch(self, request: Request, call_next):
        if not settings.RATE_LIMIT_ENABLED or request.url.path in RATE_LIMIT_EXEMPT_PATHS:
            return await call_next(request)

        limiter = request.app.state.rate_limiter
        client_key = request.client.host if request.client else "unknown"

        result = await run_in_threadpool(limiter.hit, client_key)
        headers = {
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
        }

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {client_key} on {request.url.path}")
            error = RateLimitExceeded(
                f"Too many requests from this IP, please try again after "
                f"{settings.RATE_LIMIT_WINDOW_SECONDS // 60} minutes",
                retry_after=result.reset_after,
            )
            headers["Retry-After"] = str(error.retry_after)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
