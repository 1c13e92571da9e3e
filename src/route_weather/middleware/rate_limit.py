"""Rate limiting middleware."""

import logging
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from route_weather.config import RATE_LIMIT_ENABLED
from route_weather.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Enforce a per-client rate limit on API calls.

    Only paths under ``/api`` are limited; pages and static files are not.
    Returns HTTP 429 when the limit is exceeded.
    """

    BYPASS_PATHS = {
        "/api/health",
        "/api/info",
    }

    def __init__(
        self,
        app,
        rate_limiter: Optional[RateLimiter] = None,
        enabled: bool = RATE_LIMIT_ENABLED
    ):
        """Initialize rate limit middleware.

        Args:
            app: ASGI application
            rate_limiter: Rate limiter (creates default if None)
            enabled: Whether requests are checked at all
        """
        super().__init__(app)
        self.enabled = enabled
        self.rate_limiter = rate_limiter
        if self.enabled:
            self.rate_limiter = rate_limiter or RateLimiter()
            logger.info(f"Rate limit enabled: {self.rate_limiter.max_requests} req/sec per client")
        else:
            logger.info("Rate limit disabled")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through rate limiting check.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/endpoint in chain

        Returns:
            HTTP response (either rate limit error or continued response)
        """
        path = request.url.path
        if not self.enabled or not path.startswith("/api/") or path in self.BYPASS_PATHS:
            return await call_next(request)

        client_id = request.client.host if request.client else "unknown"
        is_allowed, retry_after = await self.rate_limiter.is_allowed(client_id)

        if not is_allowed:
            logger.warning(f"Rate limit exceeded for {client_id} accessing {request.method} {path}")
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Rate limit exceeded. Please try again later.",
                    "retry_after": retry_after
                },
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.rate_limiter.max_requests)
        response.headers["X-RateLimit-Window"] = str(int(self.rate_limiter.window_size))
        return response
