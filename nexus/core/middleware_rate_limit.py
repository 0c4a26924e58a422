from __future__ import annotations

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from nexus.core.rate_limit import InMemoryRateLimiter

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = "Too many requests from this IP, please try again after some time"


class ClientRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client-address request budget across the whole API.
    """

    def __init__(self, app, limiter: InMemoryRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        if self.limiter.allow(client):
            return await call_next(request)

        retry_after = self.limiter.retry_after_seconds(client)
        logger.warning(
            "rate limit exceeded",
            extra={"client": client, "path": request.url.path, "retry_after": retry_after},
        )
        return JSONResponse(
            status_code=429,
            content={"success": False, "message": TOO_MANY_REQUESTS, "code": "rate-limited"},
            headers={"Retry-After": str(retry_after)},
        )
