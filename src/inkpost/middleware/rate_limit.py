"""Login/register throttling — Redis fixed-window counter per client IP.

Learn: Password guessing is the cheapest attack on a bearer-token API, so
only the two credential-accepting endpoints are limited. Each IP gets one
counter per minute, key "inkpost:auth-rl:{ip}:{minute}". Everything else
passes straight through.

Skipped entirely when Redis is not connected (e.g. in tests).
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from inkpost.cache import get_redis

logger = structlog.get_logger()

LIMITED_PATHS = ("/api/auth/login", "/api/auth/register")


class AuthRateLimitMiddleware(BaseHTTPMiddleware):
    """Cap credential attempts per IP per minute."""

    def __init__(self, app, limit_per_minute: int = 10):
        super().__init__(app)
        self.limit = limit_per_minute

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method != "POST" or request.url.path not in LIMITED_PATHS:
            return await call_next(request)

        try:
            redis = get_redis()
        except RuntimeError:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time() // 60)
        key = f"inkpost:auth-rl:{client_ip}:{window}"

        try:
            async with redis.pipeline(transaction=True) as pipe:
                pipe.incr(key)
                pipe.expire(key, 120)
                count, _ = await pipe.execute()
        except Exception as e:
            # Redis hiccup: fail open
            logger.warning("rate_limit.redis_error", error=str(e))
            return await call_next(request)

        if count > self.limit:
            logger.warning("rate_limit.exceeded", client_ip=client_ip, path=request.url.path)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many attempts. Try again later.", "code": "rate_limited"},
                headers={"Retry-After": "60"},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.limit - count))
        return response
