"""
FastAPI middleware for rate limiting.

Protects the public submission forms from repeated
submissions. Each client gets a sliding one-minute window per limit bucket.
"""

import logging
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# POSTs to these paths count against the form bucket
FORM_PATHS = (
    "/api/bookings",
    "/api/contact",
    "/api/contact/newsletter",
    "/api/reviews",
    "/api/careers/apply",
)

EXEMPT_PREFIXES = ("/health",)


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    enabled: bool = True
    # Requests per minute
    default_rpm: int = 60
    booking_rpm: int = 10
    api_rpm: int = 30
    window_seconds: int = 60


def classify_request(method: str, path: str) -> str:
    """Return the limit bucket for a request: "form", "api" or "default"."""
    if method == "POST" and path.rstrip("/") in FORM_PATHS:
        return "form"
    if path.startswith("/api/"):
        return "api"
    return "default"


def get_endpoint_limit(method: str, path: str, config: RateLimitConfig) -> int:
    """Requests per window allowed for a request's bucket."""
    bucket = classify_request(method, path)
    if bucket == "form":
        return config.booking_rpm
    if bucket == "api":
        return config.api_rpm
    return config.default_rpm


class RateLimitState:
    """Request timestamps per (client, endpoint), oldest first."""

    def __init__(self) -> None:
        self.requests: dict[tuple[str, str], deque] = {}

    def hits(self, client_id: str, endpoint: str, window_seconds: int, now: float | None = None) -> int:
        """Drop timestamps outside the window and return how many remain."""
        now = time.time() if now is None else now
        timestamps = self.requests.get((client_id, endpoint))
        if not timestamps:
            return 0

        cutoff = now - window_seconds
        while timestamps and timestamps[0] <= cutoff:
            timestamps.popleft()
        return len(timestamps)

    def record(self, client_id: str, endpoint: str, now: float | None = None) -> None:
        key = (client_id, endpoint)
        self.requests.setdefault(key, deque()).append(time.time() if now is None else now)

    def cleanup(self, max_age_seconds: int = 300) -> int:
        """Forget keys with no request in max_age_seconds. Returns keys removed."""
        cutoff = time.time() - max_age_seconds
        stale = [key for key, stamps in self.requests.items() if not stamps or stamps[-1] <= cutoff]
        for key in stale:
            del self.requests[key]
        return len(stale)


def get_client_id(request: Request) -> str:
    """Extract client identifier from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests over the per-minute limit with a 429 envelope."""

    def __init__(self, app, config: RateLimitConfig | None = None):
        super().__init__(app)
        self.config = config or RateLimitConfig()
        self.state = RateLimitState()
        self._last_cleanup = time.time()

    def _too_many(self, limit: int) -> JSONResponse:
        window = self.config.window_seconds
        return JSONResponse(
            status_code=429,
            content={
                "success": False,
                "error": "RATE_LIMITED",
                "message": f"Too many requests. Maximum {limit} per {window} seconds.",
                "details": {"retry_after_seconds": window},
            },
            headers={
                "Retry-After": str(window),
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
            },
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not self.config.enabled or path.startswith(EXEMPT_PREFIXES):
            return await call_next(request)

        now = time.time()
        if now - self._last_cleanup > self.config.window_seconds:
            self.state.cleanup()
            self._last_cleanup = now

        client_id = get_client_id(request)
        limit = get_endpoint_limit(request.method, path, self.config)
        endpoint = f"{request.method} {path.rstrip('/')}"

        used = self.state.hits(client_id, endpoint, self.config.window_seconds, now)
        if used >= limit:
            logger.warning(f"Rate limit hit: client={client_id} endpoint={endpoint} limit={limit}")
            return self._too_many(limit)

        self.state.record(client_id, endpoint, now)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(limit - used - 1)
        return response
