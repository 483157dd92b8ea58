"""
Rate limiting middleware for FastAPI.
Implements in-memory sliding-window rate limiting for the cost routes.
"""
from typing import Dict, List, Optional
from collections import defaultdict
from datetime import datetime, timedelta
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from backend.core.config import config

logger = logging.getLogger(__name__)


# Rate limit configuration: endpoint -> requests per window (per client IP)
RATE_LIMITS: Dict[str, int] = {
    "/api/costs/estimate": config.RATE_LIMIT_PER_MINUTE,
    "/api/costs/compare": max(1, config.RATE_LIMIT_PER_MINUTE // 3),  # Three estimates per call
    "/api/costs/optimize": config.RATE_LIMIT_PER_MINUTE,
}

# Time window for rate limiting (seconds)
RATE_LIMIT_WINDOW = 60


class RateLimiter:
    """
    In-memory rate limiter using sliding window approach.

    Stores timestamps of recent requests per client and endpoint.
    Expired timestamps are dropped on each check to keep memory bounded.
    """

    def __init__(self, window_seconds: int = RATE_LIMIT_WINDOW):
        """Initialize rate limiter with empty storage."""
        self.window_seconds = window_seconds
        # Storage: client_id -> endpoint -> list of request timestamps
        self._storage: Dict[str, Dict[str, List[datetime]]] = defaultdict(lambda: defaultdict(list))

    def get_client_id(self, request: Request) -> str:
        """
        Get client identifier for rate limiting.

        Uses the first address of X-Forwarded-For only when
        TRUST_FORWARDED_FOR is enabled, otherwise the peer address.

        Args:
            request: FastAPI request object

        Returns:
            Client identifier string
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for and config.TRUST_FORWARDED_FOR:
            client_ip = forwarded_for.split(",")[0].strip()
            return f"ip:{client_ip}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"

    def _cleanup_expired(self, client_id: str, endpoint: str, now: Optional[datetime] = None) -> None:
        """
        Remove expired timestamps for a client and endpoint.

        Args:
            client_id: Client identifier
            endpoint: Endpoint path
            now: Current time (defaults to datetime.now())
        """
        if client_id not in self._storage or endpoint not in self._storage[client_id]:
            return

        cutoff_time = (now or datetime.now()) - timedelta(seconds=self.window_seconds)
        self._storage[client_id][endpoint] = [
            ts for ts in self._storage[client_id][endpoint] if ts > cutoff_time
        ]

        if not self._storage[client_id][endpoint]:
            del self._storage[client_id][endpoint]
        if not self._storage[client_id]:
            del self._storage[client_id]

    def is_allowed(self, client_id: str, endpoint: str, limit: int) -> bool:
        """
        Check if request is allowed under rate limit, recording it if so.

        Args:
            client_id: Client identifier
            endpoint: Endpoint path
            limit: Maximum requests per window

        Returns:
            True if allowed, False if rate limited
        """
        now = datetime.now()
        self._cleanup_expired(client_id, endpoint, now)

        timestamps = self._storage[client_id][endpoint]
        if len(timestamps) >= limit:
            return False

        timestamps.append(now)
        return True

    def get_remaining(self, client_id: str, endpoint: str, limit: int) -> int:
        """
        Get remaining requests for a client and endpoint.

        Args:
            client_id: Client identifier
            endpoint: Endpoint path
            limit: Maximum requests per window

        Returns:
            Number of remaining requests
        """
        self._cleanup_expired(client_id, endpoint)
        if client_id not in self._storage:
            return limit
        return max(0, limit - len(self._storage[client_id].get(endpoint, [])))

    def reset(self) -> None:
        """Forget all recorded requests."""
        self._storage.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.

    Applies rate limits only to configured endpoints.
    Other routes pass through untouched.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp):
        """
        Process request and apply rate limiting if applicable.

        Args:
            request: FastAPI request object
            call_next: Next middleware or route handler

        Returns:
            Response object
        """
        path = request.url.path

        if path in RATE_LIMITS:
            limit = RATE_LIMITS[path]

            try:
                client_id = rate_limiter.get_client_id(request)

                if not rate_limiter.is_allowed(client_id, path, limit):
                    logger.info(
                        f"Rate limit exceeded for endpoint {path} "
                        f"(limit: {limit}/{RATE_LIMIT_WINDOW}s)"
                    )
                    return JSONResponse(
                        status_code=429,
                        content={
                            "status": "error",
                            "error": "rate_limited",
                            "message": "Too many requests. Please try again later.",
                            "retry_after": RATE_LIMIT_WINDOW,
                        }
                    )

            except Exception as error:
                # Fail closed: if rate limiter errors, reject request safely
                logger.error(f"Rate limiter error: {error}", exc_info=True)
                return JSONResponse(
                    status_code=503,
                    content={
                        "status": "error",
                        "error": "rate_limit_error",
                        "message": "Rate limiting service unavailable. Please try again later.",
                    }
                )

        response = await call_next(request)
        return response
