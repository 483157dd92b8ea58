"""
Main FastAPI application bootstrap.
Configures logging and middleware and includes routers.
"""
import logging

from fastapi import FastAPI

from backend.core.config import config
from backend.api.costs import router as costs_router
from backend.middleware.rate_limiter import RateLimitMiddleware
from backend.middleware.request_size_limiter import RequestSizeLimiterMiddleware


logger = logging.getLogger(__name__)

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    # Fail fast with a clear message
    raise RuntimeError(f"Configuration error: {error}") from error

logging.getLogger("backend").setLevel(config.LOG_LEVEL)
logger.info(
    "Cost estimation enabled (default provider=%s, max nodes=%d)",
    config.DEFAULT_CLOUD_PROVIDER,
    config.MAX_DIAGRAM_NODES
)


app = FastAPI(
    title="Infrastructure Designer",
    description="Cost estimation and optimization for infrastructure diagrams",
)

# Add rate limiting middleware
app.add_middleware(RateLimitMiddleware)

# Add request size limiting middleware (after rate limiter)
app.add_middleware(RequestSizeLimiterMiddleware)

# Include routers
app.include_router(costs_router)


@app.get("/health")
async def health() -> dict:
    """Liveness probe."""
    return {"status": "ok"}
