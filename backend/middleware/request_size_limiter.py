"""
Request size limiting middleware for FastAPI.
Protects the cost routes from oversized payloads and huge diagrams.
"""
from typing import Any, Dict, Optional, Set
import json
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from backend.core.config import config

logger = logging.getLogger(__name__)


# Endpoints carrying a diagram in the body
DIAGRAM_ENDPOINTS: Set[str] = {
    "/api/costs/estimate",
    "/api/costs/compare",
}

# Endpoints that require size limiting
PROTECTED_ENDPOINTS: Set[str] = DIAGRAM_ENDPOINTS | {
    "/api/costs/optimize",
}


def _too_large(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={
            "status": "error",
            "error": "request_too_large",
            "message": message,
        }
    )


class RequestSizeLimiterMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request size limiting.

    Applies size limits only to configured endpoints.
    Other routes pass through untouched.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp):
        """
        Process request and apply size limits if applicable.

        Args:
            request: FastAPI request object
            call_next: Next middleware or route handler

        Returns:
            Response object
        """
        path = request.url.path

        if path not in PROTECTED_ENDPOINTS:
            response = await call_next(request)
            return response

        max_body_size = config.MAX_REQUEST_BODY_SIZE

        try:
            content_length = request.headers.get("Content-Length")
            if content_length:
                try:
                    if int(content_length) > max_body_size:
                        logger.info(
                            f"Request body size exceeded for {path}: "
                            f"{content_length} bytes (limit: {max_body_size})"
                        )
                        return _too_large("Request body size exceeds allowed limit.")
                except ValueError:
                    # Invalid Content-Length header, fall back to the real body size
                    pass

            body_bytes = await request.body()
            body_size = len(body_bytes)

            if body_size > max_body_size:
                logger.info(
                    f"Request body size exceeded for {path}: "
                    f"{body_size} bytes (limit: {max_body_size})"
                )
                return _too_large("Request body size exceeds allowed limit.")

            if body_size > 0:
                try:
                    body_json = json.loads(body_bytes.decode("utf-8"))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    # Let FastAPI report the malformed body
                    body_json = None

                if body_json is not None:
                    validation_error = self._validate_payload(path, body_json)
                    if validation_error:
                        logger.info(f"Payload validation failed for {path}: {validation_error}")
                        return _too_large(validation_error)

        except Exception as error:
            # Fail closed on any error
            logger.error(f"Error during size limiting for {path}: {error}", exc_info=True)
            return _too_large("Request validation failed.")

        response = await call_next(request)
        return response

    def _validate_payload(self, path: str, body_json: Any) -> Optional[str]:
        """
        Validate payload-specific constraints based on endpoint.

        Args:
            path: Request path
            body_json: Parsed JSON body

        Returns:
            Error message if validation fails, None if valid
        """
        if not isinstance(body_json, dict):
            return None

        if path in DIAGRAM_ENDPOINTS:
            return self._validate_diagram_request(body_json)

        if path == "/api/costs/optimize":
            return self._validate_optimize_request(body_json)

        return None

    def _validate_diagram_request(self, body_json: Dict) -> Optional[str]:
        """
        Validate the node count of a diagram request.

        Args:
            body_json: Parsed JSON body with 'diagram'

        Returns:
            Error message if validation fails, None if valid
        """
        diagram = body_json.get("diagram")
        if not isinstance(diagram, dict):
            return None

        nodes = diagram.get("nodes")
        if isinstance(nodes, list) and len(nodes) > config.MAX_DIAGRAM_NODES:
            return (
                f"Diagram too large: {len(nodes)} nodes "
                f"(limit: {config.MAX_DIAGRAM_NODES})"
            )

        return None

    def _validate_optimize_request(self, body_json: Dict) -> Optional[str]:
        """
        Validate the breakdown length of an optimize request.

        Args:
            body_json: Parsed JSON body with 'breakdown'

        Returns:
            Error message if validation fails, None if valid
        """
        breakdown = body_json.get("breakdown")
        if isinstance(breakdown, list) and len(breakdown) > config.MAX_DIAGRAM_NODES:
            return (
                f"Breakdown too large: {len(breakdown)} items "
                f"(limit: {config.MAX_DIAGRAM_NODES})"
            )

        return None
