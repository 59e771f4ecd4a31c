"""API middleware for request timing."""
import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger(__name__)

# Uploads that run longer than this get a log line
SLOW_REQUEST_SECONDS = 5.0


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Tag responses with a request ID and their processing time."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.3f}"
        if elapsed > SLOW_REQUEST_SECONDS:
            logger.warning(f"Slow request [{request_id}] {request.method} {request.url.path}: {elapsed:.1f}s")
        return response
