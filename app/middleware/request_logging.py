"""FastAPI middleware tagging each request with an id and logging its outcome."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import time
import uuid

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to handle request ids and access logging"""

    def __init__(self, app, header_name: str = "X-Request-ID", ignore_paths: tuple = ("/health",)):
        """Initializes the middleware."""
        super().__init__(app)
        self.header_name = header_name
        self.ignore_paths = ignore_paths

    async def dispatch(self, request: Request, call_next):
        """Attaches a request id, times the request and logs the response status."""
        # Reuse the caller's id when the bot sends one
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        response.headers[self.header_name] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        if request.url.path not in self.ignore_paths:
            message = (
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {process_time * 1000:.1f}ms (request_id={request_id})"
            )
            if response.status_code >= 500:
                logger.error(message)
            elif response.status_code >= 400:
                logger.warning(message)
            else:
                logger.info(message)

        return response
