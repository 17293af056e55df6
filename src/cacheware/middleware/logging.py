"""Logging middleware for cacheware."""

import logging

from ..observability.logging import RequestContext, StructuredLogger
from ..types import HttpRequest, HttpResponse, RequestHandler
from .base import Middleware

logger = logging.getLogger(__name__)


class LoggingMiddleware(Middleware):
    """
    Middleware that logs requests and responses.

    Example:
        structured_logger = StructuredLogger(log_file="./logs/requests.jsonl")
        middleware = LoggingMiddleware(structured_logger, log_level="INFO")
    """

    def __init__(
        self,
        structured_logger: StructuredLogger | None = None,
        log_level: str = "INFO",
    ):
        """
        Initialize the logging middleware.

        Args:
            structured_logger: Structured logger for file logging
            log_level: Minimum log level for standard logging
        """
        self._structured_logger = structured_logger
        self._log_level = getattr(logging, log_level.upper())

    async def __call__(
        self,
        request: HttpRequest,
        next_handler: RequestHandler,
    ) -> HttpResponse:
        """Process request with logging."""
        context = RequestContext()
        short_id = context.request_id[:8]

        if self._structured_logger:
            self._structured_logger.log_request(request, context.request_id)

        logger.log(self._log_level, f"[{short_id}] {request.method} {request.path}")

        try:
            response = await next_handler(request)
        except Exception as e:
            latency_ms = context.elapsed_ms

            if self._structured_logger:
                self._structured_logger.log_error(context.request_id, e, latency_ms)

            logger.error(f"[{short_id}] Error after {latency_ms:.1f}ms: {e}")
            raise

        latency_ms = context.elapsed_ms

        if self._structured_logger:
            self._structured_logger.log_response(response, context.request_id, latency_ms)

        logger.log(
            self._log_level,
            f"[{short_id}] Completed: {response.status_code} in {latency_ms:.1f}ms",
        )

        return response
