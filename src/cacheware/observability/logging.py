"""Structured logging for cacheware."""

import json
import sys
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

from ..types import Headers, HttpRequest, HttpResponse

DEFAULT_REDACTED_HEADERS = ("authorization", "cookie", "set-cookie")


@dataclass
class RequestLogEntry:
    """A structured log entry for an inbound request."""

    request_id: str
    timestamp: str
    method: str
    path: str
    headers: dict[str, list[str]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": "request",
            "request_id": self.request_id,
            "timestamp": self.timestamp,
            "method": self.method,
            "path": self.path,
            "headers": self.headers,
        }


@dataclass
class ResponseLogEntry:
    """A structured log entry for an outgoing response."""

    request_id: str
    timestamp: str
    status_code: int
    headers: dict[str, list[str]]
    body_size: int
    latency_ms: float
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": "response",
            "request_id": self.request_id,
            "timestamp": self.timestamp,
            "status_code": self.status_code,
            "headers": self.headers,
            "body_size": self.body_size,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


class StructuredLogger:
    """
    A structured logger that outputs JSON-formatted log entries.

    Example:
        logger = StructuredLogger(
            log_file="./logs/requests.jsonl",
            redact_headers=["X-Api-Key"],
        )

        request_id = logger.log_request(request)
        logger.log_response(response, request_id, latency_ms)
    """

    def __init__(
        self,
        log_file: str | Path | None = None,
        include_headers: bool = True,
        redact_headers: list[str] | None = None,
        stdout: bool = False,
    ):
        """
        Initialize the structured logger.

        Args:
            log_file: Path to log file (JSONL format). None disables file logging.
            include_headers: Whether to include headers in logs
            redact_headers: Extra header names whose values are redacted
                (Authorization and cookies are always redacted)
            stdout: Whether to also log to stdout
        """
        self._log_file: Path | None = Path(log_file) if log_file else None
        self._include_headers = include_headers
        self._redact_headers = {
            *DEFAULT_REDACTED_HEADERS,
            *(name.lower() for name in redact_headers or []),
        }
        self._stdout = stdout
        self._file_handle: TextIO | None = None

        if self._log_file:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(self._log_file, "a")

    def _get_timestamp(self) -> str:
        """Get current timestamp in ISO format."""
        return datetime.now(UTC).isoformat()

    def _headers_dict(self, headers: Headers) -> dict[str, list[str]]:
        if not self._include_headers:
            return {}
        result: dict[str, list[str]] = {}
        for name, value in headers:
            if name.lower() in self._redact_headers:
                value = "[REDACTED]"
            result.setdefault(name, []).append(value)
        return result

    def _write_entry(self, entry: dict[str, Any]) -> None:
        """Write a log entry."""
        json_str = json.dumps(entry, default=str)

        if self._file_handle:
            self._file_handle.write(json_str + "\n")
            self._file_handle.flush()

        if self._stdout:
            print(json_str, file=sys.stdout)

    def log_request(
        self,
        request: HttpRequest,
        request_id: str | None = None,
    ) -> str:
        """
        Log an inbound request.

        Args:
            request: The request
            request_id: Optional request ID (generated if not provided)

        Returns:
            The request ID
        """
        if request_id is None:
            request_id = str(uuid.uuid4())

        entry = RequestLogEntry(
            request_id=request_id,
            timestamp=self._get_timestamp(),
            method=request.method,
            path=request.path,
            headers=self._headers_dict(request.headers),
        )

        self._write_entry(entry.to_dict())
        return request_id

    def log_response(
        self,
        response: HttpResponse,
        request_id: str,
        latency_ms: float,
    ) -> None:
        """
        Log a response.

        Args:
            response: The response
            request_id: The corresponding request ID
            latency_ms: Request latency in milliseconds
        """
        entry = ResponseLogEntry(
            request_id=request_id,
            timestamp=self._get_timestamp(),
            status_code=response.status_code,
            headers=self._headers_dict(response.headers),
            body_size=len(response.body),
            latency_ms=latency_ms,
        )

        self._write_entry(entry.to_dict())

    def log_error(
        self,
        request_id: str,
        error: Exception,
        latency_ms: float,
    ) -> None:
        """
        Log a failed request.

        Args:
            request_id: The corresponding request ID
            error: The exception that occurred
            latency_ms: Request latency in milliseconds
        """
        entry = {
            "type": "error",
            "request_id": request_id,
            "timestamp": self._get_timestamp(),
            "error": str(error),
            "error_type": type(error).__name__,
            "latency_ms": latency_ms,
        }

        self._write_entry(entry)

    def close(self) -> None:
        """Close the log file."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


@dataclass
class RequestContext:
    """Context for tracking a single request through the pipeline."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    start_time: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
