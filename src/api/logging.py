"""SQLite request logging for API."""

import sqlite3
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import HTTPException, Request, status

from api.models.responses import ErrorCodes


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    started_at: float = field(default_factory=time.time)
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    query: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    appointments_count: int | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)

    @classmethod
    def from_request(cls, request: Request) -> "RequestLog":
        return cls(
            endpoint=request.url.path,
            method=request.method,
            client_ip=get_client_ip(request),
            query=str(request.url.query) or None,
        )

    def finish(self, status_code: int) -> None:
        """Record the final status and elapsed time."""
        self.status_code = status_code
        self.processing_time_ms = int((time.time() - self.started_at) * 1000)

    def record_http_error(self, e: HTTPException) -> None:
        """Copy status, code and details from an HTTPException."""
        detail_type = "validation_error" if e.status_code < 500 else "upstream_error"
        if isinstance(e.detail, dict):
            self.error_code = e.detail.get("code")
            self.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                self.details.append((detail_type, detail))
        else:
            self.error_message = str(e.detail)
        self.finish(e.status_code)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def log_request(conn: sqlite3.Connection, log: RequestLog) -> None:
    """Write request log to SQLite database."""
    cursor = conn.cursor()

    # Insert main request record
    cursor.execute(
        """
        INSERT INTO api_requests (
            request_id, timestamp, endpoint, method, client_ip, query,
            status_code, error_code, error_message, processing_time_ms,
            appointments_count
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """,
        (
            log.request_id,
            log.timestamp,
            log.endpoint,
            log.method,
            log.client_ip,
            log.query,
            log.status_code,
            log.error_code,
            log.error_message,
            log.processing_time_ms,
            log.appointments_count,
        ),
    )

    # Insert detail records
    for detail_type, message in log.details:
        cursor.execute(
            """
            INSERT INTO api_request_details (request_id, detail_type, message)
            VALUES (?, ?, ?)
        """,
            (log.request_id, detail_type, message),
        )

    conn.commit()


def safe_log_request(conn: sqlite3.Connection, log: RequestLog) -> None:
    """Log the request without ever failing it."""
    try:
        log_request(conn, log)
    except sqlite3.Error as e:
        print(f"  Error writing request log: {e}")


@contextmanager
def logged_request(conn: sqlite3.Connection, request: Request) -> Iterator[RequestLog]:
    """
    Record a request in the log whatever its outcome.

    The route body runs inside the block and may set appointments_count on
    the yielded log. Success is logged as 200, an HTTPException with its
    own status and code, anything else as a 500.
    """
    request_log = RequestLog.from_request(request)
    try:
        yield request_log
        if not request_log.status_code:
            request_log.finish(status.HTTP_200_OK)

    except HTTPException as e:
        request_log.record_http_error(e)
        raise

    finally:
        if not request_log.status_code:
            request_log.error_code = ErrorCodes.INTERNAL_ERROR
            request_log.finish(status.HTTP_500_INTERNAL_SERVER_ERROR)
        safe_log_request(conn, request_log)
