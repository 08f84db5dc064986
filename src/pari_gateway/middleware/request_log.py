"""Request and command logging.

HTTP requests (health, static assets) go through RequestLogMiddleware;
WebSocket commands are timed by ``CommandTimer`` in the dispatcher.

Log format:
    INFO [GET] /health → 200 (1ms) req_a1b2c3d4e5f6
    INFO [placeBet] conn=ab12cd34 → ok (2ms)
    INFO [resolveMarket] conn=ab12cd34 → NotCreator (0ms)
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pm.request")
command_logger = logging.getLogger("pm.command")


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs plain HTTP traffic (health checks, client assets) and tags each
    response with ``X-Request-ID``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or _new_request_id()
        started = time.perf_counter()
        response: Response = await call_next(request)
        latency_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            request_id,
        )
        return response


class CommandTimer:
    """Times one WebSocket command and logs its outcome on ``done``."""

    def __init__(self, connection_id: str) -> None:
        self.connection_id = connection_id
        self.command_type = "unknown"
        self.outcome = "ok"
        self._start = time.perf_counter()

    def done(self) -> float:
        elapsed_ms = (time.perf_counter() - self._start) * 1000
        level = logging.ERROR if self.outcome == "Internal" else logging.INFO
        command_logger.log(
            level,
            "[%s] conn=%s → %s (%.0fms)",
            self.command_type,
            self.connection_id,
            self.outcome,
            elapsed_ms,
        )
        return elapsed_ms
