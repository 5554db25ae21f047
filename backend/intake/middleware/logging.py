"""
Form Intake Service — Request Logging Middleware
=================================================

What:  One access log line per request: method, path, status, duration,
       request ID and client IP.
How:   Measures time around `call_next` and picks the log level from the
       status code (5xx → ERROR, 4xx → WARNING, otherwise INFO).

Request bodies are never logged: every form carries names, emails and phone
numbers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from intake.middleware.request_id import request_id_var

logger = logging.getLogger("intake.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs status and latency for every request except health probes."""

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
