"""
pgrest - Request Logging Middleware
===================================

What:  One access log line per HTTP request: method, path, status, duration.
Why:   Second entry of the base stack, right after recovery, so it also
       records the 500 responses produced for unhandled errors.
How:   Measures time around `call_next` and picks the log level from the
       status class.

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, client IP
    ❌ Don't log: request body, Authorization header, query string (may hold tokens)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pgrest.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request once its response is ready.

    5xx → ERROR, 4xx → WARNING, everything else → INFO.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        # request.client is None under some test transports
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

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
            "%s %s %d %.1fms from %s",
            method,
            path,
            status,
            duration_ms,
            client_ip,
            extra={
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
