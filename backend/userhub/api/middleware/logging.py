"""
UserHub Backend — Request Logging Middleware
==============================================

What:  One access-log line per HTTP request: method, path, status, duration.
How:   Measures wall time around call_next and logs on the `userhub.access`
       logger with a level chosen from the status class.
When:  Runs inside RequestIDMiddleware, so the request ID is already set and
       is added to each record by RequestIdLogFilter.

What we log vs what we DON'T log:
    ✅ Log: method, path, query keys, status, duration, client IP
    ❌ Don't log: request bodies or query values (names and emails are personal data)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("userhub.access")

# Probed every few seconds by orchestrators; not worth an access-log line
SILENT_PATHS = frozenset({"/health"})


def level_for_status(status_code: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SILENT_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        access = {
            "method": request.method,
            "path": request.url.path,
            "query_keys": sorted(request.query_params.keys()),
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "client_ip": request.client.host if request.client else "unknown",
        }
        logger.log(
            level_for_status(response.status_code),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms from %(client_ip)s",
            access,
            extra={"access": access},
        )
        return response
