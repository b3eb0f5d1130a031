"""
NutriTrack Backend — Access Logging Middleware
===============================================

What:  One log line per HTTP request: method, path, status, duration,
       request id and client address.
Why:   Store round trips dominate latency here; the duration field is the
       quickest way to spot a slow Firestore query or a missing index.
Who:   Added in create_app(); runs inside RequestIDMiddleware so the id is set.

Levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO.
    Request bodies are never logged (they hold e-mail addresses and
    dietary data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from nutritrack.middleware.request_id import request_id_var

logger = logging.getLogger("nutritrack.access")

# Probed every few seconds by the platform; logging them drowns real traffic
SILENT_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs the outcome and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        logger.log(
            level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
