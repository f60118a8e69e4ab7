"""
Snippetbox — Request Logging Middleware
=========================================

What:  One access-log line per HTTP request.
How:   Times the downstream app and logs client IP, protocol, method, URI,
       status and duration, tagged with the request ID.
When:  Runs inside RequestIDMiddleware so the ID is already set.

Level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged (snippet content stays out of the logs).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        proto = f"HTTP/{request.scope.get('http_version', '1.1')}"
        uri = request.url.path
        if request.url.query:
            uri = f"{uri}?{request.url.query}"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get()
        logger.log(
            log_level,
            "received request ip=%s proto=%s method=%s uri=%s status=%d duration=%.1fms [%s]",
            client_ip,
            proto,
            request.method,
            uri,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
