"""
CampusNotes Backend — Request Logging Middleware
==================================================

What:  One access-log line per HTTP request.
How:   Times the downstream call and logs method, path, status, duration,
       request id and, for uploads, the declared body size. The log level
       follows the status class.
When:  Runs inside RequestIDMiddleware, so the request id is already set.

Example lines:
    2024-01-15T12:00:00 [INFO] campusnotes.access: POST /api/upload → 201 in 812ms (48.2KB) [a1b2c3d4]
    2024-01-15T12:00:01 [WARNING] campusnotes.access: DELETE /api/data/abc → 404 in 3ms [e5f6a7b8]

Request bodies (file bytes, form fields) are never logged.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from campusnotes.middleware.request_id import request_id_var

logger = logging.getLogger("campusnotes.access")

# Probed every few seconds by monitors
QUIET_PATHS = {"/api/health"}


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _body_size(request: Request) -> Optional[str]:
    declared = request.headers.get("content-length")
    if not declared or not declared.isdigit():
        return None
    return f"{int(declared) / 1024:.1f}KB"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        size = _body_size(request) if request.method == "POST" else None
        logger.log(
            _level_for(response.status_code),
            "%s %s → %d in %.0fms%s [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            f" ({size})" if size else "",
            request_id_var.get(""),
        )
        return response
