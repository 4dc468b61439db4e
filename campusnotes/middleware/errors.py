"""
CampusNotes Backend — Unhandled Error Middleware
==================================================

What:  Turns any exception no handler claimed into the standard 500 body.
How:   Installed innermost, so the response still passes back through the
       CORS, logging and request id middleware on its way out. (A handler
       registered for `Exception` would run outside all of them.)

Response:
    500 {"error": "internal_server_error", "message": "...", "request_id": "..."}
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from campusnotes.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception:
            rid = request_id_var.get("")
            logger.exception("[%s] Unhandled error on %s %s", rid, request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "internal_server_error",
                    "message": "An unexpected error occurred.",
                    "request_id": rid,
                },
            )
