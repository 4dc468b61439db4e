"""
CampusNotes Backend — Request ID Middleware
=============================================

What:  Tags every request with a short correlation id.
How:   A client-sent X-Request-ID (up to 64 characters) is reused; otherwise
       8 hex characters are generated. The id is stored in a ContextVar for
       loggers and exception handlers, and echoed in the X-Request-ID
       response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

MAX_CLIENT_ID_LENGTH = 64

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def _pick_request_id(request: Request) -> str:
    incoming = request.headers.get("X-Request-ID", "").strip()
    if incoming and len(incoming) <= MAX_CLIENT_ID_LENGTH:
        return incoming
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = _pick_request_id(request)
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
