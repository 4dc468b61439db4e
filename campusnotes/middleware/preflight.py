"""
CampusNotes Backend — OPTIONS Short-Circuit Middleware
========================================================

What:  Answers every OPTIONS request with 200 before it reaches routing.
How:   CORSMiddleware already handles proper preflights (Origin +
       Access-Control-Request-Method). Any other OPTIONS request would fall
       through to the router and get 405; this middleware answers it with an
       empty 200 carrying the permissive CORS headers.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


class OptionsShortCircuitMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "OPTIONS":
            return await call_next(request)

        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": ALLOW_METHODS,
                "Access-Control-Allow-Headers": ALLOW_HEADERS,
            },
        )
