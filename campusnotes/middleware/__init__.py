# Middleware package init
"""
CampusNotes Backend — Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → [OPTIONS] → [Errors] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID
    3. CORS: Starlette's CORSMiddleware (preflights, response headers)
    4. OPTIONS: Answer any remaining OPTIONS request with 200
    5. Errors: Turn any unhandled exception into the JSON 500 body

    The order is reversed for responses, so the request id header is set on
    every response, including unexpected 500s and short-circuited OPTIONS.
"""
