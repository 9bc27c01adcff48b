# Middleware package init
"""
Favorite Places — Middleware Package
=====================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Correlation ID for logs and error bodies
    2. Logging: One access line per request, tagged with the request ID
    3. CORS: Starlette's CORSMiddleware (answers preflight OPTIONS)

    Responses travel the chain in reverse, so the X-Request-ID header is
    present even on CORS-rejected and error responses.
"""
