"""
Happy Thoughts API — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: assign or propagate X-Request-ID before anything logs
    2. Logging: one access line per request, tagged with the request ID
    3. CORS: FastAPI's CORSMiddleware, answers preflight requests
"""
