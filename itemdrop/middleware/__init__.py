# Middleware package init
"""
ItemDrop Backend - Middleware Package
=======================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID response header
    2. Logging: method, path, status and duration for every request
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
