"""
EdAiVi Studio Backend: Middleware Package
=========================================

What:  Cross-cutting concerns applied to every HTTP request.

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit rejects abusive clients before any other work
    2. Request ID assigns the correlation id the later layers log with
    3. Logging records method, path, status and duration

Websocket connections bypass all three (they are HTTP-only middleware).
"""
