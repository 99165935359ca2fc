# Middleware package init
"""
IstoEuQuero Backend: Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the correlation ID;
    the logging middleware sees the final status on the way back out.
"""
