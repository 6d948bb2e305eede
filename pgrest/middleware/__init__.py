"""
pgrest - Middleware Package
===========================

What:  Cross-cutting handlers applied to every request, and the builder
       that decides which of them are installed.

Middleware Chain (first entry = outermost):
    Request → [Recovery] → [Logging] → [Handler set] → [JWT]? → [CORS]? → Route

    Recovery is outermost so a crash anywhere below still yields a JSON 500
    that the logger records.
"""

from pgrest.middleware.stack import build_middleware_stack, is_cors_disabled

__all__ = ["build_middleware_stack", "is_cors_disabled"]
