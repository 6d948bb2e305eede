"""
pgrest - Middleware Stack Builder
=================================

What:  Decides which middleware wrap every request, and in which order.
Why:   The set depends on the resolved configuration (debug mode, CORS
       origins); the order is fixed so behaviour is predictable.
How:   Returns a fresh list of `starlette.middleware.Middleware` entries on
       every call. The first entry is the outermost layer.

Stack (request flows top to bottom):
    Recovery        always
    Request logger  always
    Handler set     always (supplied by the provider)
    JWT auth        unless debug mode
    CORS            unless cors.alloworigin starts with "false"
"""

from typing import List, Optional, Protocol, Sequence

from starlette.middleware import Middleware

from pgrest.config.models import PrestConfig
from pgrest.middleware.handlers import StandardHandlers
from pgrest.middleware.logging import RequestLoggingMiddleware
from pgrest.middleware.recovery import RecoveryMiddleware

CORS_DISABLED_SENTINEL = "false"


class MiddlewareProvider(Protocol):
    """Supplies the configurable middleware entries by name."""

    def handler_set(self) -> Middleware: ...

    def jwt(self, key: str, algorithm: str) -> Middleware: ...

    def cors(self, origins: Sequence[str], headers: Sequence[str]) -> Middleware: ...


def is_cors_disabled(origins: Sequence[str]) -> bool:
    """
    True when the first allowed origin is the literal string "false".

    The config sources have no way to say "explicitly empty list", so
    `cors.alloworigin = ["false"]` (or PREST_CORS_ALLOWORIGIN=false) is the
    established way to switch CORS off. An empty list is NOT disabled.
    """
    return len(origins) > 0 and origins[0] == CORS_DISABLED_SENTINEL


def build_middleware_stack(
    config: PrestConfig,
    provider: Optional[MiddlewareProvider] = None,
) -> List[Middleware]:
    """Build the ordered middleware list for `config`. No I/O, never fails."""
    if provider is None:
        provider = StandardHandlers()

    stack = [
        Middleware(RecoveryMiddleware),
        Middleware(RequestLoggingMiddleware),
        provider.handler_set(),
    ]

    if not config.debug:
        stack.append(provider.jwt(config.jwt_key, config.jwt_algo))

    if not is_cors_disabled(config.cors_allow_origin):
        stack.append(provider.cors(config.cors_allow_origin, config.cors_allow_headers))

    return stack
