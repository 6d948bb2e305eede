"""
pgrest - Standard Handlers
==========================

What:  The default collaborator that supplies the handler-set, JWT and CORS
       middleware entries for the stack builder.
Why:   The builder only decides membership and order. Keeping the concrete
       handlers behind a provider lets tests and embedding applications
       swap them without touching the ordering rules.
How:   Each method returns a `starlette.middleware.Middleware` entry; nothing
       is instantiated until the ASGI app builds its stack.
"""

import logging
from typing import Sequence

import jwt
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class HandlerSetMiddleware(BaseHTTPMiddleware):
    """Defaults the response Content-Type to JSON when a handler left it unset."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        response.headers.setdefault("Content-Type", "application/json")
        return response


class JWTMiddleware(BaseHTTPMiddleware):
    """
    Requires a valid `Authorization: Bearer <token>` header.

    Decoded claims are exposed to handlers as `request.state.jwt_claims`.
    Missing or invalid tokens get a 401 JSON response.
    """

    def __init__(self, app: ASGIApp, key: str, algorithm: str = "HS256"):
        super().__init__(app)
        self.key = key
        self.algorithm = algorithm

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token:
            return self._unauthorized("authorization_required", "Missing bearer token")

        try:
            claims = jwt.decode(token, self.key, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            logger.warning("Rejected token on %s: %s", request.url.path, e)
            return self._unauthorized("invalid_token", "Token is invalid or expired")

        request.state.jwt_claims = claims
        return await call_next(request)

    @staticmethod
    def _unauthorized(error: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"error": error, "message": message},
            headers={"WWW-Authenticate": "Bearer"},
        )


class StandardHandlers:
    """Default middleware provider used by `build_middleware_stack()`."""

    def handler_set(self) -> Middleware:
        return Middleware(HandlerSetMiddleware)

    def jwt(self, key: str, algorithm: str) -> Middleware:
        return Middleware(JWTMiddleware, key=key, algorithm=algorithm)

    def cors(self, origins: Sequence[str], headers: Sequence[str]) -> Middleware:
        return Middleware(
            CORSMiddleware,
            allow_origins=list(origins),
            allow_headers=list(headers),
            allow_methods=["*"],
            allow_credentials=True,
        )
