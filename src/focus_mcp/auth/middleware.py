"""Authentication middleware that attaches the acting principal to each request."""

from __future__ import annotations

import logging
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from focus_mcp.auth.principal import reset_principal, set_principal
from focus_mcp.auth.resolver import ActorResolver

logger = logging.getLogger(__name__)

MCP_UNAUTHORIZED_CODE = -32001


class ActorAuthMiddleware(BaseHTTPMiddleware):
    """
    Resolve the principal for every non-exempt request.

    Unauthenticated REST calls get a plain 401 JSON body; calls to the MCP
    endpoint get a JSON-RPC error so protocol clients can parse it.
    """

    EXEMPT_PATHS = frozenset({"/health", "/ready"})

    def __init__(
        self,
        app: Any,
        resolver: ActorResolver,
        mcp_path: str = "/mcp",
        exempt_paths: tuple[str, ...] = (),
    ) -> None:
        super().__init__(app)
        self.resolver = resolver
        self.mcp_path = mcp_path
        self.exempt_paths = self.EXEMPT_PATHS | set(exempt_paths)

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        if request.url.path in self.exempt_paths or request.method == "OPTIONS":
            return await call_next(request)

        principal = await self.resolver.resolve(request.headers)
        if principal is None:
            logger.info("Unauthenticated %s %s", request.method, request.url.path)
            return self._unauthorized(request)

        token = set_principal(principal)
        try:
            request.state.principal = principal
            return await call_next(request)
        finally:
            reset_principal(token)

    def _unauthorized(self, request: Request) -> JSONResponse:
        if request.url.path == self.mcp_path or request.url.path.startswith(self.mcp_path + "/"):
            return JSONResponse(
                {
                    "jsonrpc": "2.0",
                    "id": None,
                    "error": {"code": MCP_UNAUTHORIZED_CODE, "message": "Unauthorized"},
                },
                status_code=401,
                headers={"WWW-Authenticate": 'Bearer realm="mcp"'},
            )
        return JSONResponse(
            {
                "error": "unauthorized",
                "message": "A session cookie or an API token is required",
            },
            status_code=401,
        )
