"""Routes streamable-HTTP MCP requests to per-session transports."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.config import SessionSettings
from focus_mcp.transport.mcp_handler import (
    INTERNAL_ERROR,
    PARSE_ERROR,
    SERVER_ERROR,
    SESSION_NOT_FOUND,
    UNAUTHORIZED,
    McpTransport,
    error_response,
    json_response,
    negotiated_version,
)

logger = logging.getLogger(__name__)

SESSION_HEADER = "Mcp-Session-Id"

TransportFactory = Callable[..., McpTransport]


class SessionStore(Protocol):
    def get(self, session_id: str) -> McpTransport | None: ...

    def put(self, session_id: str, transport: McpTransport) -> None: ...

    def delete(self, session_id: str) -> None: ...

    def values(self) -> Iterable[McpTransport]: ...

    def __len__(self) -> int: ...


class InMemorySessionStore:
    """Process-local session map.

    Sessions are lost on restart and are not shared between workers; running
    more than one instance needs sticky routing or a shared store.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, McpTransport] = {}

    def get(self, session_id: str) -> McpTransport | None:
        return self._sessions.get(session_id)

    def put(self, session_id: str, transport: McpTransport) -> None:
        self._sessions[session_id] = transport

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def values(self) -> list[McpTransport]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)


def build_session_store(settings: SessionSettings) -> SessionStore:
    if settings.store == "memory":
        return InMemorySessionStore()
    raise RuntimeError(f"Unsupported MCP_SESSION_STORE: {settings.store}")


class SessionRouter:
    """
    Entry point for ``/mcp``.

    A request carrying a known session id owned by the same user goes to that
    session's transport. Anything else gets a fresh transport, which is only
    registered once it has been initialized.
    """

    def __init__(
        self,
        store: SessionStore,
        transport_factory: TransportFactory,
        allowed_origins: tuple[str, ...] = (),
        allow_missing_origin: bool = True,
    ) -> None:
        self._store = store
        self._factory = transport_factory
        self._allowed_origins = allowed_origins
        self._allow_missing_origin = allow_missing_origin

    @property
    def store(self) -> SessionStore:
        return self._store

    def __len__(self) -> int:
        return len(self._store)

    async def handle_request(self, request: Request) -> Response:
        origin_error = self._validate_origin(request)
        if origin_error is not None:
            return origin_error

        if request.method == "OPTIONS":
            return Response(status_code=204)
        if request.method == "DELETE":
            return self._handle_delete(request)
        if request.method != "POST":
            return error_response(
                None,
                "Streamable HTTP transport only supports POST requests",
                status_code=405,
                headers={"Allow": "POST, DELETE"},
            )

        principal: AuthenticatedPrincipal | None = getattr(request.state, "principal", None)
        if principal is None:
            return error_response(None, "Unauthorized", status_code=401, code=UNAUTHORIZED)

        try:
            payload = await request.json()
        except (json.JSONDecodeError, ValueError, UnicodeDecodeError):
            return error_response(None, "Parse error", status_code=400, code=PARSE_ERROR)

        transport = self._resolve(request.headers.get(SESSION_HEADER), principal)
        try:
            reply = await transport.handle_post(payload, principal)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception:
            logger.exception("MCP request failed in session %s", transport.session_id)
            return error_response(
                None, "Internal server error", status_code=500, code=INTERNAL_ERROR
            )

        headers = {
            "MCP-Protocol-Version": transport.protocol_version
            or negotiated_version(request.headers.get("MCP-Protocol-Version")),
        }
        if transport.state != "new":
            headers[SESSION_HEADER] = transport.session_id
        if reply.body is None:
            return Response(status_code=reply.status_code, headers=headers)
        return json_response(reply.body, status_code=reply.status_code, headers=headers)

    def sweep(self) -> int:
        """Close every expired session. Returns how many were closed."""
        expired = [transport for transport in self._store.values() if transport.is_expired()]
        for transport in expired:
            transport.close()
        if expired:
            logger.info("Closed %d idle MCP sessions", len(expired))
        return len(expired)

    async def run_reaper(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep()
            except Exception:
                logger.exception("MCP session sweep failed")

    def close_all(self) -> None:
        for transport in list(self._store.values()):
            transport.close()

    def _resolve(self, session_id: str | None, principal: AuthenticatedPrincipal) -> McpTransport:
        if session_id:
            existing = self._store.get(session_id)
            if existing is not None:
                if existing.owner_id != principal.user_id:
                    logger.warning(
                        "Session %s presented by user %s who does not own it",
                        session_id,
                        principal.user_id,
                    )
                elif existing.is_expired():
                    existing.close()
                else:
                    return existing
            else:
                logger.debug("Unknown MCP session id %s; starting a new session", session_id)
        return self._factory(
            owner_id=principal.user_id,
            on_initialized=self._register,
            on_closed=self._unregister,
        )

    def _register(self, transport: McpTransport) -> None:
        self._store.put(transport.session_id, transport)

    def _unregister(self, transport: McpTransport) -> None:
        self._store.delete(transport.session_id)

    def _handle_delete(self, request: Request) -> Response:
        principal: AuthenticatedPrincipal | None = getattr(request.state, "principal", None)
        session_id = request.headers.get(SESSION_HEADER)
        transport = self._store.get(session_id) if session_id else None
        if (
            transport is None
            or principal is None
            or transport.owner_id != principal.user_id
        ):
            return error_response(
                None, "Session not found", status_code=404, code=SESSION_NOT_FOUND
            )
        transport.close()
        return Response(status_code=204)

    def _validate_origin(self, request: Request) -> JSONResponse | None:
        origin = request.headers.get("origin")
        if not origin:
            if self._allowed_origins and not self._allow_missing_origin:
                return error_response(
                    None, "Missing Origin header", status_code=403, code=SERVER_ERROR
                )
            return None
        if not self._allowed_origins or "*" in self._allowed_origins:
            return None
        if origin.rstrip("/") not in self._allowed_origins:
            return error_response(None, "Origin not allowed", status_code=403, code=SERVER_ERROR)
        return None
