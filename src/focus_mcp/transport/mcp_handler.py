"""JSON-RPC handling for one MCP session."""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Literal

from starlette.responses import JSONResponse, Response

from focus_mcp import __version__
from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools.base import dispatch_tool
from focus_mcp.utils.serialization import json_default

logger = logging.getLogger(__name__)

SUPPORTED_PROTOCOL_VERSIONS = ("2025-03-26", "2025-06-18", "2025-11-25")
DEFAULT_PROTOCOL_VERSION = "2025-03-26"
MAX_BATCH_REQUESTS = 50
SERVER_NAME = "focus-mcp"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000
SESSION_NOT_FOUND = -32001
UNAUTHORIZED = -32001

TransportState = Literal["new", "active", "closed"]


@dataclass
class TransportReply:
    """What the HTTP layer should send back for one POST body."""

    status_code: int
    body: object | None = None


class McpTransport:
    """
    Per-session JSON-RPC endpoint.

    A transport starts ``new`` and only accepts ``initialize``. A successful
    initialize moves it to ``active`` and fires ``on_initialized``; ``close``
    moves it to ``closed`` and fires ``on_closed``. Requests already being
    handled when the transport closes run to completion.
    """

    def __init__(
        self,
        *,
        owner_id: str,
        tools: Mapping[str, ToolSpec],
        instructions: str,
        idle_timeout_seconds: float,
        on_initialized: Callable[["McpTransport"], None] | None = None,
        on_closed: Callable[["McpTransport"], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_id = str(uuid.uuid4())
        self.owner_id = owner_id
        self.protocol_version: str | None = None
        self.state: TransportState = "new"
        self._tools = tools
        self._instructions = instructions
        self._idle_timeout = idle_timeout_seconds
        self._on_initialized = on_initialized
        self._on_closed = on_closed
        self._clock = clock
        self._last_activity = clock()

    def is_expired(self) -> bool:
        return self._clock() - self._last_activity > self._idle_timeout

    def close(self) -> None:
        if self.state == "closed":
            return
        self.state = "closed"
        logger.info("MCP session %s closed", self.session_id)
        if self._on_closed is not None:
            self._on_closed(self)

    async def handle_post(
        self,
        payload: object,
        principal: AuthenticatedPrincipal,
    ) -> TransportReply:
        self._last_activity = self._clock()

        if isinstance(payload, list):
            if not payload:
                return TransportReply(
                    400, error_body(None, "Invalid Request: empty batch", INVALID_REQUEST)
                )
            if len(payload) > MAX_BATCH_REQUESTS:
                return TransportReply(
                    400,
                    error_body(
                        None,
                        f"Batch request too large (max {MAX_BATCH_REQUESTS})",
                        INVALID_REQUEST,
                    ),
                )
            messages = payload
        elif isinstance(payload, dict):
            messages = [payload]
        else:
            return TransportReply(
                400, error_body(None, "Invalid Request: expected an object", INVALID_REQUEST)
            )

        is_initialize = any(
            isinstance(message, dict) and message.get("method") == "initialize"
            for message in messages
        )
        if is_initialize:
            if self.state != "new":
                return TransportReply(
                    400,
                    error_body(None, "Invalid Request: Server already initialized", INVALID_REQUEST),
                )
            if len(messages) > 1:
                return TransportReply(
                    400,
                    error_body(
                        None,
                        "Invalid Request: Only one initialization request is allowed",
                        INVALID_REQUEST,
                    ),
                )
        elif self.state == "new":
            return TransportReply(
                400, error_body(None, "Bad Request: Server not initialized", SERVER_ERROR)
            )
        elif self.state == "closed":
            return TransportReply(404, error_body(None, "Session not found", SESSION_NOT_FOUND))

        responses: list[dict[str, object]] = []
        for message in messages:
            if not isinstance(message, dict):
                responses.append(
                    error_body(None, "Invalid JSON-RPC batch entry", INVALID_REQUEST)
                )
                continue
            response = await self._handle_single(message, principal)
            if response is not None:
                responses.append(response)

        if not responses:
            return TransportReply(202)
        if isinstance(payload, list):
            return TransportReply(200, responses)
        return TransportReply(200, responses[0])

    async def _handle_single(
        self,
        payload: dict[str, object],
        principal: AuthenticatedPrincipal,
    ) -> dict[str, object] | None:
        request_id = payload.get("id")
        method = payload.get("method")
        params = payload.get("params", {})
        params_dict = params if isinstance(params, dict) else {}

        # Notifications and client responses get no reply.
        if request_id is None:
            return None
        if method is None and ("result" in payload or "error" in payload):
            return None

        if not isinstance(method, str):
            return error_body(request_id, "Invalid JSON-RPC method", INVALID_REQUEST)

        if method == "initialize":
            requested = params_dict.get("protocolVersion")
            if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
                negotiated = requested
            else:
                negotiated = SUPPORTED_PROTOCOL_VERSIONS[-1]
            self.protocol_version = negotiated
            self.state = "active"
            logger.info(
                "MCP session %s initialized for %s:%s (protocol %s)",
                self.session_id,
                principal.actor_kind,
                principal.user_id,
                negotiated,
            )
            if self._on_initialized is not None:
                self._on_initialized(self)
            return {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {
                    "protocolVersion": negotiated,
                    "serverInfo": {"name": SERVER_NAME, "version": __version__},
                    "instructions": self._instructions,
                    "capabilities": {"tools": {"listChanged": False}},
                },
            }

        if method == "ping":
            return {"jsonrpc": "2.0", "id": request_id, "result": {}}

        if method == "tools/list":
            tools = [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "inputSchema": tool.input_schema,
                }
                for tool in self._tools.values()
            ]
            return {"jsonrpc": "2.0", "id": request_id, "result": {"tools": tools}}

        if method == "tools/call":
            name = params_dict.get("name")
            if not isinstance(name, str):
                return error_body(request_id, "Invalid tool name", INVALID_PARAMS)
            arguments = params_dict.get("arguments", {})
            if arguments is None:
                arguments = {}
            if not isinstance(arguments, dict):
                return error_body(request_id, "Invalid tool arguments", INVALID_PARAMS)
            tool = self._tools.get(name)
            if tool is None:
                return error_body(request_id, f"Unknown tool: {name[:256]}", INVALID_PARAMS)
            result = await dispatch_tool(tool, arguments, principal)
            return {"jsonrpc": "2.0", "id": request_id, "result": result.to_mcp()}

        return error_body(request_id, f"Method not found: {method[:256]}", METHOD_NOT_FOUND)


def error_body(
    request_id: object,
    message: str,
    code: int = SERVER_ERROR,
) -> dict[str, object]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def error_response(
    request_id: object,
    message: str,
    status_code: int = 400,
    code: int = SERVER_ERROR,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    merged = {"MCP-Protocol-Version": DEFAULT_PROTOCOL_VERSION}
    merged.update(headers or {})
    return JSONResponse(
        error_body(request_id, message, code=code),
        status_code=status_code,
        headers=merged,
    )


def json_response(
    payload: object,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> Response:
    """Serialize *payload* once and return a Response."""
    body = json.dumps(payload, default=json_default, ensure_ascii=False)
    return Response(
        content=body,
        status_code=status_code,
        media_type="application/json",
        headers=headers,
    )


def negotiated_version(header_value: str | None) -> str:
    if header_value and header_value in SUPPORTED_PROTOCOL_VERSIONS:
        return header_value
    return DEFAULT_PROTOCOL_VERSION
