"""Tool definitions shared by the MCP transport and the tool modules."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from focus_mcp.auth.principal import AuthenticatedPrincipal


@dataclass
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, object]
    handler: Callable[[dict[str, object], "AuthenticatedPrincipal"], Awaitable[object]]


class ToolResult(BaseModel):
    content: list[dict[str, object]]
    structured_content: dict[str, object] | None = None
    is_error: bool = False

    def to_mcp(self) -> dict[str, object]:
        payload: dict[str, object] = {"content": self.content}
        if self.structured_content is not None:
            payload["structuredContent"] = self.structured_content
        if self.is_error:
            payload["isError"] = True
        return payload
