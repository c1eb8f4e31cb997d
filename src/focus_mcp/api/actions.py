"""Activity feed endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from focus_mcp.api._common import (
    api_endpoint,
    app_context,
    json_ok,
    parse_body,
    principal_of,
    validate_model,
)
from focus_mcp.audit.models import ActionQuery


class ActionsQueryParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    limit: int | None = Field(default=None)
    is_read: bool | None = Field(default=None, alias="isRead")
    entity_type: Literal["task", "project", "goal"] | None = Field(default=None, alias="entityType")
    entity_id: str | None = Field(default=None, alias="entityId")
    actor_type: Literal["user", "agent", "system"] | None = Field(default=None, alias="actorType")
    include_own: bool = Field(default=False, alias="includeOwn")


class MarkReadBody(BaseModel):
    ids: list[str] = Field(max_length=500)


@api_endpoint
async def list_actions(request: Request) -> Response:
    params = validate_model(ActionsQueryParams, dict(request.query_params))
    ctx = app_context(request)
    principal = principal_of(request)
    records = await ctx.ledger.query(
        ActionQuery(
            user_id=principal.user_id,
            actor_kind=params.actor_type,
            entity_type=params.entity_type,
            entity_id=params.entity_id,
            is_read=params.is_read,
            include_own=params.include_own or params.actor_type == "user",
            limit=params.limit if params.limit is not None else ctx.settings.ledger.default_limit,
        )
    )
    return json_ok({"actions": [record.to_dict() for record in records]})


@api_endpoint
async def mark_read(request: Request) -> Response:
    body = await parse_body(request, MarkReadBody)
    await app_context(request).ledger.mark_read(body.ids)
    return json_ok({"success": True})


@api_endpoint
async def mark_all_read(request: Request) -> Response:
    marked = await app_context(request).ledger.mark_all_read(principal_of(request).user_id)
    return json_ok({"success": True, "marked": marked})


@api_endpoint
async def unread_count(request: Request) -> Response:
    count = await app_context(request).ledger.unread_count(principal_of(request).user_id)
    return json_ok({"count": count})


routes = [
    Route("/api/actions", endpoint=list_actions, methods=["GET"]),
    Route("/api/actions/read", endpoint=mark_read, methods=["POST"]),
    Route("/api/actions/read-all", endpoint=mark_all_read, methods=["POST"]),
    Route("/api/actions/unread-count", endpoint=unread_count, methods=["GET"]),
]
