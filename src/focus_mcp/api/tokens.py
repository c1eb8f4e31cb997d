"""API token management. Only session-authenticated users may manage tokens."""

from __future__ import annotations

from pydantic import BaseModel, Field
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from focus_mcp.api._common import api_endpoint, app_context, json_ok, parse_body, principal_of


class CreateTokenBody(BaseModel):
    name: str = Field(min_length=1, max_length=50)


def _forbid_agents(request: Request) -> Response | None:
    if principal_of(request).is_agent:
        return JSONResponse(
            {"error": "forbidden", "message": "API tokens cannot manage API tokens"},
            status_code=403,
        )
    return None


@api_endpoint
async def list_tokens(request: Request) -> Response:
    denied = _forbid_agents(request)
    if denied is not None:
        return denied
    tokens = await app_context(request).storage.list_api_tokens(principal_of(request).user_id)
    return json_ok({"tokens": [token.to_dict() for token in tokens]})


@api_endpoint
async def create_token(request: Request) -> Response:
    denied = _forbid_agents(request)
    if denied is not None:
        return denied
    body = await parse_body(request, CreateTokenBody)
    issued = await app_context(request).storage.create_api_token(
        principal_of(request).user_id, body.name
    )
    return json_ok(issued.to_dict(), status_code=201)


@api_endpoint
async def delete_token(request: Request) -> Response:
    denied = _forbid_agents(request)
    if denied is not None:
        return denied
    await app_context(request).storage.delete_api_token(
        principal_of(request).user_id, request.path_params["token_id"]
    )
    return json_ok({"success": True})


routes = [
    Route("/api/tokens", endpoint=list_tokens, methods=["GET"]),
    Route("/api/tokens", endpoint=create_token, methods=["POST"]),
    Route("/api/tokens/{token_id}", endpoint=delete_token, methods=["DELETE"]),
]
