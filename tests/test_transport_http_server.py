"""End-to-end tests for the HTTP app: auth, MCP over HTTP and feed attribution."""

from __future__ import annotations

import json
from collections.abc import Callable

from starlette.testclient import TestClient

from focus_mcp import __version__
from focus_mcp.app import AppContext
from focus_mcp.config import ServerSettings, Settings
from focus_mcp.transport.http_server import create_http_app

INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": "2025-06-18",
        "capabilities": {},
        "clientInfo": {"name": "pytest", "version": "1.0"},
    },
}


def _call(request_id: int, name: str, arguments: dict[str, object]) -> dict[str, object]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


def _open_session(client: TestClient, headers: dict[str, str]) -> dict[str, str]:
    response = client.post("/mcp", json=INITIALIZE, headers=headers)
    assert response.status_code == 200
    return {**headers, "Mcp-Session-Id": response.headers["mcp-session-id"]}


def test_health_and_ready_are_public(context: AppContext) -> None:
    with TestClient(create_http_app(context)) as client:
        health = client.get("/health")
        ready = client.get("/ready")

    assert health.status_code == 200
    assert health.json() == {"status": "healthy", "version": __version__}
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"
    assert ready.json()["sessions"] == 0
    assert set(ready.json()["recorder"]) == {"enqueued", "written", "failed", "dropped", "pending"}


def test_rest_without_credentials_is_rejected(context: AppContext) -> None:
    with TestClient(create_http_app(context)) as client:
        response = client.get("/api/tasks")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_mcp_without_credentials_gets_jsonrpc_error(context: AppContext) -> None:
    with TestClient(create_http_app(context)) as client:
        response = client.post("/mcp", json=INITIALIZE)

    assert response.status_code == 401
    assert response.json() == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": -32001, "message": "Unauthorized"},
    }
    assert response.headers["www-authenticate"].startswith("Bearer")


def test_mcp_lists_all_tools(context: AppContext, issue_token: Callable[..., str]) -> None:
    headers = {"Authorization": f"Bearer {issue_token()}"}
    with TestClient(create_http_app(context)) as client:
        session = _open_session(client, headers)
        response = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"}, headers=session
        )

    names = {tool["name"] for tool in response.json()["result"]["tools"]}
    assert names == {
        "focus_list_tasks",
        "focus_create_task",
        "focus_update_task",
        "focus_delete_task",
        "focus_add_task_comment",
        "focus_list_projects",
        "focus_create_project",
        "focus_update_project",
        "focus_delete_project",
        "focus_list_goals",
        "focus_create_goal",
        "focus_update_goal",
        "focus_delete_goal",
        "focus_list_actions",
        "focus_mark_actions_read",
    }


def test_agent_changes_are_attributed_in_feed(
    context: AppContext,
    issue_token: Callable[..., str],
    issue_session: Callable[..., str],
) -> None:
    agent = {"Authorization": f"Bearer {issue_token(name='Claude')}"}
    with TestClient(create_http_app(context)) as client:
        session = _open_session(client, agent)
        created = client.post(
            "/mcp",
            json=_call(2, "focus_create_task", {"title": "Book flights", "priority": "p2"}),
            headers=session,
        )
        task = created.json()["result"]["structuredContent"]["data"]
        completed = client.post(
            "/mcp",
            json=_call(3, "focus_update_task", {"id": task["id"], "completed": True}),
            headers=session,
        )
        assert completed.json()["result"]["structuredContent"]["data"]["completed"] is True

    cookie = {"Cookie": f"{context.settings.auth.session_cookie_name}={issue_session()}"}
    with TestClient(create_http_app(context)) as client:
        feed = client.get("/api/actions", headers=cookie).json()["actions"]
        unread = client.get("/api/actions/unread-count", headers=cookie).json()

    assert [entry["actionType"] for entry in feed] == ["complete", "create"]
    for entry in feed:
        assert entry["actorType"] == "agent"
        assert entry["actorId"] == "user-alice"
        assert entry["entityId"] == task["id"]
        assert entry["metadata"]["tokenName"] == "Claude"
        assert entry["metadata"]["title"] == "Book flights"
    assert unread == {"count": 2}


def test_user_edits_are_hidden_from_own_feed(
    context: AppContext, issue_session: Callable[..., str]
) -> None:
    cookie = {"Cookie": f"{context.settings.auth.session_cookie_name}={issue_session()}"}
    with TestClient(create_http_app(context)) as client:
        created = client.post("/api/tasks", json={"title": "Stretch"}, headers=cookie)
        assert created.status_code == 201

    with TestClient(create_http_app(context)) as client:
        default = client.get("/api/actions", headers=cookie).json()["actions"]
        own = client.get("/api/actions?actorType=user", headers=cookie).json()["actions"]
        included = client.get("/api/actions?includeOwn=true", headers=cookie).json()["actions"]

    assert default == []
    assert [entry["actionType"] for entry in own] == ["create"]
    assert own[0]["actorType"] == "user"
    assert "tokenName" not in own[0]["metadata"]
    assert len(included) == 1


def test_tool_validation_error_over_mcp(
    context: AppContext, issue_token: Callable[..., str]
) -> None:
    headers = {"Authorization": f"Bearer {issue_token()}"}
    with TestClient(create_http_app(context)) as client:
        session = _open_session(client, headers)
        response = client.post(
            "/mcp",
            json=_call(2, "focus_create_task", {"title": "No priority"}),
            headers=session,
        )

    result = response.json()["result"]
    assert result["isError"] is True
    payload = json.loads(result["content"][0]["text"])
    assert payload["error"] == "validation_error"
    assert payload["details"]["missing"] == ["priority"]
    assert context.store.fetch_one("SELECT COUNT(*) AS n FROM tasks")["n"] == 0


def test_delete_ends_mcp_session(context: AppContext, issue_token: Callable[..., str]) -> None:
    headers = {"Authorization": f"Bearer {issue_token()}"}
    with TestClient(create_http_app(context)) as client:
        session = _open_session(client, headers)
        assert client.get("/ready").json()["sessions"] == 1

        deleted = client.delete("/mcp", headers=session)
        after = client.post(
            "/mcp", json={"jsonrpc": "2.0", "id": 2, "method": "ping"}, headers=session
        )
        get = client.get("/mcp", headers=headers)

    assert deleted.status_code == 204
    assert after.status_code == 400
    assert get.status_code == 405


def test_cors_preflight_when_enabled(context: AppContext) -> None:
    context.settings = Settings(
        server=ServerSettings(
            http_enable_cors=True,
            http_allowed_origins=("https://app.example.com",),
        ),
        storage=context.settings.storage,
    )
    with TestClient(create_http_app(context)) as client:
        response = client.options(
            "/api/tasks",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "PATCH",
            },
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://app.example.com"
