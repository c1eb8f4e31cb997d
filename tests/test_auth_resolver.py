"""Tests for actor resolution from session cookies and bearer tokens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from focus_mcp.app import AppContext
from focus_mcp.auth.principal import (
    AuthenticatedPrincipal,
    get_principal,
    get_principal_optional,
    reset_principal,
    set_principal,
)
from focus_mcp.auth.resolver import ActorResolver, SessionInfo, _bearer_token
from focus_mcp.domain.models import ApiToken, User


ALICE = User(id="user-alice", name="Alice", email="alice@example.com")


def _cookie(context: AppContext, token: str) -> str:
    return f"{context.settings.auth.session_cookie_name}={token}"


@pytest.mark.asyncio
async def test_session_resolves_to_user(
    context: AppContext, issue_session: Callable[..., str]
) -> None:
    cookie = _cookie(context, issue_session())

    principal = await context.resolver.resolve({"cookie": cookie})

    assert principal is not None
    assert principal.user_id == "user-alice"
    assert principal.actor_kind == "user"
    assert principal.token_label is None


@pytest.mark.asyncio
async def test_bearer_token_resolves_to_agent(
    context: AppContext, issue_token: Callable[..., str]
) -> None:
    secret = issue_token(name="Cursor")

    principal = await context.resolver.resolve({"authorization": f"Bearer {secret}"})

    assert principal is not None
    assert principal.user_id == "user-alice"
    assert principal.actor_kind == "agent"
    assert principal.is_agent
    assert principal.token_label == "Cursor"
    assert secret not in repr(principal)


@pytest.mark.asyncio
async def test_session_takes_precedence_over_token(
    context: AppContext,
    issue_session: Callable[..., str],
    issue_token: Callable[..., str],
) -> None:
    headers = {
        "cookie": _cookie(context, issue_session()),
        "authorization": f"Bearer {issue_token(user_id='user-bob')}",
    }

    principal = await context.resolver.resolve(headers)

    assert principal is not None
    assert principal.user_id == "user-alice"
    assert principal.actor_kind == "user"


@pytest.mark.asyncio
async def test_expired_session_falls_back_to_token(
    context: AppContext,
    issue_session: Callable[..., str],
    issue_token: Callable[..., str],
) -> None:
    headers = {
        "cookie": _cookie(context, issue_session(ttl=timedelta(seconds=-1))),
        "authorization": f"Bearer {issue_token()}",
    }

    principal = await context.resolver.resolve(headers)

    assert principal is not None
    assert principal.actor_kind == "agent"


@pytest.mark.asyncio
async def test_session_provider_error_falls_back_to_token(
    context: AppContext, issue_token: Callable[..., str]
) -> None:
    sessions = MagicMock()
    sessions.get_session = AsyncMock(side_effect=RuntimeError("session backend down"))
    resolver = ActorResolver(sessions, token_store=context.storage, user_store=context.storage)

    principal = await resolver.resolve({"authorization": f"Bearer {issue_token()}"})

    assert principal is not None
    assert principal.actor_kind == "agent"


@pytest.mark.asyncio
async def test_unknown_credentials_resolve_to_none(context: AppContext) -> None:
    assert await context.resolver.resolve({}) is None
    assert await context.resolver.resolve({"cookie": _cookie(context, "nope")}) is None
    assert await context.resolver.resolve({"authorization": "Bearer focus_deadbeef"}) is None
    assert await context.resolver.resolve({"authorization": "Basic abc"}) is None


@pytest.mark.asyncio
async def test_token_for_missing_user_resolves_to_none() -> None:
    sessions = MagicMock()
    sessions.get_session = AsyncMock(return_value=None)
    tokens = MagicMock()
    tokens.find_by_token = AsyncMock(
        return_value=ApiToken(id="t1", user_id="ghost", name="Old", created_at="2026-01-01")
    )
    users = MagicMock()
    users.get_user = AsyncMock(return_value=None)
    resolver = ActorResolver(sessions, tokens, users)

    assert await resolver.resolve({"authorization": "Bearer focus_abc"}) is None


@pytest.mark.asyncio
async def test_session_for_missing_user_tries_token() -> None:
    sessions = MagicMock()
    sessions.get_session = AsyncMock(
        return_value=SessionInfo(session_id="s1", user_id="ghost", expires_at="2099-01-01")
    )
    tokens = MagicMock()
    tokens.find_by_token = AsyncMock(
        return_value=ApiToken(id="t1", user_id="user-alice", name="CLI", created_at="2026-01-01")
    )
    users = MagicMock()
    users.get_user = AsyncMock(
        side_effect=lambda user_id: ALICE if user_id == "user-alice" else None
    )
    resolver = ActorResolver(sessions, tokens, users)

    principal = await resolver.resolve({"authorization": "Bearer focus_abc"})

    assert principal is not None
    assert principal.token_label == "CLI"


@pytest.mark.asyncio
async def test_provider_reads_externally_issued_session(
    context: AppContext, issue_session: Callable[..., str]
) -> None:
    token = issue_session("user-bob")

    session = await context.sessions.get_session({"cookie": _cookie(context, token)})

    assert session is not None
    assert session.user_id == "user-bob"
    assert not hasattr(context.sessions, "issue")


def test_bearer_token_parsing() -> None:
    assert _bearer_token({"authorization": "Bearer abc"}) == "abc"
    assert _bearer_token({"authorization": "bearer  abc "}) == "abc"
    assert _bearer_token({"authorization": "Bearer "}) is None
    assert _bearer_token({}) is None


def test_principal_context_var() -> None:
    principal = AuthenticatedPrincipal(user=User(id="u1", name="U", email="u@x"), actor_kind="user")
    assert get_principal_optional() is None
    with pytest.raises(RuntimeError):
        get_principal()

    token = set_principal(principal)
    try:
        assert get_principal() is principal
    finally:
        reset_principal(token)

    assert get_principal_optional() is None
