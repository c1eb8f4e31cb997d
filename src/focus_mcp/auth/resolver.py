"""Resolve the acting principal from a session cookie or a bearer token."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from starlette.requests import cookie_parser

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.db import SqliteStore
from focus_mcp.domain.models import ApiToken, User
from focus_mcp.utils.time import parse_iso, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionInfo:
    session_id: str
    user_id: str
    expires_at: str


class SessionProvider(Protocol):
    async def get_session(self, headers: Mapping[str, str]) -> SessionInfo | None: ...


class TokenStore(Protocol):
    async def find_by_token(self, token: str) -> ApiToken | None: ...


class UserStore(Protocol):
    async def get_user(self, user_id: str) -> User | None: ...


class SqliteSessionProvider:
    """Reads browser sessions written by the external sign-in service.

    Sessions live in the ``sessions`` table keyed by the cookie value.
    Expired rows are ignored, not deleted.
    """

    def __init__(self, store: SqliteStore, cookie_name: str) -> None:
        self._store = store
        self._cookie_name = cookie_name

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    async def get_session(self, headers: Mapping[str, str]) -> SessionInfo | None:
        cookie_header = headers.get("cookie")
        if not cookie_header:
            return None
        token = cookie_parser(cookie_header).get(self._cookie_name)
        if not token:
            return None
        row = await asyncio.to_thread(
            self._store.fetch_one,
            "SELECT id, user_id, expires_at FROM sessions WHERE token = ?",
            (token,),
        )
        if row is None:
            return None
        if parse_iso(row["expires_at"]) <= utc_now():
            logger.debug("Ignoring expired session %s", row["id"])
            return None
        return SessionInfo(
            session_id=row["id"],
            user_id=row["user_id"],
            expires_at=row["expires_at"],
        )


class ActorResolver:
    """Session first, then bearer token. Returns ``None`` when neither matches."""

    def __init__(
        self,
        session_provider: SessionProvider,
        token_store: TokenStore,
        user_store: UserStore,
    ) -> None:
        self._sessions = session_provider
        self._tokens = token_store
        self._users = user_store

    async def resolve(self, headers: Mapping[str, str]) -> AuthenticatedPrincipal | None:
        try:
            session = await self._sessions.get_session(headers)
        except Exception as exc:
            # A broken session backend must not block token-authenticated agents.
            logger.debug("Session lookup failed, trying bearer token: %s", exc)
            session = None

        if session is not None:
            user = await self._users.get_user(session.user_id)
            if user is not None:
                return AuthenticatedPrincipal(user=user, actor_kind="user")

        token = _bearer_token(headers)
        if token is None:
            return None
        api_token = await self._tokens.find_by_token(token)
        if api_token is None:
            return None
        user = await self._users.get_user(api_token.user_id)
        if user is None:
            return None
        return AuthenticatedPrincipal(
            user=user,
            actor_kind="agent",
            token_label=api_token.name,
        )


def _bearer_token(headers: Mapping[str, str]) -> str | None:
    auth_header = headers.get("authorization", "")
    if not auth_header.lower().startswith("bearer "):
        return None
    token = auth_header[7:].strip()
    return token or None
