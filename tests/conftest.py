from __future__ import annotations

import asyncio
import contextlib
import secrets
import uuid
from collections.abc import Callable, Iterator
from datetime import timedelta
from pathlib import Path

import pytest

from focus_mcp.app import AppContext, build_app_context
from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.config import Settings, StorageSettings, _load_settings_cached
from focus_mcp.db import SqliteStore
from focus_mcp.domain.models import User
from focus_mcp.domain.storage import TOKEN_PREFIX
from focus_mcp.utils.hashing import sha256_text
from focus_mcp.utils.time import utc_now

ALICE = User(id="user-alice", name="Alice", email="alice@example.com")
BOB = User(id="user-bob", name="Bob", email="bob@example.com")


@pytest.fixture(autouse=True)
def _close_default_event_loop() -> None:
    yield
    policy = asyncio.get_event_loop_policy()
    local = getattr(policy, "_local", None)
    loop = getattr(local, "_loop", None) if local is not None else None
    if loop is not None and not loop.is_running() and not loop.is_closed():
        with contextlib.suppress(Exception):
            loop.close()
    if loop is not None:
        with contextlib.suppress(Exception):
            policy.set_event_loop(None)


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    _load_settings_cached.cache_clear()
    yield
    _load_settings_cached.cache_clear()


def seed_user(store: SqliteStore, user: User) -> None:
    store.execute(
        "INSERT INTO users (id, name, email, created_at) VALUES (?, ?, ?, ?)",
        (user.id, user.name, user.email, utc_now().isoformat()),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        storage=StorageSettings(sqlite_path=str(tmp_path / "focus.sqlite"), sqlite_wal=False)
    )


@pytest.fixture
def context(settings: Settings) -> Iterator[AppContext]:
    ctx = build_app_context(settings)
    seed_user(ctx.store, ALICE)
    seed_user(ctx.store, BOB)
    yield ctx
    ctx.store.close()


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqliteStore]:
    db = SqliteStore(str(tmp_path / "ledger.sqlite"), wal=False)
    seed_user(db, ALICE)
    seed_user(db, BOB)
    yield db
    db.close()


@pytest.fixture
def issue_token(context: AppContext) -> Callable[..., str]:
    """Insert an API token row and return its secret."""

    def _issue(user_id: str = ALICE.id, name: str = "Claude") -> str:
        secret = TOKEN_PREFIX + secrets.token_hex(24)
        context.store.execute(
            """
            INSERT INTO api_tokens (id, token_hash, user_id, name, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (str(uuid.uuid4()), sha256_text(secret), user_id, name, utc_now().isoformat()),
        )
        return secret

    return _issue


@pytest.fixture
def issue_session(context: AppContext) -> Callable[..., str]:
    """Insert a browser session row and return the cookie value."""

    def _issue(user_id: str = ALICE.id, ttl: timedelta = timedelta(days=1)) -> str:
        token = secrets.token_urlsafe(16)
        now = utc_now()
        context.store.execute(
            """
            INSERT INTO sessions (id, token, user_id, expires_at, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (str(uuid.uuid4()), token, user_id, (now + ttl).isoformat(), now.isoformat()),
        )
        return token

    return _issue


@pytest.fixture
def user_principal() -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(user=ALICE, actor_kind="user")


@pytest.fixture
def agent_principal() -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(user=ALICE, actor_kind="agent", token_label="Claude")


@pytest.fixture
def bob_principal() -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(user=BOB, actor_kind="user")
