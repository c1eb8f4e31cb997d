"""Application context assembly."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache, partial

from focus_mcp.audit.interceptor import MutationLog
from focus_mcp.audit.ledger import ActionLedger
from focus_mcp.audit.recorder import ActionRecorder
from focus_mcp.auth.resolver import ActorResolver, SqliteSessionProvider
from focus_mcp.config import Settings, load_settings
from focus_mcp.db import SqliteStore
from focus_mcp.domain.storage import DomainStorage
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools import get_tool_registry
from focus_mcp.transport.mcp_handler import McpTransport
from focus_mcp.transport.session_router import SessionRouter, build_session_store


@dataclass
class AppContext:
    """Application-wide dependency container.

    Built once at startup. Tests build their own with ``build_app_context``.
    """

    settings: Settings
    store: SqliteStore
    ledger: ActionLedger
    recorder: ActionRecorder
    storage: DomainStorage
    sessions: SqliteSessionProvider
    resolver: ActorResolver
    tools: dict[str, ToolSpec]
    router: SessionRouter


def build_app_context(settings: Settings) -> AppContext:
    store = SqliteStore(settings.storage.sqlite_path, wal=settings.storage.sqlite_wal)
    ledger = ActionLedger(store)
    recorder = ActionRecorder(ledger, queue_size=settings.ledger.queue_size)
    storage = DomainStorage(store, MutationLog(recorder))
    sessions = SqliteSessionProvider(store, settings.auth.session_cookie_name)
    resolver = ActorResolver(sessions, token_store=storage, user_store=storage)
    tools = get_tool_registry(storage, ledger, default_limit=settings.ledger.default_limit)

    transport_factory = partial(
        McpTransport,
        tools=tools,
        instructions=settings.server.instructions,
        idle_timeout_seconds=settings.sessions.idle_timeout_seconds,
    )
    router = SessionRouter(
        build_session_store(settings.sessions),
        transport_factory,
        allowed_origins=settings.server.http_allowed_origins,
        allow_missing_origin=settings.server.http_allow_missing_origin,
    )

    return AppContext(
        settings=settings,
        store=store,
        ledger=ledger,
        recorder=recorder,
        storage=storage,
        sessions=sessions,
        resolver=resolver,
        tools=tools,
        router=router,
    )


@lru_cache(maxsize=1)
def get_app_context() -> AppContext:
    """Get or create the process-wide application context."""
    return build_app_context(load_settings())
