"""Append-only activity ledger with per-user read state."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from collections.abc import Sequence

from focus_mcp.audit.models import ActionQuery, ActionRecord
from focus_mcp.db import SqliteStore
from focus_mcp.utils.serialization import json_default

logger = logging.getLogger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 100

# A user's own manual actions are hidden from their feed; actions an agent
# took with that user's token are not.
_HIDE_OWN_MANUAL = "NOT (actor_id = ? AND actor_kind = 'user')"


def clamp_limit(limit: int | None, default: int = 50) -> int:
    if limit is None:
        return default
    return max(MIN_LIMIT, min(MAX_LIMIT, int(limit)))


class ActionLedger:
    """Reads and writes ``actions`` rows.

    ``insert`` is only meant to be called by :class:`ActionRecorder`; domain
    code records through the recorder so that a failing write never reaches
    the mutation that triggered it.
    """

    def __init__(self, store: SqliteStore) -> None:
        self._store = store

    async def insert(self, record: ActionRecord) -> None:
        await asyncio.to_thread(self.insert_sync, record)

    def insert_sync(self, record: ActionRecord) -> None:
        self._store.execute(
            """
            INSERT INTO actions (
                id, entity_id, entity_type, actor_id, actor_kind, action_kind,
                changes, metadata, is_read, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
            """,
            (
                record.id,
                record.entity_id,
                record.entity_type,
                record.actor_id,
                record.actor_kind,
                record.action_kind,
                _dump(record.changes),
                _dump(record.metadata),
                record.created_at,
            ),
        )

    async def query(self, query: ActionQuery) -> list[ActionRecord]:
        """Return matching records, newest first, at most ``query.limit`` of them."""
        clauses: list[str] = []
        params: list[object] = []

        if query.actor_kind is not None:
            clauses.append("actor_kind = ?")
            params.append(query.actor_kind)
        if not query.include_own:
            clauses.append(_HIDE_OWN_MANUAL)
            params.append(query.user_id)
        if query.is_read is not None:
            clauses.append("is_read = ?")
            params.append(1 if query.is_read else 0)
        if query.entity_type is not None:
            clauses.append("entity_type = ?")
            params.append(query.entity_type)
        if query.entity_id is not None:
            clauses.append("entity_id = ?")
            params.append(query.entity_id)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        sql = (
            f"SELECT * FROM actions {where} "
            "ORDER BY created_at DESC, rowid DESC LIMIT ?"
        )
        params.append(clamp_limit(query.limit))

        rows = await asyncio.to_thread(self._store.fetch_all, sql, params)
        return [_row_to_record(row) for row in rows]

    async def mark_read(self, ids: Sequence[str]) -> None:
        """Mark exactly *ids* as read. An empty sequence never touches the store."""
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return
        placeholders = ",".join("?" for _ in unique_ids)
        await asyncio.to_thread(
            self._store.execute,
            f"UPDATE actions SET is_read = 1 WHERE id IN ({placeholders})",
            unique_ids,
        )

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread record visible in *user_id*'s feed as read."""
        return await asyncio.to_thread(
            self._store.execute,
            f"UPDATE actions SET is_read = 1 WHERE is_read = 0 AND {_HIDE_OWN_MANUAL}",
            (user_id,),
        )

    async def unread_count(self, user_id: str) -> int:
        row = await asyncio.to_thread(
            self._store.fetch_one,
            f"SELECT COUNT(*) AS n FROM actions WHERE is_read = 0 AND {_HIDE_OWN_MANUAL}",
            (user_id,),
        )
        return int(row["n"]) if row is not None else 0


def _dump(value: dict[str, object] | None) -> str | None:
    if value is None:
        return None
    return json.dumps(value, default=json_default, ensure_ascii=False)


def _load(value: str | None) -> dict[str, object] | None:
    if value is None:
        return None
    try:
        loaded = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("Discarding undecodable ledger payload: %.80r", value)
        return None
    return loaded if isinstance(loaded, dict) else None


def _row_to_record(row: sqlite3.Row) -> ActionRecord:
    return ActionRecord(
        id=row["id"],
        entity_id=row["entity_id"],
        entity_type=row["entity_type"],
        actor_id=row["actor_id"],
        actor_kind=row["actor_kind"],
        action_kind=row["action_kind"],
        created_at=row["created_at"],
        changes=_load(row["changes"]),
        metadata=_load(row["metadata"]),
        is_read=bool(row["is_read"]),
    )
