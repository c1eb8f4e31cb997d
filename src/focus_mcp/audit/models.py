"""Data models for activity-ledger records."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

from focus_mcp.utils.time import utc_now_iso

EntityType = Literal["task", "project", "goal"]
ActorKind = Literal["user", "agent", "system"]
ActionKind = Literal["create", "update", "delete", "complete", "uncomplete"]

ENTITY_TYPES: tuple[str, ...] = ("task", "project", "goal")
ACTOR_KINDS: tuple[str, ...] = ("user", "agent", "system")
ACTION_KINDS: tuple[str, ...] = ("create", "update", "delete", "complete", "uncomplete")


@dataclass(frozen=True)
class ActionRecord:
    """One ledger entry. Immutable apart from ``is_read`` in storage."""

    id: str
    entity_id: str
    entity_type: EntityType
    actor_id: str
    actor_kind: ActorKind
    action_kind: ActionKind
    created_at: str
    changes: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    is_read: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "entityId": self.entity_id,
            "entityType": self.entity_type,
            "actorId": self.actor_id,
            "actorType": self.actor_kind,
            "actionType": self.action_kind,
            "changes": self.changes,
            "metadata": self.metadata,
            "isRead": self.is_read,
            "createdAt": self.created_at,
        }


@dataclass
class ActionRecordInput:
    entity_id: str
    entity_type: EntityType
    actor_id: str
    action_kind: ActionKind
    actor_kind: ActorKind = "user"
    changes: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    id: str | None = None
    created_at: str | None = None

    def to_record(self) -> ActionRecord:
        """Fill in the id, timestamp and read flag the ledger owns."""
        return ActionRecord(
            id=self.id or str(uuid.uuid4()),
            entity_id=self.entity_id,
            entity_type=self.entity_type,
            actor_id=self.actor_id,
            actor_kind=self.actor_kind,
            action_kind=self.action_kind,
            created_at=self.created_at or utc_now_iso(),
            changes=self.changes,
            metadata=self.metadata,
            is_read=False,
        )


@dataclass
class ActionQuery:
    user_id: str
    actor_kind: ActorKind | None = None
    entity_type: EntityType | None = None
    entity_id: str | None = None
    is_read: bool | None = None
    include_own: bool = False
    limit: int = 50


@dataclass
class RecorderStats:
    enqueued: int = 0
    written: int = 0
    failed: int = 0
    dropped: int = 0
    pending: int = field(default=0, compare=False)

    def to_dict(self) -> dict[str, int]:
        return {
            "enqueued": self.enqueued,
            "written": self.written,
            "failed": self.failed,
            "dropped": self.dropped,
            "pending": self.pending,
        }
