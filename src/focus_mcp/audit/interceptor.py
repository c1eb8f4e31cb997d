"""Turns successful domain mutations into ledger entries."""

from __future__ import annotations

import logging
from typing import Any

from focus_mcp.audit.models import ActionKind, ActionRecordInput, EntityType
from focus_mcp.audit.recorder import ActionRecorder
from focus_mcp.auth.principal import AuthenticatedPrincipal

logger = logging.getLogger(__name__)

# Field holding the human-readable label of each entity type.
LABEL_FIELDS: dict[str, str] = {"task": "title", "project": "name", "goal": "name"}


def update_action_kind(entity_type: EntityType, completed: bool | None) -> ActionKind:
    """Pick the action kind for an update from the requested ``completed`` value."""
    if entity_type == "task":
        if completed is True:
            return "complete"
        if completed is False:
            return "uncomplete"
    return "update"


class MutationLog:
    """
    Called by storage after each write has succeeded.

    Labels passed in are read from the entity at logging time (after an
    update, before a delete), so an entry shows the entity's name as of that
    moment and not the name it had when first created.
    """

    def __init__(self, recorder: ActionRecorder) -> None:
        self._recorder = recorder

    def created(
        self,
        principal: AuthenticatedPrincipal,
        entity_type: EntityType,
        entity_id: str,
        label: str,
    ) -> None:
        field = LABEL_FIELDS[entity_type]
        self._emit(
            principal,
            entity_type,
            entity_id,
            "create",
            changes={field: label},
            label=label,
        )

    def updated(
        self,
        principal: AuthenticatedPrincipal,
        entity_type: EntityType,
        entity_id: str,
        changes: dict[str, Any],
        label: str | None,
        completed: bool | None = None,
    ) -> None:
        self._emit(
            principal,
            entity_type,
            entity_id,
            update_action_kind(entity_type, completed),
            changes=changes,
            label=label,
        )

    def deleted(
        self,
        principal: AuthenticatedPrincipal,
        entity_type: EntityType,
        entity_id: str,
        label: str | None,
    ) -> None:
        self._emit(principal, entity_type, entity_id, "delete", changes=None, label=label)

    def comment_added(
        self,
        principal: AuthenticatedPrincipal,
        task_id: str,
        comment_id: str,
        task_title: str | None,
    ) -> None:
        self._emit(
            principal,
            "task",
            task_id,
            "update",
            changes={"comments": "added"},
            label=task_title,
            extra={"commentId": comment_id},
        )

    def _emit(
        self,
        principal: AuthenticatedPrincipal,
        entity_type: EntityType,
        entity_id: str,
        action_kind: ActionKind,
        *,
        changes: dict[str, Any] | None,
        label: str | None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        metadata: dict[str, Any] = dict(extra or {})
        if label is not None:
            metadata[LABEL_FIELDS[entity_type]] = label
        if principal.token_label:
            metadata["tokenName"] = principal.token_label

        logger.debug(
            "Logging %s %s %s by %s:%s",
            action_kind,
            entity_type,
            entity_id,
            principal.actor_kind,
            principal.user_id,
        )
        self._recorder.record(
            ActionRecordInput(
                entity_id=entity_id,
                entity_type=entity_type,
                actor_id=principal.user_id,
                actor_kind=principal.actor_kind,
                action_kind=action_kind,
                changes=changes,
                metadata=metadata or None,
            )
        )
