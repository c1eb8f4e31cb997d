"""Activity feed tools."""

from __future__ import annotations

from typing import Any

from focus_mcp.audit.ledger import ActionLedger
from focus_mcp.audit.models import ActionQuery
from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools._schemas import LIST_ACTIONS_SCHEMA, MARK_ACTIONS_READ_SCHEMA


def build_action_tools(ledger: ActionLedger, default_limit: int = 50) -> list[ToolSpec]:
    async def list_actions(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        actor_kind = args.get("actorType")
        records = await ledger.query(
            ActionQuery(
                user_id=principal.user_id,
                actor_kind=actor_kind,
                entity_type=args.get("entityType"),
                entity_id=args.get("entityId"),
                is_read=args.get("isRead"),
                # actorType=user implies includeOwn.
                include_own=actor_kind == "user",
                limit=args.get("limit", default_limit),
            )
        )
        return {"actions": [record.to_dict() for record in records]}

    async def mark_read(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        ids = list(args["ids"])
        await ledger.mark_read(ids)
        return {"markedCount": len(ids)}

    return [
        ToolSpec(
            name="focus_list_actions",
            description=(
                "List recent changes to the user's tasks, projects and goals, newest first. "
                "The user's own manual edits are hidden unless actorType is 'user'."
            ),
            input_schema=LIST_ACTIONS_SCHEMA,
            handler=list_actions,
        ),
        ToolSpec(
            name="focus_mark_actions_read",
            description="Mark activity entries as read by id.",
            input_schema=MARK_ACTIONS_READ_SCHEMA,
            handler=mark_read,
        ),
    ]
