"""Goal tools."""

from __future__ import annotations

from typing import Any

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.domain.storage import DomainStorage
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools._helpers import to_updates
from focus_mcp.tools._schemas import (
    CREATE_GOAL_SCHEMA,
    EMPTY_SCHEMA,
    ID_ONLY_SCHEMA,
    UPDATE_GOAL_SCHEMA,
)

GOAL_UPDATE_FIELDS = {
    "name": "name",
    "priority": "priority",
    "color": "color",
    "description": "description",
    "dueDate": "due_date",
}


def build_goal_tools(storage: DomainStorage) -> list[ToolSpec]:
    async def list_goals(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        return [goal.to_dict() for goal in await storage.list_goals(principal.user_id)]

    async def create_goal(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        goal = await storage.create_goal(
            principal,
            name=args["name"],
            priority=args["priority"],
            color=args["color"],
            description=args.get("description"),
            due_date=args.get("dueDate"),
        )
        return goal.to_dict()

    async def update_goal(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        goal = await storage.update_goal(
            principal, args["id"], to_updates(args, GOAL_UPDATE_FIELDS)
        )
        return goal.to_dict()

    async def delete_goal(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        await storage.delete_goal(principal, args["id"])
        return {"id": args["id"], "deleted": True}

    return [
        ToolSpec(
            name="focus_list_goals",
            description="List the user's goals, most urgent first.",
            input_schema=EMPTY_SCHEMA,
            handler=list_goals,
        ),
        ToolSpec(
            name="focus_create_goal",
            description="Create a goal.",
            input_schema=CREATE_GOAL_SCHEMA,
            handler=create_goal,
        ),
        ToolSpec(
            name="focus_update_goal",
            description="Update a goal by id. Only the fields you pass are changed.",
            input_schema=UPDATE_GOAL_SCHEMA,
            handler=update_goal,
        ),
        ToolSpec(
            name="focus_delete_goal",
            description="Delete a goal by id.",
            input_schema=ID_ONLY_SCHEMA,
            handler=delete_goal,
        ),
    ]
