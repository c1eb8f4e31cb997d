"""Project tools."""

from __future__ import annotations

from typing import Any

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.domain.storage import DomainStorage
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools._helpers import to_updates
from focus_mcp.tools._schemas import (
    CREATE_PROJECT_SCHEMA,
    EMPTY_SCHEMA,
    ID_ONLY_SCHEMA,
    UPDATE_PROJECT_SCHEMA,
)

PROJECT_UPDATE_FIELDS = {
    "name": "name",
    "color": "color",
    "description": "description",
    "isFavorite": "is_favorite",
    "viewType": "view_type",
}


def build_project_tools(storage: DomainStorage) -> list[ToolSpec]:
    async def list_projects(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        return [project.to_dict() for project in await storage.list_projects(principal.user_id)]

    async def create_project(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        project = await storage.create_project(
            principal,
            name=args["name"],
            color=args["color"],
            description=args.get("description"),
            is_favorite=args.get("isFavorite", False),
            parent_id=args.get("parentId"),
            parent_type=args.get("parentType"),
            view_type=args.get("viewType", "list"),
        )
        return project.to_dict()

    async def update_project(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        project = await storage.update_project(
            principal, args["id"], to_updates(args, PROJECT_UPDATE_FIELDS)
        )
        return project.to_dict()

    async def delete_project(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        await storage.delete_project(principal, args["id"])
        return {"id": args["id"], "deleted": True}

    return [
        ToolSpec(
            name="focus_list_projects",
            description="List the user's projects.",
            input_schema=EMPTY_SCHEMA,
            handler=list_projects,
        ),
        ToolSpec(
            name="focus_create_project",
            description="Create a project. It can be nested under a goal or another project.",
            input_schema=CREATE_PROJECT_SCHEMA,
            handler=create_project,
        ),
        ToolSpec(
            name="focus_update_project",
            description="Update a project by id. Only the fields you pass are changed.",
            input_schema=UPDATE_PROJECT_SCHEMA,
            handler=update_project,
        ),
        ToolSpec(
            name="focus_delete_project",
            description="Delete a project by id. The project's tasks are deleted too.",
            input_schema=ID_ONLY_SCHEMA,
            handler=delete_project,
        ),
    ]
