"""Task tools."""

from __future__ import annotations

from typing import Any

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.domain.models import TaskFilters
from focus_mcp.domain.storage import DomainStorage
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools._helpers import to_updates
from focus_mcp.tools._schemas import (
    ADD_COMMENT_SCHEMA,
    CREATE_TASK_SCHEMA,
    ID_ONLY_SCHEMA,
    LIST_TASKS_SCHEMA,
    UPDATE_TASK_SCHEMA,
)

TASK_UPDATE_FIELDS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "completed": "completed",
    "status": "status",
    "projectId": "project_id",
    "dueDate": "due_date",
    "planDate": "plan_date",
}


def build_task_tools(storage: DomainStorage) -> list[ToolSpec]:
    async def list_tasks(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        filters = TaskFilters(
            priority=args.get("priority"),
            status=args.get("status"),
            completed=args.get("completed"),
            project_id=args.get("projectId"),
            due_date=args.get("dueDate"),
            plan_date=args.get("planDate"),
            search=args.get("search"),
            limit=args.get("limit"),
        )
        tasks = await storage.search_tasks(principal.user_id, filters)
        return [task.to_dict() for task in tasks]

    async def create_task(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        task = await storage.create_task(
            principal,
            title=args["title"],
            priority=args["priority"],
            description=args.get("description"),
            status=args.get("status", "todo"),
            project_id=args.get("projectId"),
            due_date=args.get("dueDate"),
            plan_date=args.get("planDate"),
        )
        return task.to_dict()

    async def update_task(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        task = await storage.update_task(
            principal, args["id"], to_updates(args, TASK_UPDATE_FIELDS)
        )
        return task.to_dict()

    async def delete_task(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        await storage.delete_task(principal, args["id"])
        return {"id": args["id"], "deleted": True}

    async def add_comment(args: dict[str, Any], principal: AuthenticatedPrincipal) -> object:
        comment = await storage.add_comment(principal, args["taskId"], args["content"])
        return {"taskId": args["taskId"], **comment.to_dict()}

    return [
        ToolSpec(
            name="focus_list_tasks",
            description=(
                "List the user's tasks. All filters are optional and combined with AND. "
                "Use projectId='inbox' for tasks without a project."
            ),
            input_schema=LIST_TASKS_SCHEMA,
            handler=list_tasks,
        ),
        ToolSpec(
            name="focus_create_task",
            description="Create a task. Priority is required; status defaults to 'todo'.",
            input_schema=CREATE_TASK_SCHEMA,
            handler=create_task,
        ),
        ToolSpec(
            name="focus_update_task",
            description=(
                "Update a task by id. Only the fields you pass are changed. "
                "Set completed=true to complete a task."
            ),
            input_schema=UPDATE_TASK_SCHEMA,
            handler=update_task,
        ),
        ToolSpec(
            name="focus_delete_task",
            description="Delete a task by id.",
            input_schema=ID_ONLY_SCHEMA,
            handler=delete_task,
        ),
        ToolSpec(
            name="focus_add_task_comment",
            description="Add a comment to a task.",
            input_schema=ADD_COMMENT_SCHEMA,
            handler=add_comment,
        ),
    ]
