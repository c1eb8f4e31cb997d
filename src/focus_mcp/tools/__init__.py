"""Tool registration helpers.

Fifteen tools are registered:
- tasks: focus_list_tasks, focus_create_task, focus_update_task,
  focus_delete_task, focus_add_task_comment
- projects: focus_list_projects, focus_create_project, focus_update_project,
  focus_delete_project
- goals: focus_list_goals, focus_create_goal, focus_update_goal, focus_delete_goal
- activity feed: focus_list_actions, focus_mark_actions_read
"""

from __future__ import annotations

from focus_mcp.audit.ledger import ActionLedger
from focus_mcp.domain.storage import DomainStorage
from focus_mcp.mcp_runtime import ToolSpec
from focus_mcp.tools.actions import build_action_tools
from focus_mcp.tools.base import dispatch_tool
from focus_mcp.tools.goals import build_goal_tools
from focus_mcp.tools.projects import build_project_tools
from focus_mcp.tools.tasks import build_task_tools

__all__ = ["dispatch_tool", "get_tool_registry", "get_tool_specs"]


def get_tool_specs(
    storage: DomainStorage,
    ledger: ActionLedger,
    default_limit: int = 50,
) -> list[ToolSpec]:
    return [
        *build_task_tools(storage),
        *build_project_tools(storage),
        *build_goal_tools(storage),
        *build_action_tools(ledger, default_limit=default_limit),
    ]


def get_tool_registry(
    storage: DomainStorage,
    ledger: ActionLedger,
    default_limit: int = 50,
) -> dict[str, ToolSpec]:
    return {tool.name: tool for tool in get_tool_specs(storage, ledger, default_limit)}
