"""Task, project and goal endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from focus_mcp.api._common import (
    api_endpoint,
    app_context,
    json_ok,
    parse_body,
    principal_of,
    validate_model,
)
from focus_mcp.domain.models import DEFAULT_GOAL_COLOR, DEFAULT_PROJECT_COLOR, TaskFilters
from focus_mcp.tools._schemas import HEX_COLOR_PATTERN

PriorityField = Literal["p1", "p2", "p3", "p4"]
StatusField = Literal["todo", "in_progress", "review", "done"]


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class CommentBody(_Body):
    id: str | None = None
    content: str = Field(min_length=1, max_length=5000)
    posted_at: str | None = Field(default=None, alias="postedAt")


class TaskCreateBody(_Body):
    title: str = Field(min_length=1, max_length=200)
    priority: PriorityField = "p4"
    description: str | None = Field(default=None, max_length=1000)
    status: StatusField = "todo"
    completed: bool = False
    project_id: str | None = Field(default=None, alias="projectId")
    due_date: str | None = Field(default=None, alias="dueDate")
    plan_date: str | None = Field(default=None, alias="planDate")
    comments: list[CommentBody] = Field(default_factory=list)


class TaskUpdateBody(_Body):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    priority: PriorityField | None = None
    description: str | None = Field(default=None, max_length=1000)
    status: StatusField | None = None
    completed: bool | None = None
    project_id: str | None = Field(default=None, alias="projectId")
    due_date: str | None = Field(default=None, alias="dueDate")
    plan_date: str | None = Field(default=None, alias="planDate")
    comments: list[CommentBody] | None = None


class TaskListParams(_Body):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    priority: str | None = None
    status: str | None = None
    completed: bool | None = None
    project_id: str | None = Field(default=None, alias="projectId")
    due_date: str | None = Field(default=None, alias="dueDate")
    plan_date: str | None = Field(default=None, alias="planDate")
    search: str | None = None
    limit: int | None = Field(default=None, ge=1, le=500)


class ProjectCreateBody(_Body):
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(default=DEFAULT_PROJECT_COLOR, pattern=HEX_COLOR_PATTERN)
    description: str | None = Field(default=None, max_length=1000)
    is_favorite: bool = Field(default=False, alias="isFavorite")
    parent_id: str | None = Field(default=None, alias="parentId")
    parent_type: Literal["goal", "project"] | None = Field(default=None, alias="parentType")
    view_type: Literal["list", "board"] = Field(default="list", alias="viewType")


class ProjectUpdateBody(_Body):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    description: str | None = Field(default=None, max_length=1000)
    is_favorite: bool | None = Field(default=None, alias="isFavorite")
    parent_id: str | None = Field(default=None, alias="parentId")
    parent_type: Literal["goal", "project"] | None = Field(default=None, alias="parentType")
    view_type: Literal["list", "board"] | None = Field(default=None, alias="viewType")


class GoalCreateBody(_Body):
    name: str = Field(min_length=1, max_length=100)
    priority: PriorityField = "p4"
    color: str = Field(default=DEFAULT_GOAL_COLOR, pattern=HEX_COLOR_PATTERN)
    description: str | None = Field(default=None, max_length=1000)
    due_date: str | None = Field(default=None, alias="dueDate")


class GoalUpdateBody(_Body):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    priority: PriorityField | None = None
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    description: str | None = Field(default=None, max_length=1000)
    due_date: str | None = Field(default=None, alias="dueDate")


def _split_csv(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


# --- Tasks ---


@api_endpoint
async def list_tasks(request: Request) -> Response:
    params = validate_model(TaskListParams, dict(request.query_params))
    tasks = await app_context(request).storage.search_tasks(
        principal_of(request).user_id,
        TaskFilters(
            priority=_split_csv(params.priority),
            status=_split_csv(params.status),
            completed=params.completed,
            project_id=params.project_id,
            due_date=params.due_date,
            plan_date=params.plan_date,
            search=params.search,
            limit=params.limit,
        ),
    )
    return json_ok({"tasks": [task.to_dict() for task in tasks]})


@api_endpoint
async def create_task(request: Request) -> Response:
    body = await parse_body(request, TaskCreateBody)
    task = await app_context(request).storage.create_task(
        principal_of(request),
        title=body.title,
        priority=body.priority,
        description=body.description,
        status=body.status,
        completed=body.completed,
        project_id=body.project_id,
        due_date=body.due_date,
        plan_date=body.plan_date,
        comments=[comment.model_dump(by_alias=True) for comment in body.comments],
    )
    return json_ok(task.to_dict(), status_code=201)


@api_endpoint
async def update_task(request: Request) -> Response:
    body = await parse_body(request, TaskUpdateBody)
    storage = app_context(request).storage
    principal = principal_of(request)
    task_id = request.path_params["task_id"]

    updates = body.model_dump(exclude_unset=True, exclude={"comments"})
    task = await storage.update_task(principal, task_id, updates)
    if body.comments is not None:
        await storage.sync_comments(
            principal,
            task_id,
            [comment.model_dump(by_alias=True) for comment in body.comments],
        )
        task = await storage.get_task(principal.user_id, task_id)
    return json_ok(task.to_dict())


@api_endpoint
async def delete_task(request: Request) -> Response:
    task_id = request.path_params["task_id"]
    await app_context(request).storage.delete_task(principal_of(request), task_id)
    return json_ok({"success": True, "id": task_id})


# --- Projects ---


@api_endpoint
async def list_projects(request: Request) -> Response:
    projects = await app_context(request).storage.list_projects(principal_of(request).user_id)
    return json_ok({"projects": [project.to_dict() for project in projects]})


@api_endpoint
async def create_project(request: Request) -> Response:
    body = await parse_body(request, ProjectCreateBody)
    project = await app_context(request).storage.create_project(
        principal_of(request), **body.model_dump()
    )
    return json_ok(project.to_dict(), status_code=201)


@api_endpoint
async def update_project(request: Request) -> Response:
    body = await parse_body(request, ProjectUpdateBody)
    project = await app_context(request).storage.update_project(
        principal_of(request),
        request.path_params["project_id"],
        body.model_dump(exclude_unset=True),
    )
    return json_ok(project.to_dict())


@api_endpoint
async def delete_project(request: Request) -> Response:
    project_id = request.path_params["project_id"]
    await app_context(request).storage.delete_project(principal_of(request), project_id)
    return json_ok({"success": True, "id": project_id})


# --- Goals ---


@api_endpoint
async def list_goals(request: Request) -> Response:
    goals = await app_context(request).storage.list_goals(principal_of(request).user_id)
    return json_ok({"goals": [goal.to_dict() for goal in goals]})


@api_endpoint
async def create_goal(request: Request) -> Response:
    body = await parse_body(request, GoalCreateBody)
    goal = await app_context(request).storage.create_goal(
        principal_of(request), **body.model_dump()
    )
    return json_ok(goal.to_dict(), status_code=201)


@api_endpoint
async def update_goal(request: Request) -> Response:
    body = await parse_body(request, GoalUpdateBody)
    goal = await app_context(request).storage.update_goal(
        principal_of(request),
        request.path_params["goal_id"],
        body.model_dump(exclude_unset=True),
    )
    return json_ok(goal.to_dict())


@api_endpoint
async def delete_goal(request: Request) -> Response:
    goal_id = request.path_params["goal_id"]
    await app_context(request).storage.delete_goal(principal_of(request), goal_id)
    return json_ok({"success": True, "id": goal_id})


routes = [
    Route("/api/tasks", endpoint=list_tasks, methods=["GET"]),
    Route("/api/tasks", endpoint=create_task, methods=["POST"]),
    Route("/api/tasks/{task_id}", endpoint=update_task, methods=["PATCH"]),
    Route("/api/tasks/{task_id}", endpoint=delete_task, methods=["DELETE"]),
    Route("/api/projects", endpoint=list_projects, methods=["GET"]),
    Route("/api/projects", endpoint=create_project, methods=["POST"]),
    Route("/api/projects/{project_id}", endpoint=update_project, methods=["PATCH"]),
    Route("/api/projects/{project_id}", endpoint=delete_project, methods=["DELETE"]),
    Route("/api/goals", endpoint=list_goals, methods=["GET"]),
    Route("/api/goals", endpoint=create_goal, methods=["POST"]),
    Route("/api/goals/{goal_id}", endpoint=update_goal, methods=["PATCH"]),
    Route("/api/goals/{goal_id}", endpoint=delete_goal, methods=["DELETE"]),
]
