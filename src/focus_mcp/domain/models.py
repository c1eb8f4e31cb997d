"""Domain entities for tasks, projects, goals and API tokens."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Priority = Literal["p1", "p2", "p3", "p4"]
TaskStatus = Literal["todo", "in_progress", "review", "done"]
ViewType = Literal["list", "board"]
ParentType = Literal["goal", "project"]

PRIORITIES: tuple[str, ...] = ("p1", "p2", "p3", "p4")
TASK_STATUSES: tuple[str, ...] = ("todo", "in_progress", "review", "done")
VIEW_TYPES: tuple[str, ...] = ("list", "board")
PARENT_TYPES: tuple[str, ...] = ("goal", "project")

DEFAULT_PROJECT_COLOR = "#808080"
DEFAULT_GOAL_COLOR = "#4A90D9"


class EntityNotFoundError(LookupError):
    """The entity does not exist or is not owned by the acting user."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(f"{entity_type.capitalize()} not found: {entity_id}")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DomainValidationError(ValueError):
    """A field value that the schema accepts but the domain cannot use."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass
class Comment:
    id: str
    content: str
    posted_at: str

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "content": self.content, "postedAt": self.posted_at}


@dataclass
class Task:
    id: str
    user_id: str
    title: str
    priority: Priority
    created_at: str
    updated_at: str
    description: str | None = None
    completed: bool = False
    status: TaskStatus = "todo"
    project_id: str | None = None
    due_date: str | None = None
    plan_date: str | None = None
    comments: list[Comment] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "status": self.status,
            "priority": self.priority,
            "projectId": self.project_id,
            "dueDate": self.due_date,
            "planDate": self.plan_date,
            "comments": [comment.to_dict() for comment in self.comments],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Project:
    id: str
    user_id: str
    name: str
    color: str
    created_at: str
    updated_at: str
    description: str | None = None
    is_favorite: bool = False
    parent_id: str | None = None
    parent_type: ParentType | None = None
    view_type: ViewType = "list"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "description": self.description,
            "isFavorite": self.is_favorite,
            "parentId": self.parent_id,
            "parentType": self.parent_type,
            "viewType": self.view_type,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Goal:
    id: str
    user_id: str
    name: str
    priority: Priority
    color: str
    created_at: str
    updated_at: str
    description: str | None = None
    due_date: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "priority": self.priority,
            "color": self.color,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class ApiToken:
    """A stored API token. Only the hash of the secret is persisted."""

    id: str
    user_id: str
    name: str
    created_at: str

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "name": self.name, "createdAt": self.created_at}


@dataclass(frozen=True)
class IssuedToken:
    """A freshly created token together with its secret, shown once."""

    token: ApiToken
    secret: str

    def to_dict(self) -> dict[str, object]:
        return {**self.token.to_dict(), "token": self.secret}


@dataclass
class TaskFilters:
    """Conjunctive task search filters.

    ``project_id="inbox"`` selects tasks without a project. Date filters accept
    ``today``, ``overdue``, ``upcoming`` or an ISO day (``YYYY-MM-DD``).
    """

    priority: list[str] | None = None
    status: list[str] | None = None
    completed: bool | None = None
    project_id: str | None = None
    due_date: str | None = None
    plan_date: str | None = None
    search: str | None = None
    limit: int | None = None
