"""JSON Schema definitions for the Focus tools."""

from __future__ import annotations

from focus_mcp.audit.models import ENTITY_TYPES
from focus_mcp.domain.models import PARENT_TYPES, PRIORITIES, TASK_STATUSES, VIEW_TYPES

HEX_COLOR_PATTERN = "^#[0-9A-Fa-f]{6}$"

_ID = {"type": "string", "format": "uuid"}
_NULLABLE_ID = {"type": ["string", "null"], "format": "uuid"}
_PRIORITY = {
    "type": "string",
    "enum": list(PRIORITIES),
    "description": "p1 is the most urgent, p4 the least.",
}
_STATUS = {"type": "string", "enum": list(TASK_STATUSES)}
_TITLE = {"type": "string", "minLength": 1, "maxLength": 200}
_NAME = {"type": "string", "minLength": 1, "maxLength": 100}
_DESCRIPTION = {"type": "string", "maxLength": 1000}
_COLOR = {"type": "string", "pattern": HEX_COLOR_PATTERN, "description": "Hex color, e.g. #FF5733."}
_DATETIME = {
    "type": "string",
    "format": "date-time",
    "description": "ISO-8601 timestamp, e.g. 2025-01-31T09:00:00Z.",
}
_NULLABLE_DATETIME = {
    "type": ["string", "null"],
    "format": "date-time",
    "description": "ISO-8601 timestamp, or null to clear.",
}
_DATE_FILTER = {
    "type": "string",
    "minLength": 1,
    "description": "'today', 'overdue', 'upcoming' or a day as YYYY-MM-DD.",
}

EMPTY_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {},
    "additionalProperties": False,
}

ID_ONLY_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {"id": _ID},
    "required": ["id"],
    "additionalProperties": False,
}

LIST_TASKS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "priority": {"type": "array", "items": _PRIORITY, "uniqueItems": True},
        "status": {"type": "array", "items": _STATUS, "uniqueItems": True},
        "completed": {"type": "boolean"},
        "projectId": {
            "type": "string",
            "minLength": 1,
            "description": "Project id, or 'inbox' for tasks without a project.",
        },
        "dueDate": _DATE_FILTER,
        "planDate": _DATE_FILTER,
        "search": {
            "type": "string",
            "minLength": 1,
            "maxLength": 200,
            "description": "Case-insensitive match on title or description.",
        },
        "limit": {"type": "integer", "minimum": 1, "maximum": 200},
    },
    "additionalProperties": False,
}

CREATE_TASK_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": _TITLE,
        "priority": _PRIORITY,
        "description": _DESCRIPTION,
        "projectId": _ID,
        "dueDate": _DATETIME,
        "planDate": _DATETIME,
        "status": _STATUS,
    },
    "required": ["title", "priority"],
    "additionalProperties": False,
}

UPDATE_TASK_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "id": _ID,
        "title": _TITLE,
        "priority": _PRIORITY,
        "description": _DESCRIPTION,
        "completed": {"type": "boolean"},
        "status": _STATUS,
        "projectId": _NULLABLE_ID,
        "dueDate": _NULLABLE_DATETIME,
        "planDate": _NULLABLE_DATETIME,
    },
    "required": ["id"],
    "additionalProperties": False,
}

ADD_COMMENT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "taskId": _ID,
        "content": {"type": "string", "minLength": 1, "maxLength": 5000},
    },
    "required": ["taskId", "content"],
    "additionalProperties": False,
}

CREATE_PROJECT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": _NAME,
        "color": _COLOR,
        "description": _DESCRIPTION,
        "isFavorite": {"type": "boolean"},
        "parentId": _ID,
        "parentType": {"type": "string", "enum": list(PARENT_TYPES)},
        "viewType": {"type": "string", "enum": list(VIEW_TYPES)},
    },
    "required": ["name", "color"],
    "additionalProperties": False,
}

UPDATE_PROJECT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "id": _ID,
        "name": _NAME,
        "color": _COLOR,
        "description": _DESCRIPTION,
        "isFavorite": {"type": "boolean"},
        "viewType": {"type": "string", "enum": list(VIEW_TYPES)},
    },
    "required": ["id"],
    "additionalProperties": False,
}

CREATE_GOAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": _NAME,
        "priority": _PRIORITY,
        "color": _COLOR,
        "description": _DESCRIPTION,
        "dueDate": _DATETIME,
    },
    "required": ["name", "priority", "color"],
    "additionalProperties": False,
}

UPDATE_GOAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "id": _ID,
        "name": _NAME,
        "priority": _PRIORITY,
        "color": _COLOR,
        "description": _DESCRIPTION,
        "dueDate": _NULLABLE_DATETIME,
    },
    "required": ["id"],
    "additionalProperties": False,
}

LIST_ACTIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "actorType": {
            "type": "string",
            "enum": ["user", "agent"],
            "description": "'user' also includes your own manual changes.",
        },
        "entityType": {"type": "string", "enum": list(ENTITY_TYPES)},
        "entityId": {"type": "string", "minLength": 1},
        "isRead": {"type": "boolean"},
        "limit": {"type": "integer", "minimum": 1, "maximum": 100, "default": 50},
    },
    "additionalProperties": False,
}

MARK_ACTIONS_READ_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "ids": {"type": "array", "items": _ID, "maxItems": 500},
    },
    "required": ["ids"],
    "additionalProperties": False,
}
