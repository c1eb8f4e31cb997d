"""SQLite-backed storage for users, tokens, tasks, projects and goals.

Every mutating method takes the acting principal, is scoped to that
principal's user, and reports to :class:`MutationLog` only after the write
has been committed. SQL runs on a worker thread; logging happens back on the
event loop.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import sqlite3
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable

from focus_mcp.audit.interceptor import LABEL_FIELDS, MutationLog
from focus_mcp.audit.models import EntityType
from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.db import SqliteStore
from focus_mcp.domain.models import (
    DEFAULT_GOAL_COLOR,
    DEFAULT_PROJECT_COLOR,
    ApiToken,
    Comment,
    DomainValidationError,
    EntityNotFoundError,
    Goal,
    IssuedToken,
    Project,
    Task,
    TaskFilters,
    User,
)
from focus_mcp.utils.hashing import sha256_text
from focus_mcp.utils.time import day_bounds, normalize_timestamp, parse_day, utc_now, utc_now_iso

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "focus_"


@dataclass(frozen=True)
class _Field:
    column: str
    change_key: str
    kind: str = "text"  # text | bool | timestamp
    nullable: bool = True


TASK_FIELDS: dict[str, _Field] = {
    "title": _Field("title", "title", nullable=False),
    "description": _Field("description", "description"),
    "completed": _Field("completed", "completed", "bool", nullable=False),
    "status": _Field("status", "status", nullable=False),
    "priority": _Field("priority", "priority", nullable=False),
    "project_id": _Field("project_id", "projectId"),
    "due_date": _Field("due_date", "dueDate", "timestamp"),
    "plan_date": _Field("plan_date", "planDate", "timestamp"),
}

PROJECT_FIELDS: dict[str, _Field] = {
    "name": _Field("name", "name", nullable=False),
    "color": _Field("color", "color", nullable=False),
    "description": _Field("description", "description"),
    "is_favorite": _Field("is_favorite", "isFavorite", "bool", nullable=False),
    "parent_id": _Field("parent_id", "parentId"),
    "parent_type": _Field("parent_type", "parentType"),
    "view_type": _Field("view_type", "viewType", nullable=False),
}

GOAL_FIELDS: dict[str, _Field] = {
    "name": _Field("name", "name", nullable=False),
    "description": _Field("description", "description"),
    "priority": _Field("priority", "priority", nullable=False),
    "color": _Field("color", "color", nullable=False),
    "due_date": _Field("due_date", "dueDate", "timestamp"),
}

_TABLES: dict[str, str] = {"task": "tasks", "project": "projects", "goal": "goals"}


class DomainStorage:
    def __init__(self, store: SqliteStore, mutation_log: MutationLog) -> None:
        self._store = store
        self._log = mutation_log

    # ------------------------------------------------------------------
    # Users and tokens
    # ------------------------------------------------------------------

    async def get_user(self, user_id: str) -> User | None:
        row = await asyncio.to_thread(
            self._store.fetch_one, "SELECT * FROM users WHERE id = ?", (user_id,)
        )
        return _row_to_user(row) if row is not None else None

    async def upsert_user(self, user: User) -> User:
        await asyncio.to_thread(
            self._store.execute,
            """
            INSERT INTO users (id, name, email, created_at) VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET name = excluded.name, email = excluded.email
            """,
            (user.id, user.name, user.email, utc_now_iso()),
        )
        return user

    async def create_api_token(self, user_id: str, name: str) -> IssuedToken:
        """Create a token. The secret is returned here and never again."""
        secret = TOKEN_PREFIX + secrets.token_hex(24)
        token = ApiToken(
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            created_at=utc_now_iso(),
        )
        await asyncio.to_thread(
            self._store.execute,
            """
            INSERT INTO api_tokens (id, token_hash, user_id, name, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (token.id, sha256_text(secret), token.user_id, token.name, token.created_at),
        )
        logger.info("Created API token %s (%s) for user %s", token.id, token.name, user_id)
        return IssuedToken(token=token, secret=secret)

    async def list_api_tokens(self, user_id: str) -> list[ApiToken]:
        rows = await asyncio.to_thread(
            self._store.fetch_all,
            "SELECT * FROM api_tokens WHERE user_id = ? ORDER BY created_at DESC",
            (user_id,),
        )
        return [_row_to_token(row) for row in rows]

    async def delete_api_token(self, user_id: str, token_id: str) -> None:
        deleted = await asyncio.to_thread(
            self._store.execute,
            "DELETE FROM api_tokens WHERE id = ? AND user_id = ?",
            (token_id, user_id),
        )
        if not deleted:
            raise EntityNotFoundError("token", token_id)
        logger.info("Revoked API token %s for user %s", token_id, user_id)

    async def find_by_token(self, token: str) -> ApiToken | None:
        if not token.startswith(TOKEN_PREFIX):
            return None
        row = await asyncio.to_thread(
            self._store.fetch_one,
            "SELECT * FROM api_tokens WHERE token_hash = ?",
            (sha256_text(token),),
        )
        return _row_to_token(row) if row is not None else None

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def search_tasks(self, user_id: str, filters: TaskFilters | None = None) -> list[Task]:
        return await asyncio.to_thread(self._search_tasks_sync, user_id, filters or TaskFilters())

    async def get_task(self, user_id: str, task_id: str) -> Task:
        return await asyncio.to_thread(self._get_task_sync, user_id, task_id)

    async def create_task(
        self,
        principal: AuthenticatedPrincipal,
        *,
        title: str,
        priority: str = "p4",
        description: str | None = None,
        status: str = "todo",
        completed: bool = False,
        project_id: str | None = None,
        due_date: str | None = None,
        plan_date: str | None = None,
        comments: Sequence[Mapping[str, Any]] | None = None,
    ) -> Task:
        now = utc_now_iso()
        task = Task(
            id=str(uuid.uuid4()),
            user_id=principal.user_id,
            title=title,
            priority=priority,  # type: ignore[arg-type]
            created_at=now,
            updated_at=now,
            description=description,
            completed=completed,
            status=status,  # type: ignore[arg-type]
            project_id=project_id,
            due_date=_timestamp("dueDate", due_date),
            plan_date=_timestamp("planDate", plan_date),
            comments=_comments_from_input(comments or ()),
        )
        await asyncio.to_thread(self._insert_task_sync, task)
        self._log.created(principal, "task", task.id, task.title)
        return task

    async def update_task(
        self,
        principal: AuthenticatedPrincipal,
        task_id: str,
        updates: Mapping[str, Any],
    ) -> Task:
        """Apply *updates* (snake_case field names) and log every requested field."""
        if "project_id" in updates and updates["project_id"] is not None:
            await asyncio.to_thread(
                self._require_owned_sync, "project", principal.user_id, updates["project_id"]
            )
        changes, label = await asyncio.to_thread(
            self._update_sync, "task", principal.user_id, task_id, updates, TASK_FIELDS
        )
        if changes:
            completed = updates.get("completed")
            self._log.updated(
                principal,
                "task",
                task_id,
                changes,
                label,
                completed=completed if isinstance(completed, bool) else None,
            )
        return await self.get_task(principal.user_id, task_id)

    async def delete_task(self, principal: AuthenticatedPrincipal, task_id: str) -> None:
        label = await asyncio.to_thread(
            self._delete_sync, "task", principal.user_id, task_id, None
        )
        self._log.deleted(principal, "task", task_id, label)

    async def add_comment(
        self,
        principal: AuthenticatedPrincipal,
        task_id: str,
        content: str,
    ) -> Comment:
        comment = Comment(id=str(uuid.uuid4()), content=content, posted_at=utc_now_iso())

        def _insert() -> str:
            with self._store.transaction() as conn:
                title = _owned_label(conn, "task", principal.user_id, task_id)
                _insert_comment(conn, task_id, comment)
            return title

        title = await asyncio.to_thread(_insert)
        self._log.comment_added(principal, task_id, comment.id, title)
        return comment

    async def sync_comments(
        self,
        principal: AuthenticatedPrincipal,
        task_id: str,
        comments: Sequence[Mapping[str, Any]],
    ) -> list[Comment]:
        """Make the task's comments match *comments*.

        Comments missing from the list are deleted without a ledger entry;
        each new comment is logged as an update of the task.
        """
        wanted = _comments_from_input(comments)

        def _sync() -> tuple[str, list[Comment]]:
            with self._store.transaction() as conn:
                title = _owned_label(conn, "task", principal.user_id, task_id)
                _reject_foreign_comments(conn, task_id, wanted)
                existing = {
                    row["id"]
                    for row in conn.execute(
                        "SELECT id FROM comments WHERE task_id = ?", (task_id,)
                    ).fetchall()
                }
                wanted_ids = {comment.id for comment in wanted}
                removed = existing - wanted_ids
                if removed:
                    placeholders = ",".join("?" for _ in removed)
                    conn.execute(
                        f"DELETE FROM comments WHERE task_id = ? AND id IN ({placeholders})",
                        (task_id, *removed),
                    )
                added = [comment for comment in wanted if comment.id not in existing]
                for comment in added:
                    _insert_comment(conn, task_id, comment)
            return title, added

        title, added = await asyncio.to_thread(_sync)
        for comment in added:
            self._log.comment_added(principal, task_id, comment.id, title)
        return added

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def list_projects(self, user_id: str) -> list[Project]:
        rows = await asyncio.to_thread(
            self._store.fetch_all,
            "SELECT * FROM projects WHERE user_id = ? ORDER BY created_at, rowid",
            (user_id,),
        )
        return [_row_to_project(row) for row in rows]

    async def get_project(self, user_id: str, project_id: str) -> Project:
        row = await asyncio.to_thread(
            self._store.fetch_one,
            "SELECT * FROM projects WHERE id = ? AND user_id = ?",
            (project_id, user_id),
        )
        if row is None:
            raise EntityNotFoundError("project", project_id)
        return _row_to_project(row)

    async def create_project(
        self,
        principal: AuthenticatedPrincipal,
        *,
        name: str,
        color: str = DEFAULT_PROJECT_COLOR,
        description: str | None = None,
        is_favorite: bool = False,
        parent_id: str | None = None,
        parent_type: str | None = None,
        view_type: str = "list",
    ) -> Project:
        now = utc_now_iso()
        project = Project(
            id=str(uuid.uuid4()),
            user_id=principal.user_id,
            name=name,
            color=color,
            created_at=now,
            updated_at=now,
            description=description,
            is_favorite=is_favorite,
            parent_id=parent_id,
            parent_type=parent_type,  # type: ignore[arg-type]
            view_type=view_type,  # type: ignore[arg-type]
        )
        await asyncio.to_thread(
            self._store.execute,
            """
            INSERT INTO projects (
                id, user_id, name, color, description, is_favorite,
                parent_id, parent_type, view_type, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                project.id,
                project.user_id,
                project.name,
                project.color,
                project.description,
                int(project.is_favorite),
                project.parent_id,
                project.parent_type,
                project.view_type,
                project.created_at,
                project.updated_at,
            ),
        )
        self._log.created(principal, "project", project.id, project.name)
        return project

    async def update_project(
        self,
        principal: AuthenticatedPrincipal,
        project_id: str,
        updates: Mapping[str, Any],
    ) -> Project:
        changes, label = await asyncio.to_thread(
            self._update_sync, "project", principal.user_id, project_id, updates, PROJECT_FIELDS
        )
        if changes:
            self._log.updated(principal, "project", project_id, changes, label)
        return await self.get_project(principal.user_id, project_id)

    async def delete_project(self, principal: AuthenticatedPrincipal, project_id: str) -> None:
        """Delete the project together with its tasks."""
        label = await asyncio.to_thread(
            self._delete_sync,
            "project",
            principal.user_id,
            project_id,
            lambda conn: conn.execute(
                "DELETE FROM tasks WHERE project_id = ? AND user_id = ?",
                (project_id, principal.user_id),
            ),
        )
        self._log.deleted(principal, "project", project_id, label)

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    async def list_goals(self, user_id: str) -> list[Goal]:
        rows = await asyncio.to_thread(
            self._store.fetch_all,
            "SELECT * FROM goals WHERE user_id = ? ORDER BY priority, created_at",
            (user_id,),
        )
        return [_row_to_goal(row) for row in rows]

    async def get_goal(self, user_id: str, goal_id: str) -> Goal:
        row = await asyncio.to_thread(
            self._store.fetch_one,
            "SELECT * FROM goals WHERE id = ? AND user_id = ?",
            (goal_id, user_id),
        )
        if row is None:
            raise EntityNotFoundError("goal", goal_id)
        return _row_to_goal(row)

    async def create_goal(
        self,
        principal: AuthenticatedPrincipal,
        *,
        name: str,
        priority: str = "p4",
        color: str = DEFAULT_GOAL_COLOR,
        description: str | None = None,
        due_date: str | None = None,
    ) -> Goal:
        now = utc_now_iso()
        goal = Goal(
            id=str(uuid.uuid4()),
            user_id=principal.user_id,
            name=name,
            priority=priority,  # type: ignore[arg-type]
            color=color,
            created_at=now,
            updated_at=now,
            description=description,
            due_date=_timestamp("dueDate", due_date),
        )
        await asyncio.to_thread(
            self._store.execute,
            """
            INSERT INTO goals (
                id, user_id, name, description, priority, color, due_date,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                goal.id,
                goal.user_id,
                goal.name,
                goal.description,
                goal.priority,
                goal.color,
                goal.due_date,
                goal.created_at,
                goal.updated_at,
            ),
        )
        self._log.created(principal, "goal", goal.id, goal.name)
        return goal

    async def update_goal(
        self,
        principal: AuthenticatedPrincipal,
        goal_id: str,
        updates: Mapping[str, Any],
    ) -> Goal:
        changes, label = await asyncio.to_thread(
            self._update_sync, "goal", principal.user_id, goal_id, updates, GOAL_FIELDS
        )
        if changes:
            self._log.updated(principal, "goal", goal_id, changes, label)
        return await self.get_goal(principal.user_id, goal_id)

    async def delete_goal(self, principal: AuthenticatedPrincipal, goal_id: str) -> None:
        label = await asyncio.to_thread(
            self._delete_sync, "goal", principal.user_id, goal_id, None
        )
        self._log.deleted(principal, "goal", goal_id, label)

    # ------------------------------------------------------------------
    # Synchronous helpers (run on a worker thread)
    # ------------------------------------------------------------------

    def _search_tasks_sync(self, user_id: str, filters: TaskFilters) -> list[Task]:
        clauses = ["user_id = ?"]
        params: list[Any] = [user_id]

        if filters.priority:
            clauses.append(f"priority IN ({','.join('?' for _ in filters.priority)})")
            params.extend(filters.priority)
        if filters.status:
            clauses.append(f"status IN ({','.join('?' for _ in filters.status)})")
            params.extend(filters.status)
        if filters.completed is not None:
            clauses.append("completed = ?")
            params.append(int(filters.completed))
        if filters.project_id == "inbox":
            clauses.append("project_id IS NULL")
        elif filters.project_id:
            clauses.append("project_id = ?")
            params.append(filters.project_id)
        if filters.search:
            pattern = f"%{_escape_like(filters.search.lower())}%"
            clauses.append(
                "(LOWER(title) LIKE ? ESCAPE '\\' "
                "OR LOWER(COALESCE(description, '')) LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern])
        for column, value in (("due_date", filters.due_date), ("plan_date", filters.plan_date)):
            if value:
                clause, clause_params = _date_clause(column, value)
                clauses.append(clause)
                params.extend(clause_params)

        sql = (
            f"SELECT * FROM tasks WHERE {' AND '.join(clauses)} "
            "ORDER BY priority ASC, created_at DESC, rowid DESC"
        )
        if filters.limit:
            sql += " LIMIT ?"
            params.append(int(filters.limit))

        rows = self._store.fetch_all(sql, params)
        comments = self._comments_for([row["id"] for row in rows])
        return [_row_to_task(row, comments.get(row["id"], [])) for row in rows]

    def _get_task_sync(self, user_id: str, task_id: str) -> Task:
        row = self._store.fetch_one(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?", (task_id, user_id)
        )
        if row is None:
            raise EntityNotFoundError("task", task_id)
        return _row_to_task(row, self._comments_for([task_id]).get(task_id, []))

    def _comments_for(self, task_ids: Sequence[str]) -> dict[str, list[Comment]]:
        if not task_ids:
            return {}
        placeholders = ",".join("?" for _ in task_ids)
        rows = self._store.fetch_all(
            f"SELECT * FROM comments WHERE task_id IN ({placeholders}) "
            "ORDER BY posted_at, rowid",
            list(task_ids),
        )
        grouped: dict[str, list[Comment]] = {}
        for row in rows:
            grouped.setdefault(row["task_id"], []).append(
                Comment(id=row["id"], content=row["content"], posted_at=row["posted_at"])
            )
        return grouped

    def _insert_task_sync(self, task: Task) -> None:
        with self._store.transaction() as conn:
            if task.project_id is not None:
                _owned_label(conn, "project", task.user_id, task.project_id)
            conn.execute(
                """
                INSERT INTO tasks (
                    id, user_id, title, description, completed, status, priority,
                    project_id, due_date, plan_date, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.user_id,
                    task.title,
                    task.description,
                    int(task.completed),
                    task.status,
                    task.priority,
                    task.project_id,
                    task.due_date,
                    task.plan_date,
                    task.created_at,
                    task.updated_at,
                ),
            )
            _reject_foreign_comments(conn, task.id, task.comments)
            for comment in task.comments:
                _insert_comment(conn, task.id, comment)

    def _require_owned_sync(self, entity_type: EntityType, user_id: str, entity_id: str) -> None:
        with self._store.transaction() as conn:
            _owned_label(conn, entity_type, user_id, entity_id)

    def _update_sync(
        self,
        entity_type: EntityType,
        user_id: str,
        entity_id: str,
        updates: Mapping[str, Any],
        fields: Mapping[str, _Field],
    ) -> tuple[dict[str, Any], str | None]:
        table = _TABLES[entity_type]
        with self._store.transaction() as conn:
            row = conn.execute(
                f"SELECT id FROM {table} WHERE id = ? AND user_id = ?",
                (entity_id, user_id),
            ).fetchone()
            if row is None:
                raise EntityNotFoundError(entity_type, entity_id)

            changes: dict[str, Any] = {}
            assignments: list[str] = []
            params: list[Any] = []
            for key, value in updates.items():
                spec = fields.get(key)
                if spec is None:
                    raise DomainValidationError(key, "unknown field")
                if value is None and not spec.nullable:
                    raise DomainValidationError(spec.change_key, "cannot be null")
                stored = _to_column(spec, value)
                assignments.append(f"{spec.column} = ?")
                params.append(stored)
                changes[spec.change_key] = bool(stored) if spec.kind == "bool" else stored

            if not assignments:
                return {}, None

            assignments.append("updated_at = ?")
            params.append(utc_now_iso())
            conn.execute(
                f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ? AND user_id = ?",
                (*params, entity_id, user_id),
            )
            label = _owned_label(conn, entity_type, user_id, entity_id)
        return changes, label

    def _delete_sync(
        self,
        entity_type: EntityType,
        user_id: str,
        entity_id: str,
        before: Callable[[sqlite3.Connection], object] | None,
    ) -> str:
        table = _TABLES[entity_type]
        with self._store.transaction() as conn:
            label = _owned_label(conn, entity_type, user_id, entity_id)
            if before is not None:
                before(conn)
            conn.execute(
                f"DELETE FROM {table} WHERE id = ? AND user_id = ?", (entity_id, user_id)
            )
        return label


def _owned_label(
    conn: sqlite3.Connection,
    entity_type: EntityType,
    user_id: str,
    entity_id: str,
) -> str:
    """Return the entity's display label, or raise if the user does not own it."""
    column = LABEL_FIELDS[entity_type]
    row = conn.execute(
        f"SELECT {column} FROM {_TABLES[entity_type]} WHERE id = ? AND user_id = ?",
        (entity_id, user_id),
    ).fetchone()
    if row is None:
        raise EntityNotFoundError(entity_type, entity_id)
    return row[column]


def _insert_comment(conn: sqlite3.Connection, task_id: str, comment: Comment) -> None:
    conn.execute(
        "INSERT INTO comments (id, task_id, content, posted_at) VALUES (?, ?, ?, ?)",
        (comment.id, task_id, comment.content, comment.posted_at),
    )


def _comment_from_input(item: Mapping[str, Any] | Comment) -> Comment:
    if isinstance(item, Comment):
        return item
    posted_at = item.get("postedAt") or item.get("posted_at")
    return Comment(
        id=str(item.get("id") or uuid.uuid4()),
        content=str(item["content"]),
        posted_at=_timestamp("postedAt", posted_at) or utc_now_iso(),
    )


def _comments_from_input(items: Sequence[Mapping[str, Any] | Comment]) -> list[Comment]:
    comments = [_comment_from_input(item) for item in items]
    seen: set[str] = set()
    for comment in comments:
        if comment.id in seen:
            raise DomainValidationError("comments", f"duplicate comment id {comment.id!r}")
        seen.add(comment.id)
    return comments


def _reject_foreign_comments(
    conn: sqlite3.Connection, task_id: str, comments: Sequence[Comment]
) -> None:
    if not comments:
        return
    placeholders = ",".join("?" for _ in comments)
    row = conn.execute(
        f"SELECT id FROM comments WHERE task_id != ? AND id IN ({placeholders}) LIMIT 1",
        (task_id, *(comment.id for comment in comments)),
    ).fetchone()
    if row is not None:
        raise DomainValidationError(
            "comments", f"comment id {row['id']!r} belongs to another task"
        )


def _timestamp(field: str, value: str | None) -> str | None:
    try:
        return normalize_timestamp(value)
    except ValueError as exc:
        raise DomainValidationError(field, f"invalid date-time {value!r}") from exc


def _to_column(spec: _Field, value: Any) -> Any:
    if value is None:
        return None
    if spec.kind == "bool":
        return int(bool(value))
    if spec.kind == "timestamp":
        return _timestamp(spec.change_key, value)
    return value


def _date_clause(column: str, value: str) -> tuple[str, list[Any]]:
    today_start, today_end = day_bounds(utc_now())
    if value == "today":
        return f"({column} >= ? AND {column} <= ?)", [today_start, today_end]
    if value == "overdue":
        return f"({column} < ? AND completed = 0)", [today_start]
    if value == "upcoming":
        return f"{column} > ?", [today_end]
    try:
        start, end = day_bounds(parse_day(value))
    except ValueError as exc:
        raise DomainValidationError(column, f"invalid date filter {value!r}") from exc
    return f"({column} >= ? AND {column} <= ?)", [start, end]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_user(row: sqlite3.Row) -> User:
    return User(id=row["id"], name=row["name"], email=row["email"])


def _row_to_token(row: sqlite3.Row) -> ApiToken:
    return ApiToken(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        created_at=row["created_at"],
    )


def _row_to_task(row: sqlite3.Row, comments: list[Comment]) -> Task:
    return Task(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        priority=row["priority"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        description=row["description"],
        completed=bool(row["completed"]),
        status=row["status"],
        project_id=row["project_id"],
        due_date=row["due_date"],
        plan_date=row["plan_date"],
        comments=comments,
    )


def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        color=row["color"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        description=row["description"],
        is_favorite=bool(row["is_favorite"]),
        parent_id=row["parent_id"],
        parent_type=row["parent_type"],
        view_type=row["view_type"],
    )


def _row_to_goal(row: sqlite3.Row) -> Goal:
    return Goal(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        priority=row["priority"],
        color=row["color"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        description=row["description"],
        due_date=row["due_date"],
    )
