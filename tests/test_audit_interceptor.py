"""Tests for mutation logging through the domain storage."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from focus_mcp.app import AppContext
from focus_mcp.audit.interceptor import MutationLog, update_action_kind
from focus_mcp.audit.ledger import ActionLedger
from focus_mcp.audit.models import ActionQuery, ActionRecord
from focus_mcp.audit.recorder import ActionRecorder
from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.domain.models import EntityNotFoundError
from focus_mcp.domain.storage import DomainStorage


async def _logged(context: AppContext) -> list[ActionRecord]:
    """Every ledger entry, oldest first."""
    await context.recorder.flush()
    records = await context.ledger.query(
        ActionQuery(user_id="nobody", include_own=True, limit=100)
    )
    return list(reversed(records))


def test_update_action_kind() -> None:
    assert update_action_kind("task", True) == "complete"
    assert update_action_kind("task", False) == "uncomplete"
    assert update_action_kind("task", None) == "update"
    assert update_action_kind("project", True) == "update"
    assert update_action_kind("goal", None) == "update"


@pytest.mark.asyncio
async def test_create_by_agent_records_token_name(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Write report", priority="p2")

    (entry,) = await _logged(context)
    assert entry.entity_id == task.id
    assert entry.entity_type == "task"
    assert entry.action_kind == "create"
    assert entry.actor_id == "user-alice"
    assert entry.actor_kind == "agent"
    assert entry.changes == {"title": "Write report"}
    assert entry.metadata == {"title": "Write report", "tokenName": "Claude"}
    assert entry.is_read is False


@pytest.mark.asyncio
async def test_create_by_user_has_no_token_name(
    context: AppContext, user_principal: AuthenticatedPrincipal
) -> None:
    project = await context.storage.create_project(user_principal, name="Home")

    (entry,) = await _logged(context)
    assert entry.actor_kind == "user"
    assert entry.entity_type == "project"
    assert entry.changes == {"name": "Home"}
    assert entry.metadata == {"name": "Home"}
    assert project.color == "#808080"


@pytest.mark.asyncio
async def test_complete_and_uncomplete(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Ship", priority="p1")

    await context.storage.update_task(agent_principal, task.id, {"completed": True})
    await context.storage.update_task(agent_principal, task.id, {"completed": False})

    entries = await _logged(context)
    assert [entry.action_kind for entry in entries] == ["create", "complete", "uncomplete"]
    assert entries[1].changes == {"completed": True}
    assert entries[2].changes == {"completed": False}


@pytest.mark.asyncio
async def test_update_records_every_requested_field_and_new_label(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Draft", priority="p3")

    updated = await context.storage.update_task(
        agent_principal, task.id, {"title": "Final", "priority": "p3"}
    )

    entries = await _logged(context)
    assert updated.title == "Final"
    assert entries[-1].action_kind == "update"
    assert entries[-1].changes == {"title": "Final", "priority": "p3"}
    assert entries[-1].metadata == {"title": "Final", "tokenName": "Claude"}


@pytest.mark.asyncio
async def test_update_with_unchanged_values_is_still_logged(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Same", priority="p3")

    await context.storage.update_task(
        agent_principal, task.id, {"title": "Same", "priority": "p1"}
    )

    entries = await _logged(context)
    assert [entry.action_kind for entry in entries] == ["create", "update"]
    assert entries[-1].changes == {"title": "Same", "priority": "p1"}


@pytest.mark.asyncio
async def test_completing_twice_is_logged_twice(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Ship", priority="p1")

    await context.storage.update_task(agent_principal, task.id, {"completed": True})
    await context.storage.update_task(agent_principal, task.id, {"completed": True})

    entries = await _logged(context)
    assert [entry.action_kind for entry in entries] == ["create", "complete", "complete"]


@pytest.mark.asyncio
async def test_empty_update_is_not_logged(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Same", priority="p3")

    await context.storage.update_task(agent_principal, task.id, {})

    assert [entry.action_kind for entry in await _logged(context)] == ["create"]


@pytest.mark.asyncio
async def test_delete_records_label_without_changes(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    goal = await context.storage.create_goal(
        agent_principal, name="Run a marathon", priority="p1", color="#FF0000"
    )

    await context.storage.delete_goal(agent_principal, goal.id)

    entry = (await _logged(context))[-1]
    assert entry.action_kind == "delete"
    assert entry.entity_type == "goal"
    assert entry.changes is None
    assert entry.metadata == {"name": "Run a marathon", "tokenName": "Claude"}


@pytest.mark.asyncio
async def test_mutation_of_foreign_entity_is_not_logged(
    context: AppContext,
    agent_principal: AuthenticatedPrincipal,
    bob_principal: AuthenticatedPrincipal,
) -> None:
    task = await context.storage.create_task(bob_principal, title="Bob's", priority="p4")

    with pytest.raises(EntityNotFoundError):
        await context.storage.update_task(agent_principal, task.id, {"title": "Mine now"})
    with pytest.raises(EntityNotFoundError):
        await context.storage.delete_task(agent_principal, task.id)

    entries = await _logged(context)
    assert [(entry.actor_id, entry.action_kind) for entry in entries] == [("user-bob", "create")]


@pytest.mark.asyncio
async def test_comment_sync_logs_each_added_comment(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(
        agent_principal,
        title="Review",
        priority="p2",
        comments=[{"id": "c1", "content": "first"}],
    )

    added = await context.storage.sync_comments(
        agent_principal,
        task.id,
        [{"id": "c2", "content": "second"}, {"id": "c3", "content": "third"}],
    )

    stored = await context.storage.get_task("user-alice", task.id)
    assert [comment.id for comment in stored.comments] == ["c2", "c3"]
    assert [comment.id for comment in added] == ["c2", "c3"]

    comment_entries = (await _logged(context))[1:]
    assert len(comment_entries) == 2
    for entry, comment_id in zip(comment_entries, ["c2", "c3"]):
        assert entry.action_kind == "update"
        assert entry.changes == {"comments": "added"}
        assert entry.metadata == {
            "commentId": comment_id,
            "title": "Review",
            "tokenName": "Claude",
        }


@pytest.mark.asyncio
async def test_comment_removal_is_not_logged(
    context: AppContext, user_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(
        user_principal,
        title="Review",
        priority="p2",
        comments=[{"id": "c1", "content": "first"}],
    )

    added = await context.storage.sync_comments(user_principal, task.id, [])

    assert added == []
    assert [entry.action_kind for entry in await _logged(context)] == ["create"]


@pytest.mark.asyncio
async def test_add_comment_logs_task_update(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    task = await context.storage.create_task(agent_principal, title="Call", priority="p2")

    comment = await context.storage.add_comment(agent_principal, task.id, "Left a voicemail")

    entry = (await _logged(context))[-1]
    assert entry.entity_id == task.id
    assert entry.metadata["commentId"] == comment.id


@pytest.mark.asyncio
async def test_ledger_failure_does_not_break_mutation(
    context: AppContext, agent_principal: AuthenticatedPrincipal
) -> None:
    ledger = MagicMock(spec=ActionLedger)
    ledger.insert = AsyncMock(side_effect=RuntimeError("ledger unavailable"))
    recorder = ActionRecorder(ledger)
    storage = DomainStorage(context.store, MutationLog(recorder))

    task = await storage.create_task(agent_principal, title="Still saved", priority="p4")
    await recorder.flush()

    assert (await storage.get_task("user-alice", task.id)).title == "Still saved"
    assert recorder.stats.failed == 1
    await recorder.close()


def test_emit_passes_actor_to_recorder(agent_principal: AuthenticatedPrincipal) -> None:
    recorder = MagicMock(spec=ActionRecorder)
    log = MutationLog(recorder)

    log.updated(agent_principal, "project", "p1", {"color": "#000000"}, "Home")

    entry = recorder.record.call_args.args[0]
    assert entry.actor_id == "user-alice"
    assert entry.actor_kind == "agent"
    assert entry.action_kind == "update"
    assert entry.metadata == {"name": "Home", "tokenName": "Claude"}
