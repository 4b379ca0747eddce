"""Tests for the context maintenance Celery tasks."""

import pytest
from sqlalchemy import select

from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.models.tenant import Tenant
from mutenancy.models.user import User
from mutenancy.modules.tenancy import tasks


@pytest.fixture
def task_sessions(monkeypatch, session_factory):
    monkeypatch.setattr(tasks, "async_session", session_factory)
    return session_factory


async def _seed(session_factory) -> None:
    async with session_factory() as session:
        session.add_all([
            Tenant(id=7, name="Acme Shipping", idnumber="acme", categoryid=50),
            User(id=100, username="jdoe", tenantid=7),
            Context(id=1, contextlevel=ContextLevel.SYSTEM, instanceid=0, path="/1", depth=1),
            Context(id=23, contextlevel=ContextLevel.COURSECAT, instanceid=50, path="/1/23", depth=2),
            Context(id=30, contextlevel=ContextLevel.COURSE, instanceid=3, path="/1/23/30", depth=3),
            Context(id=900, contextlevel=ContextLevel.USER, instanceid=100, path="/1/900", depth=2),
            Context(id=6, contextlevel=ContextLevel.TENANT, instanceid=404, path="/1/6", depth=2, tenantid=404),
        ])
        await session.commit()


async def _contexts(session_factory) -> dict[int, tuple]:
    async with session_factory() as session:
        result = await session.execute(
            select(Context.id, Context.contextlevel, Context.instanceid, Context.path, Context.tenantid)
        )
        return {row.id: row for row in result.all()}


@pytest.mark.asyncio
async def test_fix_all_tenantids_is_skipped_when_inactive(task_sessions):
    await _seed(task_sessions)

    assert await tasks._fix_all_tenantids_async() == {"skipped": True}

    contexts = await _contexts(task_sessions)
    assert contexts[23].tenantid is None


@pytest.mark.asyncio
async def test_fix_all_tenantids_commits(task_sessions, multitenancy):
    await _seed(task_sessions)

    stats = await tasks._fix_all_tenantids_async()

    assert stats["skipped"] is False
    contexts = await _contexts(task_sessions)
    assert contexts[23].tenantid == 7
    assert contexts[30].tenantid == 7


@pytest.mark.asyncio
async def test_create_tenant_contexts_places_tenants_and_members(task_sessions, multitenancy):
    await _seed(task_sessions)

    result = await tasks._create_tenant_contexts_async()

    assert result == {"created": 1, "deleted": 1}
    contexts = await _contexts(task_sessions)
    assert 6 not in contexts
    tenant_context = next(
        row for row in contexts.values()
        if row.contextlevel == ContextLevel.TENANT and row.instanceid == 7
    )
    assert tenant_context.path == f"/1/{tenant_context.id}"
    assert contexts[900].path == f"{tenant_context.path}/900"
    assert contexts[900].tenantid == 7


@pytest.mark.asyncio
async def test_build_context_paths_does_nothing_when_inactive(task_sessions):
    await _seed(task_sessions)

    assert await tasks._build_context_paths_async(force=True) == {"force": True}

    contexts = await _contexts(task_sessions)
    assert contexts[900].path == "/1/900"


def test_celery_task_runs_the_async_job():
    assert tasks.fix_all_tenantids() == {"skipped": True}
