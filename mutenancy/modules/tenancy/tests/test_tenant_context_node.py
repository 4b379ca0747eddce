"""Unit tests for the TenantContext node and its service."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from mutenancy.exceptions import InvalidContextRecordException
from mutenancy.models.enums import ContextLevel
from mutenancy.modules.context.cache import ContextCache
from mutenancy.modules.context.schemas import ContextRecord
from mutenancy.modules.tenancy.schemas import TenantRecord
from mutenancy.modules.tenancy.tenant_context import TenantContext, TenantContextService


def _make_record(level: int = ContextLevel.TENANT, **fields):
    values = {"id": 5, "contextlevel": level, "instanceid": 7, "path": "/1/5", "depth": 2, "tenantid": 7}
    values.update(fields)
    return SimpleNamespace(**values)


def _make_registry(tenant: TenantRecord | None):
    registry = MagicMock()
    registry.fetch = AsyncMock(return_value=tenant)
    return registry


def _make_gate(active: bool = True):
    gate = MagicMock()
    gate.is_active.return_value = active
    return gate


def test_wraps_tenant_rows():
    context = TenantContext(_make_record())

    assert context.id == 5
    assert context.instanceid == 7
    assert context.path == "/1/5"
    assert "tenantid=7" in repr(context)


@pytest.mark.parametrize("level", [ContextLevel.SYSTEM, ContextLevel.USER, ContextLevel.COURSECAT])
def test_rejects_rows_of_other_levels(level):
    with pytest.raises(InvalidContextRecordException):
        TenantContext(_make_record(level=level))


@pytest.mark.asyncio
async def test_context_name_uses_registry():
    registry = _make_registry(TenantRecord(id=7, name="Acme Shipping", idnumber="acme"))
    context = TenantContext(_make_record())

    assert await context.get_context_name(registry) == "Tenant: Acme Shipping"
    assert await context.get_context_name(registry, withprefix=False, short=True) == "acme"
    registry.fetch.assert_awaited_with(7)


@pytest.mark.asyncio
async def test_context_name_tolerates_missing_tenant():
    context = TenantContext(_make_record())

    assert await context.get_context_name(_make_registry(None)) == ""


@pytest.mark.asyncio
async def test_instance_returns_cached_record_without_storage():
    cache = ContextCache()
    cache.add(ContextRecord(id=5, contextlevel=ContextLevel.TENANT, instanceid=7, path="/1/5", depth=2, tenantid=7))
    contexts = MagicMock()
    contexts.cache = cache
    db = AsyncMock()

    context = await TenantContextService(db, gate=_make_gate(), contexts=contexts).instance(7)

    assert isinstance(context, TenantContext)
    assert context.id == 5
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_inactive_service_does_nothing():
    db = AsyncMock()
    service = TenantContextService(db, gate=_make_gate(active=False), contexts=MagicMock())

    assert await service.instance(7) is None
    assert await service.create_level_instances() == 0
    db.execute.assert_not_awaited()
