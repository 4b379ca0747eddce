"""Tests for tenant aware configuration reads."""

import pytest

from mutenancy.modules.tenancy.config_resolver import ConfigResolver
from mutenancy.modules.tenancy.config_store import GlobalConfigStore, TenantConfigStore
from mutenancy.modules.tenancy.tenancy import tenant_scope


@pytest.mark.asyncio
async def test_tenant_override_wins_only_inside_tenant_scope(async_session, acme, multitenancy):
    global_store = GlobalConfigStore(async_session)
    await global_store.set("block_x", "setting1", "V")
    resolver = ConfigResolver(async_session)

    assert await resolver.get_config("block_x", "setting1") == "V"

    await TenantConfigStore(async_session).set(7, "block_x", "setting1", "V'")

    with tenant_scope(7):
        assert await resolver.get_config("block_x", "setting1") == "V'"
    assert await resolver.get_config("block_x", "setting1") == "V"
    assert await global_store.get("block_x", "setting1") == "V"


@pytest.mark.asyncio
async def test_tenant_scope_is_ignored_when_inactive(async_session, acme):
    await GlobalConfigStore(async_session).set("block_x", "setting1", "V")
    await TenantConfigStore(async_session).set(7, "block_x", "setting1", "V'")

    with tenant_scope(7):
        assert await ConfigResolver(async_session).get_config("block_x", "setting1") == "V"


@pytest.mark.asyncio
async def test_plugin_mapping_merges_tenant_overrides(async_session, acme, multitenancy):
    global_store = GlobalConfigStore(async_session)
    await global_store.set("block_x", "setting1", "a")
    await global_store.set("block_x", "setting2", "b")
    await TenantConfigStore(async_session).set(7, "block_x", "setting2", "tenant-b")
    resolver = ConfigResolver(async_session)

    assert await resolver.get_config("block_x") == {"setting1": "a", "setting2": "b"}
    with tenant_scope(7):
        assert await resolver.get_config("block_x") == {"setting1": "a", "setting2": "tenant-b"}


@pytest.mark.asyncio
@pytest.mark.parametrize("plugin", ["", None, "core", "site"])
async def test_root_namespace_aliases(async_session, plugin):
    await GlobalConfigStore(async_session).set("core", "theme", "classic")

    assert await ConfigResolver(async_session).get_config(plugin, "theme") == "classic"


@pytest.mark.asyncio
async def test_overrides_apply_to_root_namespace_only(async_session):
    store = GlobalConfigStore(async_session)
    await store.set("core", "theme", "classic")
    await store.set("block_x", "theme", "plain")
    resolver = ConfigResolver(async_session, overrides={"theme": "boost"})

    assert await resolver.get_config("core", "theme") == "boost"
    assert await resolver.get_config("", "theme") == "boost"
    assert await resolver.get_config("block_x", "theme") == "plain"
    assert await resolver.get_config("core") == {"theme": "classic"}


@pytest.mark.asyncio
async def test_forced_settings_beat_overrides_and_stored_values(async_session, acme, multitenancy):
    await GlobalConfigStore(async_session).set("core", "theme", "classic")
    await TenantConfigStore(async_session).set(7, "core", "theme", "tenant-theme")
    resolver = ConfigResolver(async_session, overrides={"theme": "boost"}, forced={"theme": "forced"})

    assert await resolver.get_config("core", "theme") == "forced"
    with tenant_scope(7):
        assert await resolver.get_config("core", "theme") == "forced"


@pytest.mark.asyncio
async def test_absent_values_are_empty_not_errors(async_session, acme, multitenancy):
    resolver = ConfigResolver(async_session)

    assert await resolver.get_config("block_missing", "nothing") is None
    assert await resolver.get_config("block_missing") == {}
    with tenant_scope(7):
        assert await resolver.get_config("block_missing", "nothing") is None
        assert await resolver.get_config("block_missing") == {}


@pytest.mark.asyncio
async def test_setting_none_removes_values(async_session, acme, multitenancy):
    global_store = GlobalConfigStore(async_session)
    tenant_store = TenantConfigStore(async_session)
    await global_store.set("block_x", "setting1", "V")
    await tenant_store.set(7, "block_x", "setting1", "V'")

    await tenant_store.set(7, "block_x", "setting1", None)
    assert await tenant_store.get(7, "block_x", "setting1") == "V"

    await global_store.set("block_x", "setting1", None)
    assert await tenant_store.get(7, "block_x", "setting1") is None


@pytest.mark.asyncio
async def test_tenant_override_requires_a_tenant(async_session, multitenancy):
    with pytest.raises(ValueError):
        await TenantConfigStore(async_session).set(-1, "block_x", "setting1", "V")
