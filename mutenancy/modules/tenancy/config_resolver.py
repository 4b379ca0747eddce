"""ConfigResolver: tenant aware replacement for plain global config reads."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.modules.tenancy.activation import ActivationGate, default_gate
from mutenancy.modules.tenancy.config_store import GlobalConfigStore, TenantConfigStore, normalize_plugin
from mutenancy.modules.tenancy.constants import CURRENT_TENANT, ROOT_NAMESPACE


class ConfigResolver:
    """Reads settings from the tenant store when a tenant is in scope.

    Otherwise the read goes to the global store. ``overrides`` holds explicit
    root namespace values (typically set by tests); they are consulted before
    the store unless the deployment forces the same key.
    """

    def __init__(
        self,
        db: AsyncSession,
        overrides: Mapping[str, Any] | None = None,
        gate: ActivationGate | None = None,
        forced: Mapping[str, str] | None = None,
    ):
        self.gate = gate or default_gate
        self.overrides = dict(overrides or {})
        self.global_store = GlobalConfigStore(db, forced=forced)
        self.tenant_store = TenantConfigStore(db, gate=self.gate, global_store=self.global_store)

    async def get_config(self, plugin: str | None, name: str | None = None):
        if not self.gate.is_active() or not self.gate.current_tenantid():
            plugin = normalize_plugin(plugin)
            if plugin == ROOT_NAMESPACE and name:
                if name not in self.global_store.forced and name in self.overrides:
                    return self.overrides[name]
            return await self.global_store.get(plugin, name)

        return await self.tenant_store.get(CURRENT_TENANT, plugin, name)
