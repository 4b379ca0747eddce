"""Global and tenant scoped configuration stores."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.config import settings
from mutenancy.models.config import ConfigSetting, TenantConfigOverride
from mutenancy.modules.tenancy.activation import ActivationGate, default_gate
from mutenancy.modules.tenancy.constants import CURRENT_TENANT, ROOT_NAMESPACE, ROOT_NAMESPACE_ALIASES

logger = logging.getLogger(__name__)


def normalize_plugin(plugin: str | None) -> str:
    """Map every alias of the root namespace to ``core``."""
    if not plugin or plugin in ROOT_NAMESPACE_ALIASES:
        return ROOT_NAMESPACE
    return plugin


class GlobalConfigStore:
    """Site wide settings, one row per (plugin, name).

    Root namespace values listed in ``forced`` come from the deployment and
    take precedence over stored rows.
    """

    def __init__(self, db: AsyncSession, forced: Mapping[str, str] | None = None):
        self.db = db
        self.forced = dict(settings.forced_config if forced is None else forced)

    async def get(self, plugin: str, name: str | None = None):
        """Return one value, or every value of ``plugin`` as a dict when ``name`` is None.

        Missing values come back as None (or an empty dict).
        """
        if name is not None:
            if plugin == ROOT_NAMESPACE and name in self.forced:
                return self.forced[name]
            result = await self.db.execute(
                select(ConfigSetting.value).where(
                    ConfigSetting.plugin == plugin,
                    ConfigSetting.name == name,
                )
            )
            return result.scalar_one_or_none()

        result = await self.db.execute(
            select(ConfigSetting.name, ConfigSetting.value)
            .where(ConfigSetting.plugin == plugin)
            .order_by(ConfigSetting.name)
        )
        values = {row.name: row.value for row in result.all()}
        if plugin == ROOT_NAMESPACE:
            values.update(self.forced)
        return values

    async def set(self, plugin: str, name: str, value: str | None) -> None:
        """Store a value, ``None`` removes the setting."""
        plugin = normalize_plugin(plugin)
        if value is None:
            await self.unset(plugin, name)
            return

        result = await self.db.execute(
            select(ConfigSetting).where(ConfigSetting.plugin == plugin, ConfigSetting.name == name)
        )
        setting = result.scalar_one_or_none()
        if setting is None:
            self.db.add(ConfigSetting(plugin=plugin, name=name, value=value))
        else:
            setting.value = value
        await self.db.flush()

    async def unset(self, plugin: str, name: str) -> None:
        await self.db.execute(
            delete(ConfigSetting).where(
                ConfigSetting.plugin == normalize_plugin(plugin),
                ConfigSetting.name == name,
            )
        )


class TenantConfigStore:
    """Per tenant overrides layered on top of the global store.

    ``tenantid=-1`` resolves to the tenant currently in scope; without a
    tenant the global values are returned unchanged.
    """

    def __init__(
        self,
        db: AsyncSession,
        gate: ActivationGate | None = None,
        global_store: GlobalConfigStore | None = None,
    ):
        self.db = db
        self.gate = gate or default_gate
        self.global_store = global_store or GlobalConfigStore(db)

    def _resolve_tenantid(self, tenantid: int | None) -> int | None:
        if tenantid == CURRENT_TENANT:
            return self.gate.current_tenantid()
        return tenantid

    async def get(self, tenantid: int | None, plugin: str | None, name: str | None = None):
        plugin = normalize_plugin(plugin)
        tenantid = self._resolve_tenantid(tenantid)
        if not tenantid:
            return await self.global_store.get(plugin, name)

        forced = self.global_store.forced if plugin == ROOT_NAMESPACE else {}

        if name is not None:
            if name in forced:
                return forced[name]
            result = await self.db.execute(
                select(TenantConfigOverride.value).where(
                    TenantConfigOverride.tenantid == tenantid,
                    TenantConfigOverride.plugin == plugin,
                    TenantConfigOverride.name == name,
                )
            )
            row = result.first()
            if row is not None:
                return row.value
            return await self.global_store.get(plugin, name)

        values = await self.global_store.get(plugin)
        result = await self.db.execute(
            select(TenantConfigOverride.name, TenantConfigOverride.value).where(
                TenantConfigOverride.tenantid == tenantid,
                TenantConfigOverride.plugin == plugin,
            )
        )
        for row in result.all():
            if row.name not in forced:
                values[row.name] = row.value
        return values

    async def set(self, tenantid: int, plugin: str, name: str, value: str | None) -> None:
        """Override a setting for one tenant, ``None`` removes the override."""
        plugin = normalize_plugin(plugin)
        tenantid = self._resolve_tenantid(tenantid)
        if not tenantid:
            raise ValueError("A tenant is required to store a tenant override")

        if value is None:
            await self.unset(tenantid, plugin, name)
            return

        result = await self.db.execute(
            select(TenantConfigOverride).where(
                TenantConfigOverride.tenantid == tenantid,
                TenantConfigOverride.plugin == plugin,
                TenantConfigOverride.name == name,
            )
        )
        override = result.scalar_one_or_none()
        if override is None:
            self.db.add(TenantConfigOverride(tenantid=tenantid, plugin=plugin, name=name, value=value))
        else:
            override.value = value
        await self.db.flush()
        logger.info("Tenant %s overrides %s/%s", tenantid, plugin, name)

    async def unset(self, tenantid: int, plugin: str, name: str) -> None:
        await self.db.execute(
            delete(TenantConfigOverride).where(
                TenantConfigOverride.tenantid == self._resolve_tenantid(tenantid),
                TenantConfigOverride.plugin == normalize_plugin(plugin),
                TenantConfigOverride.name == name,
            )
        )
