"""TenantRegistry: request scoped lookup of tenant records."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.models.tenant import Tenant
from mutenancy.modules.tenancy.activation import ActivationGate, default_gate
from mutenancy.modules.tenancy.schemas import TenantRecord

logger = logging.getLogger(__name__)


class TenantRegistry:
    """Fetches tenants by id and remembers them for the lifetime of the instance.

    Misses are not remembered so a tenant created later in the same request
    is found. Call ``invalidate`` after writing to a tenant row.
    """

    def __init__(self, db: AsyncSession, gate: ActivationGate | None = None):
        self.db = db
        self.gate = gate or default_gate
        self._cache: dict[int, TenantRecord] = {}

    async def fetch(self, tenantid: int | None) -> TenantRecord | None:
        if not tenantid or not self.gate.is_active():
            return None

        cached = self._cache.get(tenantid)
        if cached is not None:
            return cached

        result = await self.db.execute(select(Tenant).where(Tenant.id == tenantid))
        tenant = result.scalar_one_or_none()
        if tenant is None:
            return None

        record = TenantRecord.model_validate(tenant)
        self._cache[tenantid] = record
        return record

    async def fetch_by_category(self, categoryid: int) -> TenantRecord | None:
        """Return the tenant whose root category is ``categoryid``."""
        if not self.gate.is_active():
            return None

        result = await self.db.execute(
            select(Tenant).where(Tenant.categoryid == categoryid).order_by(Tenant.id).limit(1)
        )
        tenant = result.scalar_one_or_none()
        if tenant is None:
            return None

        record = TenantRecord.model_validate(tenant)
        self._cache[record.id] = record
        return record

    def invalidate(self, tenantid: int | None = None) -> None:
        if tenantid is None:
            self._cache.clear()
        else:
            self._cache.pop(tenantid, None)
