"""TenantIdReconciler: full tree recomputation of the denormalized context.tenantid."""

from __future__ import annotations

import logging

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.models.tenant import Tenant
from mutenancy.modules.context.constants import Strictness
from mutenancy.modules.context.service import ContextService
from mutenancy.modules.tenancy.constants import TENANT_DEPTH, TENANT_LEVEL

logger = logging.getLogger(__name__)


class TenantIdReconciler:
    """Restores tenantid on every context row from tenants and paths.

    Each stage is a single set based UPDATE and the stages must run in
    order: the depth 2 layer is settled first, deeper rows copy from it.
    Running it on a consistent tree changes nothing.
    """

    def __init__(self, db: AsyncSession, contexts: ContextService | None = None):
        self.db = db
        self.contexts = contexts or ContextService(db)

    async def _run(self, stage: str, statement) -> int:
        result = await self.db.execute(statement.execution_options(synchronize_session=False))
        logger.info("tenantid reconciliation %s: %d rows", stage, result.rowcount)
        return result.rowcount

    async def fix_all_tenantids(self) -> dict[str, int]:
        """Recompute tenantid for all contexts.

        Returns the number of rows touched by each stage.
        """
        stats: dict[str, int] = {}

        stats["root"] = await self._run(
            "root",
            update(Context)
            .where(Context.tenantid.isnot(None), Context.depth == 1)
            .values(tenantid=None),
        )

        stats["top_level"] = await self._run(
            "top_level",
            update(Context)
            .where(
                Context.tenantid.isnot(None),
                Context.depth == TENANT_DEPTH,
                Context.contextlevel != TENANT_LEVEL,
                Context.contextlevel != ContextLevel.COURSECAT,
            )
            .values(tenantid=None),
        )

        stats["tenants"] = await self._run(
            "tenants",
            update(Context)
            .where(
                Context.contextlevel == TENANT_LEVEL,
                or_(Context.tenantid.is_(None), Context.tenantid != Context.instanceid),
            )
            .values(tenantid=Context.instanceid),
        )

        owner = (
            select(Tenant.id)
            .where(Tenant.categoryid == Context.instanceid)
            .order_by(Tenant.id)
            .limit(1)
            .scalar_subquery()
        )
        stats["categories"] = await self._run(
            "categories",
            update(Context)
            .where(Context.contextlevel == ContextLevel.COURSECAT, Context.depth == TENANT_DEPTH)
            .values(tenantid=owner),
        )

        # Depth 2 owner of a deeper row is matched by path prefix
        tc = aliased(Context, name="tc")
        owned_by = (
            select(tc.id)
            .where(
                tc.depth == TENANT_DEPTH,
                tc.tenantid.isnot(None),
                Context.path.like(tc.path + "/%"),
            )
        )

        stats["descendants_cleared"] = await self._run(
            "descendants_cleared",
            update(Context)
            .where(
                Context.depth > TENANT_DEPTH,
                Context.tenantid.isnot(None),
                ~owned_by.where(tc.tenantid == Context.tenantid).exists(),
            )
            .values(tenantid=None),
        )

        owner_tenantid = (
            select(tc.tenantid)
            .where(
                tc.depth == TENANT_DEPTH,
                tc.tenantid.isnot(None),
                Context.path.like(tc.path + "/%"),
            )
            .limit(1)
            .scalar_subquery()
        )
        stats["descendants_filled"] = await self._run(
            "descendants_filled",
            update(Context)
            .where(
                Context.depth > TENANT_DEPTH,
                Context.tenantid.is_(None),
                owned_by.exists(),
            )
            .values(tenantid=owner_tenantid),
        )

        # Cached nodes carry the old tenantid values
        self.contexts.cache.reset()
        return stats

    async def guess_tenantid(self, contextlevel: int, instanceid: int, path: str | None) -> int | None:
        """Infer tenantid of a single row from existing data, without a full sweep.

        Accurate as long as the depth 2 ancestors already carry the right
        tenantid; the next ``fix_all_tenantids`` repairs any miss.
        """
        if contextlevel == ContextLevel.SYSTEM:
            return None
        if contextlevel == TENANT_LEVEL:
            return instanceid
        if not path:
            logger.debug(
                "Missing context path, cannot find tenantid (level=%s, instance=%s)",
                contextlevel, instanceid,
            )
            return None

        parts = path.split("/")

        if len(parts) == TENANT_DEPTH + 1:
            # TODO: revisit if another level besides categories can own a tenant at depth 2
            if contextlevel != ContextLevel.COURSECAT:
                return None
            result = await self.db.execute(
                select(Tenant.id).where(Tenant.categoryid == instanceid).order_by(Tenant.id).limit(1)
            )
            return result.scalar_one_or_none()

        if len(parts) > TENANT_DEPTH + 1:
            try:
                ancestorid = int(parts[2])
            except ValueError:
                logger.debug("Malformed context path %r, cannot find tenantid", path)
                return None
            ancestor = await self.contexts.instance_by_id(ancestorid, Strictness.IGNORE_MISSING)
            if ancestor is None:
                logger.debug("Context %s from path %r does not exist, cannot find tenantid", ancestorid, path)
                return None
            return ancestor.tenantid

        logger.debug("Context path %r is too short to find tenantid", path)
        return None
