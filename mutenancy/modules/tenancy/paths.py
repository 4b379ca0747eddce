"""PathBuilder: keeps depth, path and tenantid of tenant contexts and their members."""

from __future__ import annotations

import logging

from sqlalchemy import String, and_, cast, exists, literal, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.models.tenant import Tenant
from mutenancy.models.user import User
from mutenancy.modules.context.service import ContextService
from mutenancy.modules.tenancy.activation import ActivationGate, default_gate
from mutenancy.modules.tenancy.constants import TENANT_DEPTH, TENANT_LEVEL, TENANT_MEMBER_DEPTH

logger = logging.getLogger(__name__)


class PathBuilder:
    def __init__(
        self,
        db: AsyncSession,
        gate: ActivationGate | None = None,
        contexts: ContextService | None = None,
    ):
        self.db = db
        self.gate = gate or default_gate
        self.contexts = contexts or ContextService(db)

    async def build_paths(self, force: bool = False) -> None:
        """Rebuild tenant context paths, then move tenant members below them.

        With ``force`` every tenant context path is rewritten, otherwise only
        rows with a missing path or a wrong depth.
        """
        if not self.gate.is_active():
            return

        await self._build_tenant_paths(force)
        await self._repair_member_paths()

    async def _build_tenant_paths(self, force: bool) -> int:
        stale = or_(Context.path.is_(None), Context.depth != TENANT_DEPTH)

        if not force:
            result = await self.db.execute(
                select(Context.id).where(Context.contextlevel == TENANT_LEVEL, stale).limit(1)
            )
            if result.first() is None:
                return 0

        system = await self.contexts.get_system_context()
        stmt = (
            update(Context)
            .where(
                Context.contextlevel == TENANT_LEVEL,
                exists().where(Tenant.id == Context.instanceid),
            )
            .values(
                depth=TENANT_DEPTH,
                path=literal(f"{system.path}/") + cast(Context.id, String),
                tenantid=Context.instanceid,
            )
            .execution_options(synchronize_session=False)
        )
        if not force:
            stmt = stmt.where(stale)

        result = await self.db.execute(stmt)
        logger.info("Rebuilt paths of %d tenant contexts", result.rowcount)
        if result.rowcount:
            self.contexts.cache.remove_level(TENANT_LEVEL)
        return result.rowcount

    async def _repair_member_paths(self) -> int:
        """Move user contexts of tenant members below their tenant context.

        Rows are fixed one at a time in id order; membership changes are rare
        so there are few of them.
        """
        tc = aliased(Context, name="tc")
        expected_path = tc.path + "/" + cast(Context.id, String)

        result = await self.db.execute(
            select(
                Context.id,
                User.tenantid.label("membertenantid"),
                tc.path.label("parentpath"),
            )
            .select_from(Context)
            .join(
                User,
                and_(
                    User.id == Context.instanceid,
                    Context.contextlevel == ContextLevel.USER,
                    User.tenantid.isnot(None),
                ),
            )
            .join(
                tc,
                and_(
                    tc.instanceid == User.tenantid,
                    tc.contextlevel == TENANT_LEVEL,
                    tc.path.isnot(None),
                    tc.depth == TENANT_DEPTH,
                ),
            )
            .where(
                or_(
                    Context.depth != TENANT_MEMBER_DEPTH,
                    Context.tenantid.is_(None),
                    Context.tenantid != User.tenantid,
                    Context.path.is_(None),
                    Context.path != expected_path,
                )
            )
            .order_by(Context.id.asc())
        )
        rows = result.all()

        for row in rows:
            await self.db.execute(
                update(Context)
                .where(Context.id == row.id)
                .values(
                    tenantid=row.membertenantid,
                    path=f"{row.parentpath}/{row.id}",
                    depth=TENANT_MEMBER_DEPTH,
                )
                .execution_options(synchronize_session=False)
            )
            cached = self.contexts.cache.get_by_id(row.id)
            if cached is not None:
                self.contexts.cache.remove(cached)

        if rows:
            logger.info("Moved %d user contexts below their tenant", len(rows))
        return len(rows)
