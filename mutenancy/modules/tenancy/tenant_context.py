"""Tenant context level: the node type, its service and its level registration."""

from __future__ import annotations

import logging
from functools import partial

import httpx
from sqlalchemy import Select, exists, false, insert, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.exceptions import InvalidContextRecordException, NotFoundException
from mutenancy.models.capability import Capability
from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.models.tenant import Tenant
from mutenancy.modules.context.cache import ContextCache
from mutenancy.modules.context.constants import Strictness
from mutenancy.modules.context.levels import ContextLevelDescriptor, ContextLevelRegistry
from mutenancy.modules.context.service import ContextService
from mutenancy.modules.tenancy.activation import ActivationGate, default_gate
from mutenancy.modules.tenancy.constants import STRING_COMPONENT, TENANT_ADMIN_PATH, TENANT_LEVEL
from mutenancy.modules.tenancy.paths import PathBuilder
from mutenancy.modules.tenancy.reconciler import TenantIdReconciler
from mutenancy.modules.tenancy.registry import TenantRegistry
from mutenancy.text import build_url, format_string, get_string

logger = logging.getLogger(__name__)


class TenantContext:
    """Context node of one tenant, always a direct child of the system context.

    Use ``TenantContextService.instance()`` to obtain one; the constructor
    only wraps an existing row.
    """

    LEVEL = TENANT_LEVEL

    def __init__(self, record) -> None:
        if record.contextlevel != self.LEVEL:
            raise InvalidContextRecordException(
                f"Invalid contextlevel {record.contextlevel} in TenantContext constructor"
            )
        self.id: int = record.id
        self.contextlevel: int = record.contextlevel
        self.instanceid: int = record.instanceid
        self.path: str | None = record.path
        self.depth: int = record.depth
        self.tenantid: int | None = record.tenantid

    def __repr__(self) -> str:
        return f"TenantContext(id={self.id!r}, tenantid={self.instanceid!r}, path={self.path!r})"

    @staticmethod
    def short_name() -> str:
        return TENANT_LEVEL_DESCRIPTOR.short_name

    @staticmethod
    def level_name() -> str:
        return get_string("tenant", STRING_COMPONENT)

    async def get_context_name(
        self,
        registry: TenantRegistry,
        withprefix: bool = True,
        short: bool = False,
        escape: bool = True,
    ) -> str:
        """Human readable name, empty when the tenant has been deleted.

        ``short`` uses the tenant idnumber instead of its full name.
        """
        tenant = await registry.fetch(self.instanceid)
        if tenant is None:
            return ""

        name = format_string(tenant.idnumber if short else tenant.name, escape=escape)
        if withprefix:
            name = f"{self.level_name()}: {name}"
        return name

    def get_url(self) -> httpx.URL:
        return build_url(TENANT_ADMIN_PATH, {"id": self.instanceid})


def tenant_cleanup_query(gate: ActivationGate | None = None) -> Select:
    """Tenant context rows whose tenant no longer exists."""
    gate = gate or default_gate
    if not gate.is_active():
        # Tenant contexts cannot exist without the feature
        return select(Context).where(false())

    return (
        select(Context)
        .outerjoin(Tenant, Context.instanceid == Tenant.id)
        .where(Tenant.id.is_(None), Context.contextlevel == TENANT_LEVEL)
    )


class TenantContextService:
    def __init__(
        self,
        db: AsyncSession,
        gate: ActivationGate | None = None,
        contexts: ContextService | None = None,
    ):
        self.db = db
        self.gate = gate or default_gate
        self.contexts = contexts or ContextService(db)

    @property
    def cache(self) -> ContextCache:
        return self.contexts.cache

    async def instance(
        self, tenantid: int, strictness: Strictness = Strictness.MUST_EXIST
    ) -> TenantContext | None:
        """Return the context of a tenant, creating the row on first use.

        Returns None when multi-tenancy is inactive, or when the tenant does
        not exist and ``strictness`` is IGNORE_MISSING.
        """
        if not self.gate.is_active():
            return None

        cached = self.cache.get(TENANT_LEVEL, tenantid)
        if cached is not None:
            return cached if isinstance(cached, TenantContext) else TenantContext(cached)

        result = await self.db.execute(
            select(Context).where(
                Context.contextlevel == TENANT_LEVEL,
                Context.instanceid == tenantid,
            ).execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()

        if record is None:
            # Read the table directly, registry values may be stale
            tenant_result = await self.db.execute(select(Tenant.id).where(Tenant.id == tenantid))
            if tenant_result.scalar_one_or_none() is None:
                if strictness == Strictness.MUST_EXIST:
                    raise NotFoundException(f"Tenant {tenantid} not found")
                return None
            system = await self.contexts.get_system_context()
            record = await self.contexts.insert_context_record(
                TENANT_LEVEL, tenantid, system.path, partial(_resolve_tenantid, gate=self.gate)
            )
            logger.info("Created context %s for tenant %s", record.id, tenantid)

        context = TenantContext(record)
        self.contexts.remember(context)
        return context

    async def get_capabilities(self) -> list[Capability]:
        return await self.contexts.get_capabilities(TENANT_LEVEL_DESCRIPTOR.capability_levels)

    async def create_level_instances(self) -> int:
        """Insert the missing context rows of all tenants in one statement.

        New rows have no path yet, ``PathBuilder.build_paths`` places them.
        """
        if not self.gate.is_active():
            return 0

        missing = (
            select(
                literal(int(TENANT_LEVEL)),
                Tenant.id,
                literal(0),
                Tenant.id,
            )
            .where(
                ~exists().where(
                    Context.instanceid == Tenant.id,
                    Context.contextlevel == TENANT_LEVEL,
                )
            )
            .order_by(Tenant.id)
        )
        result = await self.db.execute(
            insert(Context.__table__).from_select(
                ["contextlevel", "instanceid", "depth", "tenantid"], missing
            )
        )
        logger.info("Created %d missing tenant contexts", result.rowcount)
        return result.rowcount

    def cleanup_query(self) -> Select:
        return tenant_cleanup_query(self.gate)


async def _create_instances(db: AsyncSession) -> None:
    await TenantContextService(db).create_level_instances()


async def _build_paths(db: AsyncSession, force: bool) -> None:
    await PathBuilder(db).build_paths(force)


async def _resolve_tenantid(
    db: AsyncSession,
    contextlevel: int,
    instanceid: int,
    path: str | None,
    gate: ActivationGate | None = None,
) -> int | None:
    if not (gate or default_gate).is_active():
        return None
    return await TenantIdReconciler(db).guess_tenantid(contextlevel, instanceid, path)


TENANT_LEVEL_DESCRIPTOR = ContextLevelDescriptor(
    level=TENANT_LEVEL,
    short_name="tenant",
    name_key="tenant",
    name_component=STRING_COMPONENT,
    instance_table=Tenant.__tablename__,
    possible_parent_levels=(ContextLevel.SYSTEM,),
    compatible_role_archetypes=("manager",),
    capability_levels=(TENANT_LEVEL, ContextLevel.USER, ContextLevel.SYSTEM),
    create_instances=_create_instances,
    build_paths=_build_paths,
    cleanup_query=tenant_cleanup_query,
)

ContextLevelRegistry.register(TENANT_LEVEL_DESCRIPTOR)
ContextLevelRegistry.set_tenantid_resolver(_resolve_tenantid)
