"""ContextService: storage operations shared by all context levels."""

from __future__ import annotations

import logging

from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, SessionTransaction

from mutenancy.exceptions import NotFoundException
from mutenancy.models.capability import Capability
from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.modules.context.cache import ContextCache, context_cache
from mutenancy.modules.context.constants import DEFAULT_CAPABILITY_SORT, Strictness
from mutenancy.modules.context.levels import ContextLevelRegistry, TenantIdResolver
from mutenancy.modules.context.schemas import ContextRecord

logger = logging.getLogger(__name__)

# Session.info key holding the cache entries added by the open transaction
PENDING_CACHE_ENTRIES = "context_cache_pending"


def path_depth(path: str | None) -> int:
    """Number of ids in a materialized path, ``"/1/23"`` has depth 2."""
    if not path:
        return 0
    return len([part for part in path.split("/") if part])


@event.listens_for(Session, "after_commit")
def _keep_committed_entries(session: Session) -> None:
    session.info.pop(PENDING_CACHE_ENTRIES, None)


@event.listens_for(Session, "after_transaction_end")
def _evict_uncommitted_entries(session: Session, transaction: SessionTransaction) -> None:
    """Drop nodes cached by a transaction that ended without committing."""
    if transaction.parent is not None:
        return
    pending = session.info.pop(PENDING_CACHE_ENTRIES, None)
    if not pending:
        return
    for cache, context in pending:
        cache.discard(context)
    logger.debug("Evicted %d uncommitted context cache entries", len(pending))


class ContextService:
    def __init__(self, db: AsyncSession, cache: ContextCache | None = None):
        self.db = db
        self.cache = cache if cache is not None else context_cache

    def remember(self, context) -> None:
        """Cache a node; it is evicted again if the transaction does not commit."""
        self.cache.add(context)
        self.db.info.setdefault(PENDING_CACHE_ENTRIES, []).append((self.cache, context))

    async def get_system_context(self) -> ContextRecord:
        """Return the root of the tree, creating it on first use."""
        cached = self.cache.get(ContextLevel.SYSTEM, 0)
        if cached is not None:
            return cached

        result = await self.db.execute(
            select(Context).where(
                Context.contextlevel == ContextLevel.SYSTEM,
                Context.instanceid == 0,
            )
        )
        record = result.scalar_one_or_none()
        if record is None:
            record = Context(contextlevel=ContextLevel.SYSTEM, instanceid=0, depth=1)
            self.db.add(record)
            await self.db.flush()
            record.path = f"/{record.id}"
            await self.db.flush()
            logger.info("Created system context %s", record.id)

        system = ContextRecord.model_validate(record)
        self.remember(system)
        return system

    async def insert_context_record(
        self,
        contextlevel: int,
        instanceid: int,
        parentpath: str | None,
        tenantid_resolver: TenantIdResolver | None = None,
    ) -> Context:
        """Insert a new context row below ``parentpath``.

        Without a parent path the row is stored with a NULL path and depth 0,
        the level's path builder fills it in later. ``tenantid_resolver``
        replaces the registered resolver for this insert.
        """
        record = Context(contextlevel=contextlevel, instanceid=instanceid, depth=0, path=None)
        self.db.add(record)
        await self.db.flush()

        if parentpath is not None:
            record.path = f"{parentpath}/{record.id}"
            record.depth = path_depth(record.path)

        resolver = tenantid_resolver or ContextLevelRegistry.get_tenantid_resolver()
        if resolver is not None:
            record.tenantid = await resolver(self.db, contextlevel, instanceid, record.path)

        await self.db.flush()
        logger.debug(
            "Inserted context %s (level=%s, instance=%s, path=%s)",
            record.id, contextlevel, instanceid, record.path,
        )
        return record

    async def instance_by_id(
        self, contextid: int, strictness: Strictness = Strictness.MUST_EXIST
    ) -> ContextRecord | None:
        cached = self.cache.get_by_id(contextid)
        if cached is not None:
            return cached

        # Bulk path and tenantid updates bypass the identity map
        result = await self.db.execute(
            select(Context)
            .where(Context.id == contextid)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one_or_none()
        if record is None:
            if strictness == Strictness.MUST_EXIST:
                raise NotFoundException(f"Context {contextid} not found")
            return None

        context = ContextRecord.model_validate(record)
        self.remember(context)
        return context

    async def get_capabilities(
        self, levels: tuple[int, ...], sort: tuple[str, ...] = DEFAULT_CAPABILITY_SORT
    ) -> list[Capability]:
        result = await self.db.execute(
            select(Capability)
            .where(Capability.contextlevel.in_([int(level) for level in levels]))
            .order_by(*[getattr(Capability, column) for column in sort])
        )
        return list(result.scalars().all())

    async def create_missing_instances(self) -> None:
        """Create context rows for every level instance that lacks one."""
        for descriptor in ContextLevelRegistry.all():
            if descriptor.create_instances is not None:
                await descriptor.create_instances(self.db)

    async def build_all_paths(self, force: bool = False) -> None:
        for descriptor in ContextLevelRegistry.all():
            if descriptor.build_paths is not None:
                await descriptor.build_paths(self.db, force)

    async def cleanup_instances(self) -> int:
        """Delete context rows whose backing instance no longer exists.

        Returns the number of rows deleted.
        """
        deleted = 0
        for descriptor in ContextLevelRegistry.all():
            if descriptor.cleanup_query is None:
                continue
            result = await self.db.execute(descriptor.cleanup_query())
            for record in result.scalars().all():
                self.cache.remove(record)
                await self.db.delete(record)
                deleted += 1
        if deleted:
            await self.db.flush()
            logger.info("Deleted %d stale context rows", deleted)
        return deleted
