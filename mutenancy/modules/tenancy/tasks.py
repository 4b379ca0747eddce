"""Celery tasks for context tree maintenance."""

from __future__ import annotations

import asyncio
import logging

from celery import shared_task

from mutenancy.database.engine import async_session
from mutenancy.modules.context.service import ContextService
from mutenancy.modules.tenancy.activation import is_active
from mutenancy.modules.tenancy.paths import PathBuilder
from mutenancy.modules.tenancy.reconciler import TenantIdReconciler
from mutenancy.modules.tenancy.tenant_context import TenantContextService

logger = logging.getLogger(__name__)


async def _fix_all_tenantids_async() -> dict:
    """Recompute tenantid of every context row."""
    if not is_active():
        logger.info("Multi-tenancy is inactive, skipping tenantid reconciliation")
        return {"skipped": True}

    async with async_session() as session:
        stats = await TenantIdReconciler(session).fix_all_tenantids()
        await session.commit()

    return {"skipped": False, **stats}


async def _build_context_paths_async(force: bool = False) -> dict:
    async with async_session() as session:
        await PathBuilder(session).build_paths(force)
        await session.commit()
    return {"force": force}


async def _create_tenant_contexts_async() -> dict:
    """Create missing tenant contexts, place them and drop orphaned ones."""
    async with async_session() as session:
        created = await TenantContextService(session).create_level_instances()
        await PathBuilder(session).build_paths(False)
        deleted = await ContextService(session).cleanup_instances()
        await session.commit()
    return {"created": created, "deleted": deleted}


@shared_task(name="tenancy.fix_all_tenantids")
def fix_all_tenantids() -> dict:
    return asyncio.run(_fix_all_tenantids_async())


@shared_task(name="tenancy.build_context_paths")
def build_context_paths(force: bool = False) -> dict:
    return asyncio.run(_build_context_paths_async(force))


@shared_task(name="tenancy.create_tenant_contexts")
def create_tenant_contexts() -> dict:
    return asyncio.run(_create_tenant_contexts_async())
