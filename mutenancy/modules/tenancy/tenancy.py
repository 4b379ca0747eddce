"""Tenant feature provider and the request scoped "current tenant"."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.config import settings
from mutenancy.models.user import User

logger = logging.getLogger(__name__)

_current_tenantid: ContextVar[int | None] = ContextVar("current_tenantid", default=None)


def set_current_tenantid(tenantid: int | None) -> Token[int | None]:
    """Put a tenant in scope, returns the token needed to restore the previous one."""
    return _current_tenantid.set(tenantid)


def reset_current_tenantid(token: Token[int | None]) -> None:
    _current_tenantid.reset(token)


@contextmanager
def tenant_scope(tenantid: int | None) -> Iterator[int | None]:
    """Evaluate the enclosed block with ``tenantid`` as the current tenant."""
    token = _current_tenantid.set(tenantid)
    logger.debug("Entered tenant scope %s", tenantid)
    try:
        yield tenantid
    finally:
        _current_tenantid.reset(token)


class Tenancy:
    """Entry points of the tenant feature, resolved through the activation gate."""

    @classmethod
    def is_active(cls) -> bool:
        return settings.multitenancy_enabled

    @classmethod
    def get_current_tenantid(cls) -> int | None:
        return _current_tenantid.get()

    @classmethod
    async def get_user_tenantid(cls, db: AsyncSession, userid: int) -> int | None:
        result = await db.execute(select(User.tenantid).where(User.id == userid))
        return result.scalar_one_or_none()
