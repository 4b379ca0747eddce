"""Members of archived tenants are treated as suspended users."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from mutenancy.models.user import User
from mutenancy.modules.tenancy.activation import ActivationGate, default_gate
from mutenancy.modules.tenancy.registry import TenantRegistry
from mutenancy.modules.tenancy.tenancy import Tenancy

logger = logging.getLogger(__name__)


async def is_user_archived(
    db: AsyncSession,
    user_or_id: User | int,
    gate: ActivationGate | None = None,
    registry: TenantRegistry | None = None,
) -> bool:
    """Return True when the user belongs to an archived tenant.

    Accepts a user id or any object with an ``id``; a ``tenantid``
    attribute on the object is trusted instead of reading the user row.
    """
    gate = gate or default_gate
    if not gate.is_active():
        return False

    if isinstance(user_or_id, int):
        tenantid = await Tenancy.get_user_tenantid(db, user_or_id)
    elif hasattr(user_or_id, "tenantid"):
        tenantid = user_or_id.tenantid
    else:
        tenantid = await Tenancy.get_user_tenantid(db, user_or_id.id)

    if not tenantid:
        return False

    tenant = await (registry or TenantRegistry(db, gate)).fetch(tenantid)
    if tenant is not None and tenant.archived:
        logger.debug("User belongs to archived tenant %s", tenantid)
        return True
    return False
