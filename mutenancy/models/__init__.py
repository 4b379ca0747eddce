# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from mutenancy.models.capability import Capability
from mutenancy.models.config import ConfigSetting, TenantConfigOverride
from mutenancy.models.context import Context
from mutenancy.models.enums import ContextLevel
from mutenancy.models.tenant import Tenant
from mutenancy.models.user import User

__all__ = [
    "Capability",
    "ConfigSetting",
    "Context",
    "ContextLevel",
    "Tenant",
    "TenantConfigOverride",
    "User",
]
