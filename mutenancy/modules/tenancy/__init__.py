"""Tenancy module: tenant context level, tenantid maintenance and tenant aware config."""

from mutenancy.modules.tenancy.activation import ActivationGate, default_gate, is_active
from mutenancy.modules.tenancy.archival import is_user_archived
from mutenancy.modules.tenancy.config_resolver import ConfigResolver
from mutenancy.modules.tenancy.config_store import GlobalConfigStore, TenantConfigStore
from mutenancy.modules.tenancy.paths import PathBuilder
from mutenancy.modules.tenancy.reconciler import TenantIdReconciler
from mutenancy.modules.tenancy.registry import TenantRegistry
from mutenancy.modules.tenancy.schemas import TenantRecord
from mutenancy.modules.tenancy.tenancy import Tenancy, tenant_scope
from mutenancy.modules.tenancy.tenant_context import (
    TENANT_LEVEL_DESCRIPTOR,
    TenantContext,
    TenantContextService,
)

__all__ = [
    # Activation
    "ActivationGate",
    "default_gate",
    "is_active",
    "Tenancy",
    "tenant_scope",
    # Tenants
    "TenantRecord",
    "TenantRegistry",
    "is_user_archived",
    # Config
    "ConfigResolver",
    "GlobalConfigStore",
    "TenantConfigStore",
    # Context tree
    "TENANT_LEVEL_DESCRIPTOR",
    "TenantContext",
    "TenantContextService",
    "PathBuilder",
    "TenantIdReconciler",
]
