"""Tenancy module constants."""

from mutenancy.models.enums import ContextLevel

TENANT_LEVEL = ContextLevel.TENANT

# Depth of tenant contexts and of category contexts that can be tenant roots
TENANT_DEPTH = 2
# Depth of user contexts that belong to a tenant
TENANT_MEMBER_DEPTH = 3

# Tenant id sentinel meaning "whichever tenant is currently in scope"
CURRENT_TENANT = -1

# Config namespaces
ROOT_NAMESPACE = "core"
# Host specific name of the root namespace, read the same as "core"
ROOT_NAMESPACE_NAME = "site"
ROOT_NAMESPACE_ALIASES = ("", ROOT_NAMESPACE, ROOT_NAMESPACE_NAME)

# Display strings and administration
STRING_COMPONENT = "tenancy"
TENANT_ADMIN_PATH = "/admin/tenancy/tenant"

# Routes excluded from tenant scoping
EXCLUDED_ROUTES = [
    "/health",
    "/api/docs",
    "/api/openapi.json",
]
