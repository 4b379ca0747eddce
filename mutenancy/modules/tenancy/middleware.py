"""Middleware that puts the authenticated user's tenant in scope for the request."""

import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from mutenancy.modules.tenancy.constants import EXCLUDED_ROUTES
from mutenancy.modules.tenancy.tenancy import tenant_scope

logger = logging.getLogger(__name__)


class TenantScopeMiddleware(BaseHTTPMiddleware):
    """Reads ``request.state.user.tenantid`` (set by auth middleware upstream).

    Requests without a user, without a tenant, or on excluded routes run
    unscoped, which makes config reads fall back to global values.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        if any(path.startswith(route) for route in EXCLUDED_ROUTES):
            return await call_next(request)

        user = getattr(request.state, "user", None)
        tenantid = getattr(user, "tenantid", None) if user is not None else None
        if not tenantid:
            return await call_next(request)

        with tenant_scope(tenantid):
            return await call_next(request)
