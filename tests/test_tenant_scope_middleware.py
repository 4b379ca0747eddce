"""Tests for TenantScopeMiddleware using an ASGI client."""

from types import SimpleNamespace

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from starlette.middleware.base import BaseHTTPMiddleware

from mutenancy.modules.tenancy.middleware import TenantScopeMiddleware
from mutenancy.modules.tenancy.tenancy import Tenancy


class FakeAuthMiddleware(BaseHTTPMiddleware):
    """Attaches a user whose tenant comes from the X-Tenant header."""

    async def dispatch(self, request: Request, call_next):
        tenant = request.headers.get("X-Tenant")
        if tenant is not None:
            request.state.user = SimpleNamespace(id=100, tenantid=int(tenant) or None)
        return await call_next(request)


def _build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/current-tenant")
    async def current_tenant():
        return {"tenantid": Tenancy.get_current_tenantid()}

    @app.get("/health")
    async def health():
        return {"tenantid": Tenancy.get_current_tenantid()}

    # Added last runs first
    app.add_middleware(TenantScopeMiddleware)
    app.add_middleware(FakeAuthMiddleware)
    return app


@pytest.mark.asyncio
async def test_request_runs_in_user_tenant_scope():
    transport = ASGITransport(app=_build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/current-tenant", headers={"X-Tenant": "7"})

    assert response.status_code == 200
    assert response.json() == {"tenantid": 7}
    assert Tenancy.get_current_tenantid() is None


@pytest.mark.asyncio
async def test_anonymous_and_tenantless_requests_are_unscoped():
    transport = ASGITransport(app=_build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        anonymous = await client.get("/current-tenant")
        tenantless = await client.get("/current-tenant", headers={"X-Tenant": "0"})

    assert anonymous.json() == {"tenantid": None}
    assert tenantless.json() == {"tenantid": None}


@pytest.mark.asyncio
async def test_excluded_routes_are_unscoped():
    transport = ASGITransport(app=_build_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health", headers={"X-Tenant": "7"})

    assert response.json() == {"tenantid": None}
