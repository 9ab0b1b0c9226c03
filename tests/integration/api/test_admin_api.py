"""
Integration tests for tenant administration endpoints

- Admin API key guard
- Provisioning, duplicates and reserved names
- Status changes take a tenant out of routing
- Metadata updates leave slug and scope_id untouched
- Destroy removes the scope
"""

import pytest
from httpx import AsyncClient

from tests.utils.storefront import ADMIN_HEADERS

TENANT_PAYLOAD = {
    "name": "Acme Shop",
    "email": "shop@acme.com",
    "owner_name": "Alice",
    "owner_email": "alice@acme.com",
    "owner_password": "SecurePass123!",
}


async def create_tenant(client: AsyncClient, **overrides):
    response = await client.post(
        "/admin/tenants", json={**TENANT_PAYLOAD, **overrides}, headers=ADMIN_HEADERS
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_admin_requires_api_key(client: AsyncClient):
    response = await client.get("/admin/tenants")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"

    response = await client.get("/admin/tenants", headers={"X-Admin-API-Key": "wrong"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_provision_tenant(client: AsyncClient, tenant_db_dir):
    data = await create_tenant(client)

    assert data["slug"] == "acme-shop"
    assert data["status"] == "active"
    assert data["scope_id"].startswith("db_acme_shop_")
    assert (tenant_db_dir / f"{data['scope_id']}.db").exists()

    response = await client.get(f"/admin/tenants/{data['id']}", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.json()["scope_id"] == data["scope_id"]

    response = await client.get("/admin/tenants", headers=ADMIN_HEADERS)
    assert [t["slug"] for t in response.json()] == ["acme-shop"]


@pytest.mark.asyncio
async def test_provision_duplicate_tenant(client: AsyncClient):
    await create_tenant(client)

    response = await client.post("/admin/tenants", json=TENANT_PAYLOAD, headers=ADMIN_HEADERS)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "TENANT_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_provision_reserved_name(client: AsyncClient):
    response = await client.post(
        "/admin/tenants", json={**TENANT_PAYLOAD, "name": "undefined"}, headers=ADMIN_HEADERS
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TENANT_IDENTIFIER"


@pytest.mark.asyncio
async def test_suspended_tenant_is_not_routable(client: AsyncClient):
    data = await create_tenant(client)
    shop_headers = {"X-Tenant-ID": "acme-shop"}
    assert (await client.get("/products", headers=shop_headers)).status_code == 200

    response = await client.put(
        f"/admin/tenants/{data['id']}/status",
        json={"status": "suspended"},
        headers=ADMIN_HEADERS,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "suspended"

    response = await client.get("/products", headers=shop_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_change_status_rejects_unknown_value(client: AsyncClient):
    data = await create_tenant(client)

    response = await client.put(
        f"/admin/tenants/{data['id']}/status",
        json={"status": "archived"},
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TENANT_STATUS"


@pytest.mark.asyncio
async def test_destroy_tenant(client: AsyncClient, tenant_db_dir):
    data = await create_tenant(client)

    response = await client.delete(f"/admin/tenants/{data['id']}", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert response.json() == {
        "status": "destroyed",
        "tenant_id": data["id"],
        "scope_id": data["scope_id"],
    }
    assert not (tenant_db_dir / f"{data['scope_id']}.db").exists()

    response = await client.get(f"/admin/tenants/{data['id']}", headers=ADMIN_HEADERS)
    assert response.status_code == 404

    response = await client.get("/products", headers={"X-Tenant-ID": "acme-shop"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_tenant_metadata(client: AsyncClient):
    data = await create_tenant(client)

    response = await client.put(
        f"/admin/tenants/{data['id']}",
        json={
            "name": "Acme Outlet",
            "plan": "premium",
            "settings": {"currency": "EUR"},
            "slug": "hijacked",
            "scope_id": "db_hijacked_00000000",
        },
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["name"] == "Acme Outlet"
    assert updated["plan"] == "premium"
    assert updated["settings"] == {"currency": "EUR"}
    assert updated["email"] == "shop@acme.com"
    assert updated["slug"] == "acme-shop"
    assert updated["scope_id"] == data["scope_id"]

    # Still routed by the slug it was created with
    response = await client.get("/products", headers={"X-Tenant-ID": "acme-shop"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_tenant_rejects_taken_name(client: AsyncClient):
    await create_tenant(client)
    other = await create_tenant(client, name="Globex Shop")

    response = await client.put(
        f"/admin/tenants/{other['id']}", json={"name": "Acme Shop"}, headers=ADMIN_HEADERS
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "TENANT_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_update_unknown_tenant(client: AsyncClient):
    response = await client.put(
        "/admin/tenants/00000000-0000-0000-0000-000000000000",
        json={"plan": "basic"},
        headers=ADMIN_HEADERS,
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"
