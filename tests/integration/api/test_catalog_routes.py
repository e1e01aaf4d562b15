"""Integration tests for permission and role endpoints."""

import pytest
from httpx import AsyncClient


pytestmark = pytest.mark.integration


class TestPermissionRoutes:
    """Tests for /api/v1/permissions."""

    async def test_list_includes_matrix(self, client: AsyncClient, super_admin_headers):
        response = await client.get("/api/v1/permissions", headers=super_admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 45
        assert data["matrix"]["orders"]["approve"] is True
        assert data["matrix"]["orders"]["import"] is False

    async def test_filter_by_module(self, client: AsyncClient, super_admin_headers):
        response = await client.get(
            "/api/v1/permissions",
            params={"module": "settings"},
            headers=super_admin_headers,
        )

        assert response.status_code == 200
        assert {p["name"] for p in response.json()["items"]} == {
            "settings-read",
            "settings-update",
            "settings-manage",
        }

    async def test_register_and_duplicate(self, client: AsyncClient, super_admin_headers):
        payload = {"name": "Orders-Import", "module": "orders", "action": "import"}

        created = await client.post("/api/v1/permissions", json=payload, headers=super_admin_headers)
        assert created.status_code == 201
        assert created.json()["name"] == "orders-import"
        assert created.json()["key"] == "orders:import"

        duplicate = await client.post(
            "/api/v1/permissions", json=payload, headers=super_admin_headers
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["type"].endswith("/duplicate_capability")

    async def test_invalid_name(self, client: AsyncClient, super_admin_headers):
        response = await client.post(
            "/api/v1/permissions",
            json={"name": "orders_import!", "module": "orders", "action": "import"},
            headers=super_admin_headers,
        )

        assert response.status_code == 422

    async def test_retire_in_use(self, client: AsyncClient, super_admin_headers, permission_by_name):
        orders_read = await permission_by_name("orders-read")

        response = await client.delete(
            f"/api/v1/permissions/{orders_read.id}",
            headers=super_admin_headers,
        )

        assert response.status_code == 409
        assert response.json()["type"].endswith("/in_use")

    async def test_retire_requires_super_admin(
        self, client: AsyncClient, make_staff, role_by_name, permission_by_name, headers_for
    ):
        admin = await make_staff(role=await role_by_name("Admin"))
        orders_read = await permission_by_name("orders-read")

        response = await client.delete(
            f"/api/v1/permissions/{orders_read.id}",
            headers=headers_for(admin),
        )

        assert response.status_code == 403


class TestRoleRoutes:
    """Tests for /api/v1/roles."""

    async def test_create_role(self, client: AsyncClient, super_admin_headers, permission_by_name):
        orders_read = await permission_by_name("orders-read")

        response = await client.post(
            "/api/v1/roles",
            json={"name": "Cashier", "level": 30, "permission_ids": [str(orders_read.id)]},
            headers=super_admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["is_system_role"] is False
        assert data["permission_count"] == 1
        assert data["permission_matrix"]["orders"]["read"] is True
        assert data["permission_matrix"]["orders"]["update"] is False

    async def test_create_reserved_name(self, client: AsyncClient, super_admin_headers):
        response = await client.post(
            "/api/v1/roles",
            json={"name": "Regional SuperAdmin"},
            headers=super_admin_headers,
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/reserved_role_name")

    async def test_create_invalid_level(self, client: AsyncClient, super_admin_headers):
        response = await client.post(
            "/api/v1/roles",
            json={"name": "Too High", "level": 101},
            headers=super_admin_headers,
        )

        assert response.status_code == 422

    async def test_available_excludes_top_role(self, client: AsyncClient, super_admin_headers):
        response = await client.get("/api/v1/roles/available", headers=super_admin_headers)

        assert response.status_code == 200
        names = [r["name"] for r in response.json()["items"]]
        assert names == ["Admin", "Manager", "Agent", "Support"]

    async def test_admin_cannot_edit_system_role(
        self, client: AsyncClient, make_staff, role_by_name, headers_for
    ):
        admin = await make_staff(role=await role_by_name("Admin"))
        agent = await role_by_name("Agent")

        response = await client.patch(
            f"/api/v1/roles/{agent.id}",
            json={"level": 45},
            headers=headers_for(admin),
        )

        assert response.status_code == 403
        assert response.json()["type"].endswith("/protected_role")

    async def test_delete_role_in_use(
        self, client: AsyncClient, super_admin_headers, make_staff, permission_by_name
    ):
        """A custom role held by a staff member cannot be deleted."""
        orders_read = await permission_by_name("orders-read")
        created = await client.post(
            "/api/v1/roles",
            json={"name": "Holder", "permission_ids": [str(orders_read.id)]},
            headers=super_admin_headers,
        )
        role_id = created.json()["id"]

        staff = await make_staff()
        assigned = await client.post(
            f"/api/v1/staff/{staff.id}/role",
            json={"role_id": role_id},
            headers=super_admin_headers,
        )
        assert assigned.status_code == 200

        response = await client.delete(f"/api/v1/roles/{role_id}", headers=super_admin_headers)

        assert response.status_code == 409
        assert response.json()["staff_count"] == 1

    async def test_role_edit_does_not_change_holder_access(
        self, client: AsyncClient, super_admin_headers, make_staff, permission_by_name, headers_for
    ):
        """Adding a permission to a role does not grant it to existing holders."""
        staff_read = await permission_by_name("staff-management-read")
        created = await client.post(
            "/api/v1/roles",
            json={"name": "Viewer", "permission_ids": []},
            headers=super_admin_headers,
        )
        role_id = created.json()["id"]
        staff = await make_staff()
        await client.post(
            f"/api/v1/staff/{staff.id}/role",
            json={"role_id": role_id},
            headers=super_admin_headers,
        )

        await client.patch(
            f"/api/v1/roles/{role_id}",
            json={"permission_ids": [str(staff_read.id)]},
            headers=super_admin_headers,
        )
        before = await client.get("/api/v1/roles", headers=headers_for(staff))
        assert before.status_code == 403

        await client.post(
            f"/api/v1/staff/{staff.id}/role",
            json={"role_id": role_id},
            headers=super_admin_headers,
        )
        after = await client.get("/api/v1/roles", headers=headers_for(staff))
        assert after.status_code == 200
