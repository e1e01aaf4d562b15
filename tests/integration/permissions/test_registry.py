"""Integration tests for the permission registry."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from remiwire.core.errors import DuplicateCapabilityError, InUseError
from remiwire.core.permissions.models import PermissionAction, PermissionModule
from remiwire.modules.permissions.repos import PermissionRepository
from remiwire.modules.permissions.schemas import PermissionUpdate
from remiwire.modules.permissions.services import PermissionService
from remiwire.modules.roles.repos import RoleRepository
from remiwire.modules.roles.services import RoleService
from remiwire.modules.staff.repos import StaffRepository
from tests.factories.staff import PermissionCreateFactory, RoleCreateFactory


pytestmark = pytest.mark.integration


class TestPermissionRegistry:
    """Tests for PermissionService against the database."""

    @pytest.fixture
    def service(self, db: AsyncSession) -> PermissionService:
        return PermissionService(PermissionRepository(db))

    @pytest.fixture
    def roles(self, db: AsyncSession) -> RoleService:
        return RoleService(
            RoleRepository(db),
            PermissionRepository(db),
            StaffRepository(db),
        )

    async def test_register_new_capability(self, service, seeded):  # noqa: ARG002
        permission = await service.register(PermissionCreateFactory.build())

        assert permission.id is not None
        assert permission.name == "orders-import"
        assert permission.key == "orders:import"
        assert permission.is_active is True

    async def test_register_duplicate_name(self, service, seeded):  # noqa: ARG002
        data = PermissionCreateFactory.build(
            name="orders-read",
            action=PermissionAction.IMPORT,
        )

        with pytest.raises(DuplicateCapabilityError) as exc_info:
            await service.register(data)

        assert exc_info.value.details["field"] == "name"

    async def test_register_duplicate_module_action(self, service, seeded):  # noqa: ARG002
        data = PermissionCreateFactory.build(
            name="orders-view",
            action=PermissionAction.READ,
        )

        with pytest.raises(DuplicateCapabilityError) as exc_info:
            await service.register(data)

        assert exc_info.value.details["field"] == "module/action"

    async def test_registry_still_usable_after_duplicate(self, service, seeded):  # noqa: ARG002
        with pytest.raises(DuplicateCapabilityError):
            await service.register(PermissionCreateFactory.build(name="orders-read"))

        permission = await service.register(PermissionCreateFactory.build())

        assert permission.name == "orders-import"

    async def test_unique_index_rejects_duplicate_missed_by_lookup(
        self, service, seeded, monkeypatch  # noqa: ARG002
    ):
        """A concurrent writer can pass the lookup; the unique index still wins."""
        monkeypatch.setattr(service.repo, "find_conflict", AsyncMock(return_value=None))

        with pytest.raises(DuplicateCapabilityError) as exc_info:
            await service.register(
                PermissionCreateFactory.build(name="orders-read", action=PermissionAction.READ)
            )

        assert exc_info.value.details["field"] == "name"
        assert len(await service.list_permissions()) == 45

    async def test_list_filters_by_module(self, service, seeded):  # noqa: ARG002
        permissions = await service.list_permissions(module=PermissionModule.REPORTS)

        assert sorted(p.name for p in permissions) == [
            "reports-create",
            "reports-export",
            "reports-read",
        ]

    async def test_update_description_and_active_flag(self, service, seeded):  # noqa: ARG002
        permission = await service.register(PermissionCreateFactory.build())

        updated = await service.update(
            permission.id,
            PermissionUpdate(description="Bulk import", is_active=False),
        )

        assert updated.description == "Bulk import"
        assert updated.is_active is False

    async def test_update_to_taken_name(self, service, seeded):  # noqa: ARG002
        permission = await service.register(PermissionCreateFactory.build())

        with pytest.raises(DuplicateCapabilityError):
            await service.update(permission.id, PermissionUpdate(name="orders-read"))

    async def test_retire_referenced_capability(self, service, permission_by_name):
        """orders-read is granted by Agent, so it cannot be retired."""
        orders_read = await permission_by_name("orders-read")

        with pytest.raises(InUseError) as exc_info:
            await service.retire(orders_read.id)

        assert exc_info.value.details["role_count"] >= 1

    async def test_retire_after_roles_release_it(self, service, roles, seeded):  # noqa: ARG002
        permission = await service.register(PermissionCreateFactory.build())
        role = await roles.create(RoleCreateFactory.build(permission_ids=[permission.id]))

        with pytest.raises(InUseError):
            await service.retire(permission.id)

        await roles.delete(role.id)
        await service.retire(permission.id)

        assert await service.repo.get_by_id(permission.id) is None
