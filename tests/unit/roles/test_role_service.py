"""Unit tests for RoleService and PermissionService with mocked repositories."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from remiwire.core.errors import (
    DuplicateCapabilityError,
    DuplicateRoleError,
    InUseError,
    InvalidPermissionError,
    ProtectedRoleError,
)
from remiwire.core.permissions.context import StaffPrincipal, SuperAdminPrincipal
from remiwire.core.permissions.models import (
    Permission,
    PermissionAction,
    PermissionModule,
    Role,
)
from remiwire.modules.permissions.services import PermissionService, permission_matrix
from remiwire.modules.roles.schemas import RoleUpdate
from remiwire.modules.roles.services import RoleService
from tests.factories.staff import PermissionCreateFactory, RoleCreateFactory


pytestmark = pytest.mark.unit


def _permission(name: str = "orders-read", active: bool = True) -> Permission:
    module, _, action = name.rpartition("-")
    return Permission(
        id=uuid4(),
        name=name,
        module=PermissionModule(module),
        action=PermissionAction(action),
        is_active=active,
    )


def _role(name: str = "Cashier", system: bool = False) -> Role:
    return Role(
        id=uuid4(),
        name=name,
        level=10,
        is_active=True,
        is_system_role=system,
        permissions=[],
    )


def _passthrough(value):
    return value


class TestRoleService:
    """Tests for RoleService."""

    @pytest.fixture
    def repo(self):
        repo = AsyncMock()
        repo.get_by_name.return_value = None
        repo.create.side_effect = _passthrough
        repo.update.side_effect = _passthrough
        return repo

    @pytest.fixture
    def permission_repo(self):
        repo = AsyncMock()
        repo.get_by_ids.return_value = []
        return repo

    @pytest.fixture
    def staff_repo(self):
        repo = AsyncMock()
        repo.count_by_role.return_value = 0
        return repo

    @pytest.fixture
    def service(self, repo, permission_repo, staff_repo) -> RoleService:
        return RoleService(repo=repo, permission_repo=permission_repo, staff_repo=staff_repo)

    @pytest.mark.parametrize("name", ["Super Admin", "super-admin", "Team SuperAdmin"])
    async def test_create_rejects_reserved_name(self, service, repo, name):
        data = RoleCreateFactory.build(name=name)

        with pytest.raises(ProtectedRoleError) as exc_info:
            await service.create(data)

        assert exc_info.value.error_code == "reserved_role_name"
        repo.create.assert_not_awaited()

    async def test_create_rejects_duplicate_name(self, service, repo):
        repo.get_by_name.return_value = _role()

        with pytest.raises(DuplicateRoleError):
            await service.create(RoleCreateFactory.build(name="Cashier"))

    async def test_create_rejects_unknown_permissions(self, service, permission_repo):
        known = _permission()
        unknown = uuid4()
        permission_repo.get_by_ids.return_value = [known]

        with pytest.raises(InvalidPermissionError) as exc_info:
            await service.create(RoleCreateFactory.build(permission_ids=[known.id, unknown]))

        assert exc_info.value.details["invalid_ids"] == [str(unknown)]

    async def test_create_rejects_inactive_permissions(self, service, permission_repo):
        retired = _permission(active=False)
        permission_repo.get_by_ids.return_value = [retired]

        with pytest.raises(InvalidPermissionError):
            await service.create(RoleCreateFactory.build(permission_ids=[retired.id]))

    async def test_create_is_never_a_system_role(self, service, permission_repo):
        read = _permission()
        permission_repo.get_by_ids.return_value = [read]

        role = await service.create(RoleCreateFactory.build(permission_ids=[read.id]))

        assert role.is_system_role is False
        assert role.permissions == [read]

    async def test_update_system_role_by_staff_is_refused(self, service, repo):
        repo.get_by_id.return_value = _role(name="Agent", system=True)
        actor = StaffPrincipal(id=uuid4(), email="m@example.com")

        with pytest.raises(ProtectedRoleError):
            await service.update(uuid4(), RoleUpdate(level=50), actor=actor)

    async def test_update_system_role_by_super_admin(self, service, repo):
        role = _role(name="Agent", system=True)
        repo.get_by_id.return_value = role
        actor = SuperAdminPrincipal(id=uuid4(), email="root@example.com")

        updated = await service.update(role.id, RoleUpdate(level=50), actor=actor)

        assert updated.level == 50
        assert updated.updated_by_id == actor.id

    async def test_update_to_reserved_name(self, service, repo):
        repo.get_by_id.return_value = _role()

        with pytest.raises(ProtectedRoleError):
            await service.update(uuid4(), RoleUpdate(name="Super_Admin"))

    async def test_delete_system_role(self, service, repo):
        repo.get_by_id.return_value = _role(system=True)

        with pytest.raises(ProtectedRoleError):
            await service.delete(uuid4())

        repo.delete.assert_not_awaited()

    async def test_delete_role_in_use(self, service, repo, staff_repo):
        repo.get_by_id.return_value = _role()
        staff_repo.count_by_role.return_value = 3

        with pytest.raises(InUseError) as exc_info:
            await service.delete(uuid4())

        assert exc_info.value.details["staff_count"] == 3
        repo.delete.assert_not_awaited()

    async def test_delete_unused_role(self, service, repo):
        role = _role()
        repo.get_by_id.return_value = role

        await service.delete(role.id)

        repo.delete.assert_awaited_once_with(role)

    async def test_list_available_hides_reserved_names(self, service, repo):
        repo.list_roles.return_value = [_role("Super Admin", system=True), _role("Agent")]

        roles = await service.list_available()

        assert [r.name for r in roles] == ["Agent"]


class TestPermissionService:
    """Tests for PermissionService."""

    @pytest.fixture
    def repo(self):
        repo = AsyncMock()
        repo.find_conflict.return_value = None
        repo.count_role_references.return_value = 0
        repo.create.side_effect = _passthrough
        return repo

    @pytest.fixture
    def service(self, repo) -> PermissionService:
        return PermissionService(repo=repo)

    async def test_register_duplicate_name(self, service, repo):
        repo.find_conflict.return_value = _permission("orders-import")

        with pytest.raises(DuplicateCapabilityError) as exc_info:
            await service.register(PermissionCreateFactory.build())

        assert exc_info.value.details["field"] == "name"

    async def test_register_duplicate_pair(self, service, repo):
        repo.find_conflict.return_value = _permission("orders-import")

        with pytest.raises(DuplicateCapabilityError) as exc_info:
            await service.register(PermissionCreateFactory.build(name="orders-bulk-import"))

        assert exc_info.value.details["field"] == "module/action"

    async def test_register(self, service, repo):
        permission = await service.register(PermissionCreateFactory.build())

        assert permission.key == "orders:import"
        repo.create.assert_awaited_once()

    async def test_retire_in_use(self, service, repo):
        repo.get_by_id.return_value = _permission()
        repo.count_role_references.return_value = 2

        with pytest.raises(InUseError) as exc_info:
            await service.retire(uuid4())

        assert exc_info.value.details["role_count"] == 2
        repo.delete.assert_not_awaited()

    async def test_retire_unused(self, service, repo):
        permission = _permission()
        repo.get_by_id.return_value = permission

        await service.retire(permission.id)

        repo.delete.assert_awaited_once_with(permission)


def test_permission_matrix_marks_granted_cells():
    matrix = permission_matrix([_permission("orders-read"), _permission("forex-services-manage")])

    assert matrix["orders"]["read"] is True
    assert matrix["orders"]["approve"] is False
    assert matrix["forex-services"]["manage"] is True
    assert set(matrix) == {m.value for m in PermissionModule}
    assert set(matrix["users"]) == {a.value for a in PermissionAction}
