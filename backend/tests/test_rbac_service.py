"""
RBAC 서비스 테스트
역할 순위, 권한 도출, 권한 검사 의존성
"""
from unittest.mock import MagicMock

import pytest

from schemajeli.services.rbac_service import (
    PERMISSION_MIN_ROLE,
    ROLE_PERMISSIONS,
    Permission,
    Role,
    check_permissions,
    get_role_permissions,
    has_permission,
    parse_role,
    require_permission,
    require_role,
)
from schemajeli.utils.errors import AuthenticationError, AuthorizationError


class TestRole:
    """Role enum 테스트"""

    def test_rank_order(self):
        assert Role.ADMIN.rank > Role.MAINTAINER.rank > Role.VIEWER.rank

    def test_editor_alias_maps_to_maintainer(self):
        """이전 명칭 EDITOR"""
        assert Role("EDITOR") is Role.MAINTAINER
        assert Role("editor") is Role.MAINTAINER

    def test_case_insensitive(self):
        assert Role("admin") is Role.ADMIN
        assert parse_role(" viewer ") is Role.VIEWER

    def test_unknown_role(self):
        assert parse_role("SUPERUSER") is None
        assert parse_role(None) is None


class TestRolePermissions:
    """역할별 권한 테스트"""

    def test_admin_has_all_permissions(self):
        assert ROLE_PERMISSIONS[Role.ADMIN] == set(Permission)

    def test_maintainer_read_write(self):
        assert ROLE_PERMISSIONS[Role.MAINTAINER] == {Permission.READ, Permission.WRITE}

    def test_viewer_read_only(self):
        assert ROLE_PERMISSIONS[Role.VIEWER] == {Permission.READ}

    def test_higher_role_includes_lower(self):
        """상위 역할은 항상 하위 역할의 권한을 포함"""
        assert ROLE_PERMISSIONS[Role.VIEWER] <= ROLE_PERMISSIONS[Role.MAINTAINER]
        assert ROLE_PERMISSIONS[Role.MAINTAINER] <= ROLE_PERMISSIONS[Role.ADMIN]

    def test_every_permission_has_minimum_role(self):
        assert set(PERMISSION_MIN_ROLE) == set(Permission)

    def test_unknown_role_has_no_permissions(self):
        assert get_role_permissions("GUEST") == set()

    def test_has_permission(self):
        assert has_permission("MAINTAINER", "write") is True
        assert has_permission("MAINTAINER", Permission.DELETE) is False
        assert has_permission("EDITOR", Permission.WRITE) is True


class TestCheckPermissions:
    """check_permissions 테스트"""

    def test_granted(self):
        assert check_permissions("ADMIN", Permission.DELETE, Permission.ADMIN) is Role.ADMIN

    def test_missing_permission(self):
        with pytest.raises(AuthorizationError) as exc_info:
            check_permissions("VIEWER", Permission.WRITE)

        assert exc_info.value.http_status == 403
        assert exc_info.value.details["required"] == ["write"]

    def test_any_missing_permission_denies(self):
        """하나라도 없으면 거부"""
        with pytest.raises(AuthorizationError):
            check_permissions("MAINTAINER", Permission.READ, Permission.DELETE)

    def test_missing_role(self):
        with pytest.raises(AuthenticationError):
            check_permissions(None, Permission.READ)

    def test_unrecognised_role(self):
        with pytest.raises(AuthenticationError):
            check_permissions("ROOT", Permission.READ)


class TestDependencies:
    """FastAPI 의존성 생성자 테스트"""

    @pytest.mark.asyncio
    async def test_require_permission_returns_user(self):
        user = MagicMock(role="MAINTAINER")
        checker = require_permission(Permission.WRITE)

        assert await checker(current_user=user) is user

    @pytest.mark.asyncio
    async def test_require_permission_denies(self):
        checker = require_permission(Permission.DELETE)

        with pytest.raises(AuthorizationError):
            await checker(current_user=MagicMock(role="MAINTAINER"))

    @pytest.mark.asyncio
    async def test_require_role(self):
        checker = require_role(Role.MAINTAINER)

        user = MagicMock(role="ADMIN")
        assert await checker(current_user=user) is user

        with pytest.raises(AuthorizationError):
            await checker(current_user=MagicMock(role="VIEWER", username="v"))
