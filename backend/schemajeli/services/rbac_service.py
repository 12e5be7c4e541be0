"""
RBAC (Role-Based Access Control) 서비스
역할 기반 접근 제어 로직

역할은 순위를 가지며, 각 권한은 최소 역할을 요구한다.
권한 집합은 순위 비교로 도출되므로 상위 역할은 항상 하위 역할의 권한을 포함한다.
"""
import logging
from enum import Enum
from typing import Dict, Optional, Set, Union

from fastapi import Depends

from schemajeli.auth.dependencies import get_current_user
from schemajeli.models import User
from schemajeli.utils.errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """사용자 역할 (ADMIN > MAINTAINER > VIEWER)"""
    ADMIN = "ADMIN"
    MAINTAINER = "MAINTAINER"
    VIEWER = "VIEWER"

    @property
    def rank(self) -> int:
        return ROLE_RANKS[self]

    @classmethod
    def _missing_(cls, value):
        # 이전 명칭 EDITOR는 MAINTAINER로 취급, 대소문자 무시
        if isinstance(value, str):
            normalized = value.strip().upper()
            if normalized == "EDITOR":
                return cls.MAINTAINER
            if normalized in cls.__members__:
                return cls[normalized]
        return None


ROLE_RANKS: Dict[Role, int] = {
    Role.ADMIN: 3,
    Role.MAINTAINER: 2,
    Role.VIEWER: 1,
}


class Permission(str, Enum):
    """권한 타입"""
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    ADMIN = "admin"


# 권한별 최소 역할
PERMISSION_MIN_ROLE: Dict[Permission, Role] = {
    Permission.READ: Role.VIEWER,
    Permission.WRITE: Role.MAINTAINER,
    Permission.DELETE: Role.ADMIN,
    Permission.ADMIN: Role.ADMIN,
}

ROLE_PERMISSIONS: Dict[Role, Set[Permission]] = {
    role: {
        permission
        for permission, min_role in PERMISSION_MIN_ROLE.items()
        if role.rank >= min_role.rank
    }
    for role in Role
}


def parse_role(value: Union[str, Role, None]) -> Optional[Role]:
    """문자열을 Role로 변환 (알 수 없으면 None)"""
    if value is None:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def get_role_permissions(role: Union[str, Role, None]) -> Set[Permission]:
    """역할의 권한 집합 (알 수 없는 역할은 빈 집합)"""
    parsed = parse_role(role)
    if parsed is None:
        return set()
    return set(ROLE_PERMISSIONS[parsed])


def has_permission(role: Union[str, Role, None], permission: Union[str, Permission]) -> bool:
    """
    역할이 특정 권한을 가지는지 확인

    Args:
        role: 사용자 역할
        permission: 권한

    Returns:
        권한 여부
    """
    return Permission(permission) in get_role_permissions(role)


def check_permissions(role: Union[str, Role, None], *required: Union[str, Permission]) -> Role:
    """
    필요한 권한을 모두 가지는지 검사

    Args:
        role: 사용자 역할
        required: 필요한 권한 목록

    Returns:
        해석된 Role

    Raises:
        AuthenticationError: 역할이 없거나 알 수 없는 경우
        AuthorizationError: 권한 부족
    """
    parsed = parse_role(role)
    if parsed is None:
        logger.warning(f"Permission check with unknown role: {role!r}")
        raise AuthenticationError("Authentication required")

    granted = ROLE_PERMISSIONS[parsed]
    missing = [Permission(p).value for p in required if Permission(p) not in granted]
    if missing:
        logger.warning(f"Permission denied: role={parsed.value}, missing={missing}")
        raise AuthorizationError(
            "Insufficient permissions",
            details={"required": [Permission(p).value for p in required], "role": parsed.value},
        )
    return parsed


def require_permission(*permissions: Union[str, Permission]):
    """
    권한 체크 의존성 생성자 (핸들러 실행 전에 검사)

    사용법:
        @router.delete("/{server_id}")
        async def delete_server(
            current_user: User = Depends(require_permission(Permission.DELETE)),
        ):
            ...

    Returns:
        현재 사용자를 반환하는 FastAPI 의존성 함수
    """
    async def permission_checker(
        current_user: User = Depends(get_current_user),
    ) -> User:
        check_permissions(current_user.role, *permissions)
        return current_user

    return permission_checker


def require_role(min_role: Union[str, Role]):
    """
    최소 역할 요구 의존성 생성자

    Args:
        min_role: 허용되는 최소 역할

    Returns:
        현재 사용자를 반환하는 FastAPI 의존성 함수
    """
    required = Role(min_role)

    async def role_checker(
        current_user: User = Depends(get_current_user),
    ) -> User:
        role = parse_role(current_user.role)
        if role is None:
            raise AuthenticationError("Authentication required")
        if role.rank < required.rank:
            logger.warning(
                f"Role check failed: user={current_user.username}, "
                f"role={role.value}, required={required.value}"
            )
            raise AuthorizationError(f"This action requires role {required.value} or higher")
        return current_user

    return role_checker


# 편의를 위한 사전 정의된 의존성
require_read = require_permission(Permission.READ)
require_write = require_permission(Permission.WRITE)
require_delete = require_permission(Permission.DELETE)
require_admin = require_permission(Permission.ADMIN)
