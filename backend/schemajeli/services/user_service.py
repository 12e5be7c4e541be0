"""
User 서비스
사용자 계정 관리 (관리자 전용 작업)
"""
import logging
from typing import Any, Dict
from uuid import UUID

from schemajeli.auth.dependencies import ActorContext
from schemajeli.auth.password import get_password_hash, verify_password
from schemajeli.models import AuditAction, EntityType, User
from schemajeli.services.rbac_service import Role
from schemajeli.shared.base_service import NO_ACTOR, SoftDeleteService
from schemajeli.utils.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)


def normalize_role(value: Any) -> str:
    """입력 역할을 표준 역할명으로 변환 (EDITOR -> MAINTAINER)"""
    try:
        return Role(value).value
    except ValueError:
        raise ValidationError(
            f"Invalid role: {value}",
            details={"allowed": [role.value for role in Role]},
        )


class UserService(SoftDeleteService[User]):
    """
    사용자 서비스

    - username, email은 삭제되지 않은 사용자 사이에서 각각 유일
    - 삭제 시 is_active=False, 복원 시 다시 활성화
    """

    model = User
    entity_type = EntityType.USER

    unique_fields = ("username", "email")

    search_fields = ("username", "email", "full_name")
    exact_filters = ("role", "is_active")
    order_by = ("username",)

    def _prepare(self, data: Dict[str, Any]) -> Dict[str, Any]:
        prepared = dict(data)
        password = prepared.pop("password", None)
        if password is not None:
            prepared["password_hash"] = get_password_hash(password)
        if prepared.get("role") is not None:
            prepared["role"] = normalize_role(prepared["role"])
        return prepared

    def create(self, data: Dict[str, Any], actor: ActorContext = NO_ACTOR) -> User:
        """
        사용자 생성 (비밀번호 해싱, 기본 역할 VIEWER)

        Raises:
            ConflictError: username 또는 email 중복
            ValidationError: 알 수 없는 역할
        """
        prepared = self._prepare(data)
        if prepared.get("role") is None:
            prepared["role"] = Role.VIEWER.value
        prepared.setdefault("is_active", True)
        return super().create(prepared, actor)

    def update(self, entity_id: UUID, data: Dict[str, Any], actor: ActorContext = NO_ACTOR) -> User:
        return super().update(entity_id, self._prepare(data), actor)

    def _after_soft_delete(self, entity: User) -> None:
        entity.is_active = False
        self.db.flush()

    def _before_restore(self, entity: User) -> None:
        entity.is_active = True

    def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
        actor: ActorContext = NO_ACTOR,
    ) -> None:
        """
        비밀번호 변경

        Raises:
            NotFoundError: 사용자 없음
            AuthenticationError: 현재 비밀번호 불일치
        """
        with self.transaction():
            user = self.repo.get_by_id_or_404(user_id, for_update=True)
            if not verify_password(current_password, user.password_hash):
                logger.warning(f"Password change rejected for user {user.username}")
                raise AuthenticationError("Current password is incorrect")

            user.password_hash = get_password_hash(new_password)
            self.repo.update(user)
            self._record(user, AuditAction.UPDATE, {"action": "password_changed"}, actor)

        logger.info(f"Password changed: {user.username}")

    def stats(self) -> Dict[str, Any]:
        """
        사용자 통계

        Returns:
            {"total", "active", "byRole": [{role, count}]}
        """
        return {
            "total": self._active_count(),
            "active": self._active_count(User.is_active.is_(True)),
            "byRole": self._group_counts("role", "role"),
        }
