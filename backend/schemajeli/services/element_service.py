"""
Element 서비스
테이블 컬럼 관리 및 위치(position) 유지

삭제되지 않은 컬럼의 position은 테이블마다 항상 1..n 으로 연속된다.
- 생성: position이 없으면 max+1, 있으면 해당 위치에 삽입하고 뒤쪽을 한 칸씩 민다
- 수정: position 변경 시 사이 구간을 당기거나 밀어 연속성 유지
- 삭제: 뒤쪽 컬럼을 한 칸씩 당기고 삭제 시점 위치를 deleted_position에 기록
- 복원: append 정책은 마지막에, preserve 정책은 deleted_position에 다시 삽입

position을 바꾸는 모든 작업은 부모 Table 행을 먼저 잠그고 대상 컬럼을 잠근다 (SoftDeleteService._lock_scope).
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update

from schemajeli.models import Element, EntityType, Table
from schemajeli.shared.base_service import SoftDeleteService

logger = logging.getLogger(__name__)

RESTORE_APPEND = "append"
RESTORE_PRESERVE = "preserve"
RESTORE_POLICIES = (RESTORE_APPEND, RESTORE_PRESERVE)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))


class ElementService(SoftDeleteService[Element]):
    """컬럼(Element) 서비스"""

    model = Element
    entity_type = EntityType.ELEMENT

    scope_field = "table_id"
    parent_model = Table

    search_fields = ("name", "description", "data_type")
    exact_filters = ("table_id", "is_primary_key", "is_foreign_key")
    substring_filters = ("data_type",)
    order_by = ("table_id", "position")

    @property
    def restore_policy(self) -> str:
        policy = self.settings.element_restore_policy
        if policy not in RESTORE_POLICIES:
            raise ValueError(f"Unknown element restore policy: {policy!r}")
        return policy

    def list_by_table(self, table_id: UUID) -> List[Element]:
        """테이블의 활성 컬럼 목록 (position 순, 테이블 없으면 NotFoundError)"""
        return self.list_children_of(table_id)

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _max_position(self, table_id: UUID) -> int:
        stmt = select(func.max(Element.position)).where(
            Element.table_id == table_id,
            Element.deleted_at.is_(None),
        )
        return self.db.scalar(stmt) or 0

    def _shift(
        self,
        table_id: UUID,
        delta: int,
        start: int,
        end: Optional[int] = None,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        """start..end(포함) 구간의 활성 형제 position에 delta를 더함"""
        stmt = (
            update(Element)
            .where(
                Element.table_id == table_id,
                Element.deleted_at.is_(None),
                Element.position >= start,
            )
            .values(position=Element.position + delta)
        )
        if end is not None:
            stmt = stmt.where(Element.position <= end)
        if exclude_id is not None:
            stmt = stmt.where(Element.id != exclude_id)
        self.db.execute(stmt)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _before_create(self, entity: Element) -> None:
        max_position = self._max_position(entity.table_id)
        if not entity.position:
            entity.position = max_position + 1
            return

        target = clamp(entity.position, 1, max_position + 1)
        if target <= max_position:
            self._shift(entity.table_id, 1, start=target)
        entity.position = target

    def _before_update(self, entity: Element, changes: Dict[str, Any]) -> Dict[str, Any]:
        requested = changes.pop("position", None)
        if not requested or requested == entity.position:
            return changes

        current = entity.position
        target = clamp(requested, 1, self._max_position(entity.table_id))
        if target < current:
            self._shift(entity.table_id, 1, start=target, end=current - 1, exclude_id=entity.id)
        elif target > current:
            self._shift(entity.table_id, -1, start=current + 1, end=target, exclude_id=entity.id)

        changes["position"] = target
        logger.info(f"Element {entity.id} moved: {current} -> {target}")
        return changes

    def _after_soft_delete(self, entity: Element) -> None:
        entity.deleted_position = entity.position
        self._shift(entity.table_id, -1, start=entity.position + 1)
        self.db.flush()

    def _before_restore(self, entity: Element) -> None:
        max_position = self._max_position(entity.table_id)
        if self.restore_policy == RESTORE_PRESERVE and entity.deleted_position:
            target = clamp(entity.deleted_position, 1, max_position + 1)
            if target <= max_position:
                self._shift(entity.table_id, 1, start=target)
        else:
            target = max_position + 1

        entity.position = target
        entity.deleted_position = None

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def stats(self) -> Dict[str, Any]:
        """
        컬럼 통계

        Returns:
            {"total", "primaryKeys", "foreignKeys", "topDataTypes": [{dataType, count}] (상위 10개)}
        """
        return {
            "total": self._active_count(),
            "primaryKeys": self._active_count(Element.is_primary_key.is_(True)),
            "foreignKeys": self._active_count(Element.is_foreign_key.is_(True)),
            "topDataTypes": self._group_counts("data_type", "dataType", limit=10),
        }
