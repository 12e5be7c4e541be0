"""
Table 서비스
데이터베이스 내 테이블/뷰 관리
"""
import logging
from typing import Any, Dict, List
from uuid import UUID

from schemajeli.models import Database, Element, EntityType, Table
from schemajeli.shared.base_service import SoftDeleteService

logger = logging.getLogger(__name__)


class TableService(SoftDeleteService[Table]):
    """
    테이블 서비스

    - 이름은 같은 데이터베이스 안에서 유일
    - 활성 컬럼(Element)이 남아 있으면 삭제 불가
    """

    model = Table
    entity_type = EntityType.TABLE

    scope_field = "database_id"
    parent_model = Database

    child_model = Element
    child_fk = "table_id"
    child_label = "element"

    search_fields = ("name", "description")
    exact_filters = ("database_id", "table_type", "status")

    def list_by_database(self, database_id: UUID) -> List[Table]:
        """데이터베이스의 활성 테이블 목록 (데이터베이스 없으면 NotFoundError)"""
        return self.list_children_of(database_id)

    def stats(self) -> Dict[str, Any]:
        """
        테이블 통계

        Returns:
            {"total", "byTableType": [{type, count}], "byStatus": [{status, count}]}
        """
        return {
            "total": self._active_count(),
            "byTableType": self._group_counts("table_type", "type"),
            "byStatus": self._group_counts("status", "status"),
        }
