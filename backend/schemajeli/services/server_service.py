"""
Server 서비스
데이터베이스 서버 카탈로그 관리
"""
import logging
from typing import Any, Dict

from schemajeli.models import Database, EntityType, Server
from schemajeli.shared.base_service import SoftDeleteService

logger = logging.getLogger(__name__)


class ServerService(SoftDeleteService[Server]):
    """
    서버 서비스

    - 이름은 삭제되지 않은 서버 사이에서 전역 유일
    - 활성 데이터베이스가 남아 있으면 삭제 불가
    """

    model = Server
    entity_type = EntityType.SERVER

    child_model = Database
    child_fk = "server_id"
    child_label = "database"

    search_fields = ("name", "description", "host", "location")
    exact_filters = ("rdbms_type", "status")
    substring_filters = ("location",)

    def stats(self) -> Dict[str, Any]:
        """
        서버 통계

        Returns:
            {"total", "byRdbmsType": [{type, count}], "byStatus": [{status, count}]}
        """
        return {
            "total": self._active_count(),
            "byRdbmsType": self._group_counts("rdbms_type", "type"),
            "byStatus": self._group_counts("status", "status"),
        }
