"""
Database 서비스
서버 내 논리 데이터베이스 관리
"""
import logging
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import func, select

from schemajeli.models import Database, EntityType, Server, Table
from schemajeli.shared.base_service import SoftDeleteService

logger = logging.getLogger(__name__)


class DatabaseService(SoftDeleteService[Database]):
    """
    데이터베이스 서비스

    - 이름은 같은 서버 안에서 유일
    - 활성 테이블이 남아 있으면 삭제 불가
    """

    model = Database
    entity_type = EntityType.DATABASE

    scope_field = "server_id"
    parent_model = Server

    child_model = Table
    child_fk = "database_id"
    child_label = "table"

    search_fields = ("name", "description", "purpose")
    exact_filters = ("server_id", "status")

    def list_by_server(self, server_id: UUID) -> List[Database]:
        """서버의 활성 데이터베이스 목록 (서버 없으면 NotFoundError)"""
        return self.list_children_of(server_id)

    def stats(self) -> Dict[str, Any]:
        """
        데이터베이스 통계

        Returns:
            {"total", "byStatus": [...], "byServer": [{serverId, serverName, count}]}
        """
        by_server = self.db.execute(
            select(Server.id, Server.name, func.count(Database.id))
            .join(Database, Database.server_id == Server.id)
            .where(Database.deleted_at.is_(None))
            .group_by(Server.id, Server.name)
            .order_by(func.count(Database.id).desc(), Server.name)
        ).all()

        return {
            "total": self._active_count(),
            "byStatus": self._group_counts("status", "status"),
            "byServer": [
                {"serverId": str(server_id), "serverName": name, "count": count}
                for server_id, name, count in by_server
            ],
        }
