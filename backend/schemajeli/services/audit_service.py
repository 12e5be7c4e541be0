"""
Audit Log 서비스
엔티티 변경 이력 기록 및 조회

감사 로그는 변경 작업과 같은 트랜잭션에서 추가되며 이후 수정/삭제되지 않는다.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from schemajeli.models import AuditAction, AuditLog, EntityType
from schemajeli.shared.durability import DURABLE, run_side_effect, validate_durability
from schemajeli.shared.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, paginate

logger = logging.getLogger(__name__)

# 민감 정보 마스킹 패턴
SENSITIVE_FIELDS = [
    "password", "password_hash", "token", "access_token", "refresh_token",
    "secret", "api_key", "authorization",
]

MASK = "***MASKED***"


def mask_sensitive_data(data: Any, depth: int = 0) -> Any:
    """
    민감 정보 마스킹

    Args:
        data: 마스킹할 데이터
        depth: 재귀 깊이 (무한 루프 방지)

    Returns:
        마스킹된 데이터
    """
    if depth > 10:
        return "[TRUNCATED]"

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            lower_key = str(key).lower()
            if any(field in lower_key for field in SENSITIVE_FIELDS):
                masked[key] = MASK
            else:
                masked[key] = mask_sensitive_data(value, depth + 1)
        return masked
    elif isinstance(data, list):
        return [mask_sensitive_data(item, depth + 1) for item in data[:100]]  # 최대 100개
    else:
        return data


def to_json_value(value: Any) -> Any:
    """컬럼 값을 JSON 저장 가능한 값으로 변환"""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    return value


def snapshot(instance: Any) -> Dict[str, Any]:
    """
    ORM 인스턴스의 컬럼 값 스냅샷 (민감 정보 마스킹)

    Returns:
        {컬럼 속성명: JSON 값}
    """
    mapper = inspect(instance).mapper
    values = {
        attr.key: to_json_value(getattr(instance, attr.key))
        for attr in mapper.column_attrs
    }
    return mask_sensitive_data(values)


def _value(enum_or_str: Union[Enum, str]) -> str:
    return enum_or_str.value if isinstance(enum_or_str, Enum) else str(enum_or_str)


class AuditService:
    """
    감사 로그 서비스

    Usage:
        audit = AuditService(db, durability=settings.audit_log_durability)
        audit.record(EntityType.SERVER, server.id, AuditAction.CREATE, user_id, {"after": ...})
    """

    def __init__(self, db: Session, durability: str = DURABLE):
        self.db = db
        self.durability = validate_durability(durability)

    def record(
        self,
        entity_type: Union[EntityType, str],
        entity_id: UUID,
        action: Union[AuditAction, str],
        user_id: Optional[UUID] = None,
        changes: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[AuditLog]:
        """
        감사 로그 추가 (호출자의 트랜잭션 안에서, commit은 호출자 담당)

        Args:
            entity_type: 엔티티 타입
            entity_id: 엔티티 ID
            action: CREATE / UPDATE / DELETE
            user_id: 수행 사용자 ID
            changes: 변경 내용 (마스킹됨)
            ip_address: 클라이언트 IP
            user_agent: User-Agent

        Returns:
            생성된 AuditLog (best_effort 실패 시 None)
        """
        def write() -> AuditLog:
            entry = AuditLog(
                entity_type=_value(entity_type),
                entity_id=entity_id,
                action=_value(action),
                user_id=user_id,
                changes=mask_sensitive_data(changes) if changes is not None else None,
                ip_address=ip_address,
                user_agent=user_agent[:500] if user_agent else None,
            )
            self.db.add(entry)
            self.db.flush()
            return entry

        return run_side_effect(
            self.db,
            self.durability,
            write,
            f"audit {_value(action)} {_value(entity_type)}:{entity_id}",
        )

    def list_logs(
        self,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        action: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> Tuple[List[AuditLog], int]:
        """
        감사 로그 조회 (최신순)

        Returns:
            (로그 목록, 전체 건수)
        """
        stmt = select(AuditLog)

        if entity_type:
            stmt = stmt.where(AuditLog.entity_type == _value(entity_type).upper())
        if entity_id:
            stmt = stmt.where(AuditLog.entity_id == entity_id)
        if user_id:
            stmt = stmt.where(AuditLog.user_id == user_id)
        if action:
            stmt = stmt.where(AuditLog.action == _value(action).upper())
        if start_date:
            stmt = stmt.where(AuditLog.created_at >= start_date)
        if end_date:
            stmt = stmt.where(AuditLog.created_at <= end_date)

        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id)
        return paginate(self.db, stmt, page, limit)

    def history(self, entity_type: Union[EntityType, str], entity_id: UUID) -> List[AuditLog]:
        """엔티티 변경 이력 (오래된 순)"""
        stmt = (
            select(AuditLog)
            .where(
                AuditLog.entity_type == _value(entity_type).upper(),
                AuditLog.entity_id == entity_id,
            )
            .order_by(AuditLog.created_at.asc())
        )
        return list(self.db.scalars(stmt).all())

    def stats(self) -> Dict[str, Any]:
        """
        감사 로그 통계

        Returns:
            {"total", "byEntityType", "byAction"}
        """
        total = self.db.scalar(select(func.count()).select_from(AuditLog)) or 0

        by_entity_type = self.db.execute(
            select(AuditLog.entity_type, func.count())
            .group_by(AuditLog.entity_type)
            .order_by(func.count().desc())
        ).all()

        by_action = self.db.execute(
            select(AuditLog.action, func.count())
            .group_by(AuditLog.action)
            .order_by(func.count().desc())
        ).all()

        return {
            "total": total,
            "byEntityType": [{"entityType": row[0], "count": row[1]} for row in by_entity_type],
            "byAction": [{"action": row[0], "count": row[1]} for row in by_action],
        }
