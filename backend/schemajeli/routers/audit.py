"""
Audit Log API 라우터
감사 로그 조회, 통계, 엔티티 변경 이력 (admin 전용)
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from schemajeli.config import Settings
from schemajeli.database import get_db
from schemajeli.models import AuditAction, EntityType, User
from schemajeli.routers.deps import PageParams, get_app_settings, page_params
from schemajeli.schemas import AuditLogResponse
from schemajeli.services.audit_service import AuditService
from schemajeli.services.rbac_service import require_admin
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def list_audit_logs(
    pagination: PageParams = Depends(page_params),
    entity_type: Optional[EntityType] = Query(None, alias="entityType", description="엔티티 타입 필터"),
    entity_id: Optional[UUID] = Query(None, alias="entityId", description="엔티티 ID 필터"),
    user_id: Optional[UUID] = Query(None, alias="userId", description="사용자 ID 필터"),
    action: Optional[AuditAction] = Query(None, description="액션 필터"),
    start_date: Optional[datetime] = Query(None, alias="startDate", description="시작 일시"),
    end_date: Optional[datetime] = Query(None, alias="endDate", description="종료 일시"),
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    감사 로그 목록 조회

    - 최신순 정렬
    - 엔티티/사용자/액션/기간 필터
    """
    service = AuditService(db, settings.audit_log_durability)
    items, total = service.list_logs(
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
        page=pagination.page,
        limit=pagination.limit,
    )
    return create_paginated_response(
        [AuditLogResponse.serialize(log) for log in items], total, pagination.page, pagination.limit
    )


@router.get("/stats")
async def audit_stats(
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """감사 로그 통계 (엔티티 타입별, 액션별)"""
    return success_response(AuditService(db, settings.audit_log_durability).stats())


@router.get("/{entity_type}/{entity_id}")
async def entity_history(
    entity_type: EntityType,
    entity_id: UUID,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """특정 엔티티의 변경 이력 (오래된 순)"""
    logs = AuditService(db, settings.audit_log_durability).history(entity_type, entity_id)
    return success_response([AuditLogResponse.serialize(log) for log in logs])
