"""
Table API 라우터
테이블 CRUD, 복원, 통계 및 컬럼 조회
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from schemajeli.auth.dependencies import request_context
from schemajeli.config import Settings
from schemajeli.database import get_db
from schemajeli.models import EntityStatus, TableType, User
from schemajeli.routers.deps import PageParams, get_app_settings, include_deleted_flag, page_params
from schemajeli.schemas import ElementResponse, TableCreate, TableResponse, TableUpdate
from schemajeli.services.element_service import ElementService
from schemajeli.services.rbac_service import require_delete, require_read, require_write
from schemajeli.services.table_service import TableService
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def table_stats(
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """테이블 통계 (타입별, 상태별)"""
    return success_response(TableService(db, settings).stats())


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_table(
    payload: TableCreate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    테이블 생성

    - 데이터베이스가 없거나 삭제된 경우 404
    - 같은 데이터베이스 안에서 이름 중복 시 409
    """
    table = TableService(db, settings).create(payload.model_dump(), request_context(request, current_user))
    return success_response(TableResponse.serialize(table))


@router.get("/")
async def list_tables(
    pagination: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="이름/설명 검색"),
    database_id: Optional[UUID] = Query(None, alias="databaseId"),
    table_type: Optional[TableType] = Query(None, alias="tableType"),
    status_filter: Optional[EntityStatus] = Query(None, alias="status"),
    include_deleted: bool = Depends(include_deleted_flag),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """테이블 목록 조회"""
    filters = {
        "database_id": database_id,
        "table_type": table_type.value if table_type else None,
        "status": status_filter.value if status_filter else None,
    }
    items, total = TableService(db, settings).list(
        page=pagination.page,
        limit=pagination.limit,
        filters=filters,
        search=search,
        include_deleted=include_deleted,
    )
    return create_paginated_response(
        [TableResponse.serialize(t) for t in items], total, pagination.page, pagination.limit
    )


@router.get("/{table_id}")
async def get_table(
    table_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """테이블 상세 조회"""
    return success_response(TableResponse.serialize(TableService(db, settings).get(table_id)))


@router.get("/{table_id}/elements")
async def list_table_elements(
    table_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """테이블의 활성 컬럼 목록 (position 순)"""
    elements = ElementService(db, settings).list_by_table(table_id)
    return success_response([ElementResponse.serialize(e) for e in elements])


@router.put("/{table_id}")
async def update_table(
    table_id: UUID,
    payload: TableUpdate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """테이블 수정"""
    table = TableService(db, settings).update(
        table_id, payload.changes(), request_context(request, current_user)
    )
    return success_response(TableResponse.serialize(table))


@router.delete("/{table_id}")
async def delete_table(
    table_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    테이블 삭제 (soft delete)

    - 활성 컬럼이 있으면 409
    """
    table = TableService(db, settings).soft_delete(table_id, request_context(request, current_user))
    return success_response(TableResponse.serialize(table))


@router.post("/{table_id}/restore")
async def restore_table(
    table_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """삭제된 테이블 복원 (데이터베이스가 활성 상태여야 함)"""
    table = TableService(db, settings).restore(table_id, request_context(request, current_user))
    return success_response(TableResponse.serialize(table))
