"""
Database API 라우터
데이터베이스 CRUD, 복원, 통계 및 하위 테이블 조회
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from schemajeli.auth.dependencies import request_context
from schemajeli.config import Settings
from schemajeli.database import get_db
from schemajeli.models import EntityStatus, User
from schemajeli.routers.deps import PageParams, get_app_settings, include_deleted_flag, page_params
from schemajeli.schemas import DatabaseCreate, DatabaseResponse, DatabaseUpdate, TableResponse
from schemajeli.services.database_service import DatabaseService
from schemajeli.services.rbac_service import require_delete, require_read, require_write
from schemajeli.services.table_service import TableService
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def database_stats(
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """데이터베이스 통계 (상태별, 서버별)"""
    return success_response(DatabaseService(db, settings).stats())


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_database(
    payload: DatabaseCreate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    데이터베이스 생성

    - 서버가 없거나 삭제된 경우 404
    - 같은 서버 안에서 이름 중복 시 409
    """
    database = DatabaseService(db, settings).create(
        payload.model_dump(), request_context(request, current_user)
    )
    return success_response(DatabaseResponse.serialize(database))


@router.get("/")
async def list_databases(
    pagination: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="이름/설명/용도 검색"),
    server_id: Optional[UUID] = Query(None, alias="serverId"),
    status_filter: Optional[EntityStatus] = Query(None, alias="status"),
    include_deleted: bool = Depends(include_deleted_flag),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """데이터베이스 목록 조회"""
    filters = {
        "server_id": server_id,
        "status": status_filter.value if status_filter else None,
    }
    items, total = DatabaseService(db, settings).list(
        page=pagination.page,
        limit=pagination.limit,
        filters=filters,
        search=search,
        include_deleted=include_deleted,
    )
    return create_paginated_response(
        [DatabaseResponse.serialize(d) for d in items], total, pagination.page, pagination.limit
    )


@router.get("/{database_id}")
async def get_database(
    database_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """데이터베이스 상세 조회"""
    database = DatabaseService(db, settings).get(database_id)
    return success_response(DatabaseResponse.serialize(database))


@router.get("/{database_id}/tables")
async def list_database_tables(
    database_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """데이터베이스의 활성 테이블 목록"""
    tables = TableService(db, settings).list_by_database(database_id)
    return success_response([TableResponse.serialize(t) for t in tables])


@router.put("/{database_id}")
async def update_database(
    database_id: UUID,
    payload: DatabaseUpdate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """데이터베이스 수정"""
    database = DatabaseService(db, settings).update(
        database_id, payload.changes(), request_context(request, current_user)
    )
    return success_response(DatabaseResponse.serialize(database))


@router.delete("/{database_id}")
async def delete_database(
    database_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    데이터베이스 삭제 (soft delete)

    - 활성 테이블이 있으면 409
    """
    database = DatabaseService(db, settings).soft_delete(
        database_id, request_context(request, current_user)
    )
    return success_response(DatabaseResponse.serialize(database))


@router.post("/{database_id}/restore")
async def restore_database(
    database_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """삭제된 데이터베이스 복원 (서버가 활성 상태여야 함)"""
    database = DatabaseService(db, settings).restore(
        database_id, request_context(request, current_user)
    )
    return success_response(DatabaseResponse.serialize(database))
