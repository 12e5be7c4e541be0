"""
Server API 라우터
서버 CRUD, 복원, 통계 및 하위 데이터베이스 조회
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from schemajeli.auth.dependencies import request_context
from schemajeli.config import Settings
from schemajeli.database import get_db
from schemajeli.models import EntityStatus, RdbmsType, User
from schemajeli.routers.deps import PageParams, get_app_settings, include_deleted_flag, page_params
from schemajeli.schemas import DatabaseResponse, ServerCreate, ServerResponse, ServerUpdate
from schemajeli.services.database_service import DatabaseService
from schemajeli.services.rbac_service import require_delete, require_read, require_write
from schemajeli.services.server_service import ServerService
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def server_stats(
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """서버 통계 (RDBMS 종류별, 상태별)"""
    return success_response(ServerService(db, settings).stats())


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_server(
    payload: ServerCreate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    서버 생성

    - 이름 중복 시 409
    """
    server = ServerService(db, settings).create(
        payload.model_dump(), request_context(request, current_user)
    )
    return success_response(ServerResponse.serialize(server))


@router.get("/")
async def list_servers(
    pagination: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="이름/설명/호스트/위치 검색"),
    rdbms_type: Optional[RdbmsType] = Query(None, alias="rdbmsType"),
    status_filter: Optional[EntityStatus] = Query(None, alias="status"),
    location: Optional[str] = Query(None, description="위치 부분 일치"),
    include_deleted: bool = Depends(include_deleted_flag),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """서버 목록 조회 (페이지네이션, 검색, 필터)"""
    filters = {
        "rdbms_type": rdbms_type.value if rdbms_type else None,
        "status": status_filter.value if status_filter else None,
        "location": location,
    }
    items, total = ServerService(db, settings).list(
        page=pagination.page,
        limit=pagination.limit,
        filters=filters,
        search=search,
        include_deleted=include_deleted,
    )
    return create_paginated_response(
        [ServerResponse.serialize(s) for s in items], total, pagination.page, pagination.limit
    )


@router.get("/{server_id}")
async def get_server(
    server_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """서버 상세 조회"""
    return success_response(ServerResponse.serialize(ServerService(db, settings).get(server_id)))


@router.get("/{server_id}/databases")
async def list_server_databases(
    server_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """서버의 활성 데이터베이스 목록"""
    databases = DatabaseService(db, settings).list_by_server(server_id)
    return success_response([DatabaseResponse.serialize(d) for d in databases])


@router.put("/{server_id}")
async def update_server(
    server_id: UUID,
    payload: ServerUpdate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """서버 수정 (부분 수정)"""
    server = ServerService(db, settings).update(
        server_id, payload.changes(), request_context(request, current_user)
    )
    return success_response(ServerResponse.serialize(server))


@router.delete("/{server_id}")
async def delete_server(
    server_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    서버 삭제 (soft delete)

    - 활성 데이터베이스가 있으면 409
    """
    server = ServerService(db, settings).soft_delete(server_id, request_context(request, current_user))
    return success_response(ServerResponse.serialize(server))


@router.post("/{server_id}/restore")
async def restore_server(
    server_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """삭제된 서버 복원"""
    server = ServerService(db, settings).restore(server_id, request_context(request, current_user))
    return success_response(ServerResponse.serialize(server))
