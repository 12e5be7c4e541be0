"""
Element API 라우터
컬럼 CRUD, 복원 및 통계
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from schemajeli.auth.dependencies import request_context
from schemajeli.config import Settings
from schemajeli.database import get_db
from schemajeli.models import User
from schemajeli.routers.deps import PageParams, get_app_settings, include_deleted_flag, page_params
from schemajeli.schemas import ElementCreate, ElementResponse, ElementUpdate
from schemajeli.services.element_service import ElementService
from schemajeli.services.rbac_service import require_delete, require_read, require_write
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def element_stats(
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """컬럼 통계 (PK/FK 수, 상위 데이터 타입)"""
    return success_response(ElementService(db, settings).stats())


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_element(
    payload: ElementCreate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    컬럼 생성

    - position이 0이면 마지막에 추가, 그 외에는 해당 위치에 삽입
    - 테이블이 없거나 삭제된 경우 404
    - 같은 테이블 안에서 이름 중복 시 409
    """
    element = ElementService(db, settings).create(
        payload.model_dump(), request_context(request, current_user)
    )
    return success_response(ElementResponse.serialize(element))


@router.get("/")
async def list_elements(
    pagination: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="이름/설명/데이터 타입 검색"),
    table_id: Optional[UUID] = Query(None, alias="tableId"),
    data_type: Optional[str] = Query(None, alias="dataType", description="데이터 타입 부분 일치"),
    is_primary_key: Optional[bool] = Query(None, alias="isPrimaryKey"),
    is_foreign_key: Optional[bool] = Query(None, alias="isForeignKey"),
    include_deleted: bool = Depends(include_deleted_flag),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """컬럼 목록 조회 (테이블, position 순)"""
    filters = {
        "table_id": table_id,
        "data_type": data_type,
        "is_primary_key": is_primary_key,
        "is_foreign_key": is_foreign_key,
    }
    items, total = ElementService(db, settings).list(
        page=pagination.page,
        limit=pagination.limit,
        filters=filters,
        search=search,
        include_deleted=include_deleted,
    )
    return create_paginated_response(
        [ElementResponse.serialize(e) for e in items], total, pagination.page, pagination.limit
    )


@router.get("/{element_id}")
async def get_element(
    element_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """컬럼 상세 조회"""
    return success_response(ElementResponse.serialize(ElementService(db, settings).get(element_id)))


@router.put("/{element_id}")
async def update_element(
    element_id: UUID,
    payload: ElementUpdate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """컬럼 수정 (position 변경 시 형제 컬럼 재정렬)"""
    element = ElementService(db, settings).update(
        element_id, payload.changes(), request_context(request, current_user)
    )
    return success_response(ElementResponse.serialize(element))


@router.delete("/{element_id}")
async def delete_element(
    element_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """컬럼 삭제 (soft delete, 뒤쪽 컬럼 position 당김)"""
    element = ElementService(db, settings).soft_delete(element_id, request_context(request, current_user))
    return success_response(ElementResponse.serialize(element))


@router.post("/{element_id}/restore")
async def restore_element(
    element_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    삭제된 컬럼 복원

    - element_restore_policy=append: 마지막에 추가
    - element_restore_policy=preserve: 삭제 전 위치에 재삽입
    """
    element = ElementService(db, settings).restore(element_id, request_context(request, current_user))
    return success_response(ElementResponse.serialize(element))
