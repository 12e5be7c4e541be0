"""
Abbreviation API 라우터
약어 사전 CRUD, 복원, 조회 및 통계
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
from schemajeli.schemas import AbbreviationCreate, AbbreviationResponse, AbbreviationUpdate
from schemajeli.services.abbreviation_service import AbbreviationService
from schemajeli.services.rbac_service import require_delete, require_read, require_write
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def abbreviation_stats(
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 통계 (전체, prime class 수, 카테고리별)"""
    return success_response(AbbreviationService(db, settings).stats())


@router.get("/lookup/{abbreviation}")
async def lookup_abbreviation(
    abbreviation: str,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 문자열로 조회 (대소문자 무시)"""
    found = AbbreviationService(db, settings).lookup(abbreviation)
    return success_response(AbbreviationResponse.serialize(found))


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_abbreviation(
    payload: AbbreviationCreate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 생성 (약어 중복 시 409)"""
    created = AbbreviationService(db, settings).create(
        payload.model_dump(), request_context(request, current_user)
    )
    return success_response(AbbreviationResponse.serialize(created))


@router.get("/")
async def list_abbreviations(
    pagination: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="원어/약어/정의 검색"),
    category: Optional[str] = Query(None, description="카테고리 부분 일치"),
    is_prime_class: Optional[bool] = Query(None, alias="isPrimeClass"),
    include_deleted: bool = Depends(include_deleted_flag),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 목록 조회"""
    items, total = AbbreviationService(db, settings).list(
        page=pagination.page,
        limit=pagination.limit,
        filters={"category": category, "is_prime_class": is_prime_class},
        search=search,
        include_deleted=include_deleted,
    )
    return create_paginated_response(
        [AbbreviationResponse.serialize(a) for a in items], total, pagination.page, pagination.limit
    )


@router.get("/{abbreviation_id}")
async def get_abbreviation(
    abbreviation_id: UUID,
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 상세 조회"""
    found = AbbreviationService(db, settings).get(abbreviation_id)
    return success_response(AbbreviationResponse.serialize(found))


@router.put("/{abbreviation_id}")
async def update_abbreviation(
    abbreviation_id: UUID,
    payload: AbbreviationUpdate,
    request: Request,
    current_user: User = Depends(require_write),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 수정"""
    updated = AbbreviationService(db, settings).update(
        abbreviation_id, payload.changes(), request_context(request, current_user)
    )
    return success_response(AbbreviationResponse.serialize(updated))


@router.delete("/{abbreviation_id}")
async def delete_abbreviation(
    abbreviation_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """약어 삭제 (soft delete)"""
    deleted = AbbreviationService(db, settings).soft_delete(
        abbreviation_id, request_context(request, current_user)
    )
    return success_response(AbbreviationResponse.serialize(deleted))


@router.post("/{abbreviation_id}/restore")
async def restore_abbreviation(
    abbreviation_id: UUID,
    request: Request,
    current_user: User = Depends(require_delete),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """삭제된 약어 복원"""
    restored = AbbreviationService(db, settings).restore(
        abbreviation_id, request_context(request, current_user)
    )
    return success_response(AbbreviationResponse.serialize(restored))
