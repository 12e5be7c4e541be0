# -*- coding: utf-8 -*-
"""
사용자 관리 API 라우터
사용자 CRUD, 복원, 통계 (admin 전용)
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
from schemajeli.routers.deps import PageParams, get_app_settings, page_params
from schemajeli.schemas import UserCreate, UserResponse, UserUpdate
from schemajeli.services.rbac_service import require_admin
from schemajeli.services.user_service import UserService, normalize_role
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
async def user_stats(
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """사용자 통계 (전체, 활성, 역할별)"""
    return success_response(UserService(db, settings).stats())


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    request: Request,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    사용자 생성

    - username 또는 email 중복 시 409
    - 역할 미지정 시 VIEWER
    """
    user = UserService(db, settings).create(payload.model_dump(), request_context(request, current_user))
    return success_response(UserResponse.serialize(user))


@router.get("/")
async def list_users(
    pagination: PageParams = Depends(page_params),
    search: Optional[str] = Query(None, description="사용자명/이메일/이름 검색"),
    role: Optional[str] = Query(None, description="역할 필터"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """사용자 목록 조회"""
    filters = {
        "role": normalize_role(role) if role else None,
        "is_active": is_active,
    }
    items, total = UserService(db, settings).list(
        page=pagination.page,
        limit=pagination.limit,
        filters=filters,
        search=search,
        include_deleted=include_deleted,
    )
    return create_paginated_response(
        [UserResponse.serialize(u) for u in items], total, pagination.page, pagination.limit
    )


@router.get("/{user_id}")
async def get_user(
    user_id: UUID,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """사용자 상세 조회"""
    return success_response(UserResponse.serialize(UserService(db, settings).get(user_id)))


@router.put("/{user_id}")
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    request: Request,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """사용자 수정 (역할, 활성 상태, 비밀번호 재설정 포함)"""
    user = UserService(db, settings).update(
        user_id, payload.changes(), request_context(request, current_user)
    )
    return success_response(UserResponse.serialize(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    request: Request,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """사용자 삭제 (soft delete + 비활성화)"""
    user = UserService(db, settings).soft_delete(user_id, request_context(request, current_user))
    return success_response(UserResponse.serialize(user))


@router.post("/{user_id}/restore")
async def restore_user(
    user_id: UUID,
    request: Request,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """삭제된 사용자 복원 (재활성화)"""
    user = UserService(db, settings).restore(user_id, request_context(request, current_user))
    return success_response(UserResponse.serialize(user))
