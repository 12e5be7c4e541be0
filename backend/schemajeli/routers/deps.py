"""
라우터 공통 의존성
페이지네이션, includeDeleted 권한 검사, 앱 설정
"""
from dataclasses import dataclass

from fastapi import Depends, Query, Request

from schemajeli.config import Settings
from schemajeli.models import User
from schemajeli.services.rbac_service import Permission, check_permissions, require_read
from schemajeli.shared.pagination import DEFAULT_LIMIT, DEFAULT_PAGE


def get_app_settings(request: Request) -> Settings:
    """create_app에 전달된 설정"""
    return request.app.state.settings


@dataclass
class PageParams:
    page: int
    limit: int


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=1, description="페이지 번호 (1부터)"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, description="페이지 크기"),
    settings: Settings = Depends(get_app_settings),
) -> PageParams:
    """페이지네이션 파라미터 (limit은 max_page_size로 제한)"""
    return PageParams(page=page, limit=min(limit, settings.max_page_size))


async def include_deleted_flag(
    include_deleted: bool = Query(False, alias="includeDeleted", description="삭제된 항목 포함 (관리자)"),
    current_user: User = Depends(require_read),
) -> bool:
    """includeDeleted=true는 admin 권한 필요"""
    if include_deleted:
        check_permissions(current_user.role, Permission.ADMIN)
    return include_deleted
