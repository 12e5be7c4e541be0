"""
인증 API 라우터
로그인, 토큰 갱신, 현재 사용자 조회, 비밀번호 변경
"""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from schemajeli.auth.dependencies import get_current_user, request_context
from schemajeli.config import Settings
from schemajeli.database import get_db
from schemajeli.models import User
from schemajeli.routers.deps import get_app_settings
from schemajeli.schemas import (
    AccessTokenResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    TokenResponse,
    UserResponse,
)
from schemajeli.services.auth_service import AuthService
from schemajeli.services.user_service import UserService
from schemajeli.shared.pagination import success_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login")
async def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    로그인 (username 또는 email)

    - 실패 시 401 "Invalid credentials"
    """
    service = AuthService(db, settings)
    user = service.authenticate(payload.identifier, payload.password, request_context(request))
    response = LoginResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenResponse(**service.issue_tokens(user)),
    )
    return success_response(response.model_dump(by_alias=True, mode="json"))


@router.post("/refresh")
async def refresh_token(
    payload: RefreshTokenRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Refresh Token으로 Access Token 재발급"""
    tokens = AuthService(db, settings).refresh(payload.refresh_token)
    return success_response(
        AccessTokenResponse(**tokens).model_dump(by_alias=True, mode="json")
    )


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
):
    """로그아웃 (stateless JWT: 클라이언트가 토큰 폐기)"""
    logger.info(f"User logged out: {current_user.username}")
    return {"status": "success", "message": "Logged out successfully"}


@router.get("/me")
async def get_me(
    current_user: User = Depends(get_current_user),
):
    """현재 로그인한 사용자 정보"""
    return success_response(UserResponse.serialize(current_user))


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    비밀번호 변경

    - 현재 비밀번호 불일치 시 401
    """
    UserService(db, settings).change_password(
        current_user.id,
        payload.current_password,
        payload.new_password,
        request_context(request, current_user),
    )
    return {"status": "success", "message": "Password changed successfully"}
