"""
인증 관련 Pydantic 스키마
"""
from pydantic import Field

from schemajeli.schemas.user import UserResponse
from schemajeli.shared.schemas import BaseSchema


# ========== Request 스키마 ==========

class LoginRequest(BaseSchema):
    """로그인 요청 (username 또는 email)"""
    identifier: str = Field(..., min_length=1, description="사용자명 또는 이메일")
    password: str = Field(..., min_length=1, description="비밀번호")


class RefreshTokenRequest(BaseSchema):
    """토큰 갱신 요청"""
    refresh_token: str = Field(..., min_length=1, description="Refresh Token")


class ChangePasswordRequest(BaseSchema):
    """비밀번호 변경 요청"""
    current_password: str = Field(..., min_length=1, description="현재 비밀번호")
    new_password: str = Field(..., min_length=8, description="새 비밀번호 (최소 8자)")


# ========== Response 스키마 ==========

class TokenResponse(BaseSchema):
    """토큰 응답"""
    access_token: str = Field(..., description="JWT Access Token")
    refresh_token: str = Field(..., description="JWT Refresh Token")
    token_type: str = Field(default="bearer", description="토큰 타입")
    expires_in: int = Field(..., description="Access Token 만료 시간 (초)")


class AccessTokenResponse(BaseSchema):
    """Access Token 재발급 응답"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(BaseSchema):
    """로그인 응답"""
    user: UserResponse = Field(..., description="사용자 정보")
    tokens: TokenResponse = Field(..., description="인증 토큰")
