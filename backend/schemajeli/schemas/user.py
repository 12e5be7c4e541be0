# -*- coding: utf-8 -*-
"""
사용자 관리 관련 Pydantic 스키마
"""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from schemajeli.shared.schemas import AuditedMixin, BaseSchema, PatchSchema


# ========== Request 스키마 ==========


class UserCreate(BaseSchema):
    """사용자 생성 요청"""
    username: str = Field(..., min_length=3, max_length=100, description="사용자명 (유일)")
    email: EmailStr = Field(..., description="이메일 (유일)")
    full_name: str = Field(..., min_length=1, max_length=255, description="이름")
    password: str = Field(..., min_length=8, description="비밀번호 (최소 8자)")
    role: Optional[str] = Field(
        None,
        description="역할 (ADMIN, MAINTAINER, VIEWER / EDITOR는 MAINTAINER로 처리, 기본 VIEWER)",
    )


class UserUpdate(PatchSchema):
    """사용자 수정 요청"""
    non_nullable = ("username", "email", "full_name", "password", "role", "is_active")

    username: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[str] = None
    is_active: Optional[bool] = None


# ========== Response 스키마 ==========


class UserResponse(AuditedMixin):
    """사용자 정보 응답 (비밀번호 해시 제외)"""
    username: str
    email: str
    full_name: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None
