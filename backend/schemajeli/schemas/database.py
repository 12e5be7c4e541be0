# -*- coding: utf-8 -*-
"""
Database 관련 Pydantic 스키마
"""
from typing import Optional
from uuid import UUID

from pydantic import Field

from schemajeli.models import EntityStatus
from schemajeli.shared.schemas import AuditedMixin, BaseSchema, PatchSchema


class DatabaseCreate(BaseSchema):
    """데이터베이스 생성 요청"""
    server_id: UUID = Field(..., description="소속 서버 ID")
    name: str = Field(..., min_length=1, max_length=255, description="서버 내 유일한 이름")
    description: Optional[str] = None
    purpose: Optional[str] = None
    status: EntityStatus = EntityStatus.ACTIVE


class DatabaseUpdate(PatchSchema):
    """데이터베이스 수정 요청 (소속 서버는 변경 불가)"""
    non_nullable = ("name", "status")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    purpose: Optional[str] = None
    status: Optional[EntityStatus] = None


class DatabaseResponse(AuditedMixin):
    """데이터베이스 응답"""
    server_id: UUID
    name: str
    description: Optional[str] = None
    purpose: Optional[str] = None
    status: str
