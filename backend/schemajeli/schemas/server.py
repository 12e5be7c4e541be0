# -*- coding: utf-8 -*-
"""
Server 관련 Pydantic 스키마
"""
from typing import Optional

from pydantic import Field

from schemajeli.models import EntityStatus, RdbmsType
from schemajeli.shared.schemas import AuditedMixin, BaseSchema, PatchSchema


# ========== Request 스키마 ==========


class ServerCreate(BaseSchema):
    """서버 생성 요청"""
    name: str = Field(..., min_length=1, max_length=255, description="서버 이름 (전역 유일)")
    rdbms_type: RdbmsType = Field(..., description="RDBMS 종류")
    description: Optional[str] = None
    host: Optional[str] = Field(None, max_length=255)
    port: Optional[int] = Field(None, ge=1, le=65535)
    location: Optional[str] = Field(None, max_length=255)
    status: EntityStatus = EntityStatus.ACTIVE


class ServerUpdate(PatchSchema):
    """서버 수정 요청 (부분 수정)"""
    non_nullable = ("name", "rdbms_type", "status")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    rdbms_type: Optional[RdbmsType] = None
    description: Optional[str] = None
    host: Optional[str] = Field(None, max_length=255)
    port: Optional[int] = Field(None, ge=1, le=65535)
    location: Optional[str] = Field(None, max_length=255)
    status: Optional[EntityStatus] = None


# ========== Response 스키마 ==========


class ServerResponse(AuditedMixin):
    """서버 응답"""
    name: str
    rdbms_type: str
    description: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    location: Optional[str] = None
    status: str

