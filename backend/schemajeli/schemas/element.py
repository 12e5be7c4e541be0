# -*- coding: utf-8 -*-
"""
Element(컬럼) 관련 Pydantic 스키마
"""
from typing import Optional
from uuid import UUID

from pydantic import Field

from schemajeli.shared.schemas import AuditedMixin, BaseSchema, PatchSchema


class ElementCreate(BaseSchema):
    """컬럼 생성 요청"""
    table_id: UUID = Field(..., description="소속 테이블 ID")
    name: str = Field(..., min_length=1, max_length=255, description="테이블 내 유일한 이름")
    data_type: str = Field(..., min_length=1, max_length=100, description="데이터 타입")
    position: int = Field(
        ...,
        ge=0,
        description="1부터 시작하는 위치 (0이면 마지막에 추가)",
    )
    description: Optional[str] = None
    length: Optional[int] = Field(None, ge=0)
    precision: Optional[int] = Field(None, ge=0)
    scale: Optional[int] = Field(None, ge=0)
    is_nullable: bool = True
    is_primary_key: bool = False
    is_foreign_key: bool = False
    default_value: Optional[str] = Field(None, max_length=255)


class ElementUpdate(PatchSchema):
    """컬럼 수정 요청 (position 변경 시 형제 위치 재정렬)"""
    non_nullable = ("name", "data_type", "position", "is_nullable", "is_primary_key", "is_foreign_key")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    data_type: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    length: Optional[int] = Field(None, ge=0)
    precision: Optional[int] = Field(None, ge=0)
    scale: Optional[int] = Field(None, ge=0)
    is_nullable: Optional[bool] = None
    is_primary_key: Optional[bool] = None
    is_foreign_key: Optional[bool] = None
    default_value: Optional[str] = Field(None, max_length=255)


class ElementResponse(AuditedMixin):
    """컬럼 응답"""
    table_id: UUID
    name: str
    data_type: str
    position: int
    description: Optional[str] = None
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    is_nullable: bool
    is_primary_key: bool
    is_foreign_key: bool
    default_value: Optional[str] = None
