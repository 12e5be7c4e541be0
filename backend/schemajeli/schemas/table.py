# -*- coding: utf-8 -*-
"""
Table 관련 Pydantic 스키마
"""
from typing import Optional
from uuid import UUID

from pydantic import Field

from schemajeli.models import EntityStatus, TableType
from schemajeli.shared.schemas import AuditedMixin, BaseSchema, PatchSchema


class TableCreate(BaseSchema):
    """테이블 생성 요청"""
    database_id: UUID = Field(..., description="소속 데이터베이스 ID")
    name: str = Field(..., min_length=1, max_length=255, description="데이터베이스 내 유일한 이름")
    table_type: TableType = TableType.TABLE
    description: Optional[str] = None
    row_count_estimate: Optional[int] = Field(None, ge=0)
    status: EntityStatus = EntityStatus.ACTIVE


class TableUpdate(PatchSchema):
    """테이블 수정 요청 (소속 데이터베이스는 변경 불가)"""
    non_nullable = ("name", "table_type", "status")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    table_type: Optional[TableType] = None
    description: Optional[str] = None
    row_count_estimate: Optional[int] = Field(None, ge=0)
    status: Optional[EntityStatus] = None


class TableResponse(AuditedMixin):
    """테이블 응답"""
    database_id: UUID
    name: str
    table_type: str
    description: Optional[str] = None
    row_count_estimate: Optional[int] = None
    status: str
