"""
Audit Log 관련 Pydantic 스키마
"""
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import Field

from schemajeli.shared.schemas import BaseSchema


class AuditLogResponse(BaseSchema):
    """감사 로그 응답"""
    id: UUID = Field(..., description="로그 ID")
    entity_type: str = Field(..., description="엔티티 타입")
    entity_id: UUID = Field(..., description="엔티티 ID")
    action: str = Field(..., description="액션 (CREATE, UPDATE, DELETE)")
    user_id: Optional[UUID] = Field(None, description="수행 사용자 ID")
    changes: Optional[Dict[str, Any]] = Field(None, description="변경 내용 (마스킹됨)")
    ip_address: Optional[str] = Field(None, description="클라이언트 IP")
    user_agent: Optional[str] = Field(None, description="User-Agent")
    created_at: datetime = Field(..., description="생성 일시")
