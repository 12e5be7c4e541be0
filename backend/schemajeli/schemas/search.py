"""
검색 관련 Pydantic 스키마
"""
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import Field

from schemajeli.shared.schemas import BaseSchema


class SearchIndexResponse(BaseSchema):
    """검색 인덱스 결과"""
    entity_type: str
    entity_id: UUID
    content: str
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="index_metadata")
    updated_at: datetime
