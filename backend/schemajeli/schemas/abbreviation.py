# -*- coding: utf-8 -*-
"""
Abbreviation 관련 Pydantic 스키마
"""
from typing import Optional

from pydantic import Field

from schemajeli.shared.schemas import AuditedMixin, BaseSchema, PatchSchema


class AbbreviationCreate(BaseSchema):
    """약어 생성 요청"""
    source: str = Field(..., min_length=1, max_length=255, description="원어 (예: ACCOUNT)")
    abbreviation: str = Field(..., min_length=1, max_length=50, description="약어 (예: ACCT, 전역 유일)")
    definition: str = Field(..., min_length=1, description="정의")
    is_prime_class: bool = False
    category: Optional[str] = Field(None, max_length=100)


class AbbreviationUpdate(PatchSchema):
    """약어 수정 요청"""
    non_nullable = ("source", "abbreviation", "definition", "is_prime_class")

    source: Optional[str] = Field(None, min_length=1, max_length=255)
    abbreviation: Optional[str] = Field(None, min_length=1, max_length=50)
    definition: Optional[str] = Field(None, min_length=1)
    is_prime_class: Optional[bool] = None
    category: Optional[str] = Field(None, max_length=100)


class AbbreviationResponse(AuditedMixin):
    """약어 응답"""
    source: str
    abbreviation: str
    definition: str
    is_prime_class: bool
    category: Optional[str] = None
