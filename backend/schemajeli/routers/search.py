"""
Search API 라우터
카탈로그 통합 검색, 타입별 검색, 검색 인덱스 조회
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from schemajeli.database import get_db
from schemajeli.models import EntityType, User
from schemajeli.routers.deps import PageParams, page_params
from schemajeli.schemas import (
    AbbreviationResponse,
    DatabaseResponse,
    ElementResponse,
    SearchIndexResponse,
    ServerResponse,
    TableResponse,
)
from schemajeli.services.rbac_service import require_read
from schemajeli.services.search_service import (
    SEARCH_TARGETS,
    resolve_entity_type,
    search_all,
    search_entity,
    search_index,
)
from schemajeli.shared.pagination import create_paginated_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter()

RESPONSE_SCHEMAS = {
    EntityType.SERVER: ServerResponse,
    EntityType.DATABASE: DatabaseResponse,
    EntityType.TABLE: TableResponse,
    EntityType.ELEMENT: ElementResponse,
    EntityType.ABBREVIATION: AbbreviationResponse,
}


def _serialize(entity_type: EntityType, items: List[Any]) -> List[Dict[str, Any]]:
    schema = RESPONSE_SCHEMAS[entity_type]
    return [schema.serialize(item) for item in items]


@router.get("/")
async def search(
    q: Optional[str] = Query(None, description="검색어"),
    limit: int = Query(10, ge=1, le=100, description="타입별 최대 결과 수"),
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
):
    """
    전체 카탈로그 통합 검색

    - 서버, 데이터베이스, 테이블, 컬럼, 약어를 한 번에 검색
    - 검색어 누락 시 400
    """
    results = search_all(db, q, limit)
    data: Dict[str, Any] = {"query": q.strip()}
    for entity_type, target in SEARCH_TARGETS.items():
        data[target.result_key] = _serialize(entity_type, results[target.result_key])
    data["totalResults"] = results["totalResults"]
    return success_response(data)


@router.get("/index")
async def search_index_entries(
    q: Optional[str] = Query(None, description="검색어"),
    entity_type: Optional[str] = Query(None, alias="entityType", description="엔티티 타입 필터"),
    pagination: PageParams = Depends(page_params),
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
):
    """검색 인덱스 조회 (페이지네이션)"""
    items, total = search_index(db, q, entity_type, pagination.page, pagination.limit)
    return create_paginated_response(
        [SearchIndexResponse.serialize(row) for row in items], total, pagination.page, pagination.limit
    )


@router.get("/{entity_type}")
async def search_by_type(
    entity_type: str,
    q: Optional[str] = Query(None, description="검색어"),
    limit: int = Query(10, ge=1, le=100, description="최대 결과 수"),
    _: User = Depends(require_read),
    db: Session = Depends(get_db),
):
    """
    엔티티 타입별 검색

    Args:
        entity_type: servers, databases, tables, elements, abbreviations (단수형도 허용)
    """
    resolved = resolve_entity_type(entity_type)
    items = search_entity(db, resolved, q, limit)
    return success_response(_serialize(resolved, items))
