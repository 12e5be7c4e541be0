"""
Catalog Search Service
카탈로그 엔티티 통합 검색 및 검색 인덱스 유지

- search_all / search_entity: 엔티티 테이블 직접 조회 (대소문자 무시 부분 일치)
- search_index: SearchIndex 테이블 조회
- SearchIndexer: 변경 작업 후 인덱스 행 갱신 (설정된 내구성에 따름)
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from schemajeli.models import (
    Abbreviation,
    Database,
    Element,
    EntityType,
    SearchIndex,
    Server,
    Table,
)
from schemajeli.shared.durability import BEST_EFFORT, run_side_effect, validate_durability
from schemajeli.shared.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, paginate
from schemajeli.utils.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchTarget:
    """검색 대상 엔티티 정의"""
    entity_type: EntityType
    model: Type[Any]
    fields: Tuple[str, ...]
    order_by: str
    result_key: str


SEARCH_TARGETS: Dict[EntityType, SearchTarget] = {
    EntityType.SERVER: SearchTarget(
        EntityType.SERVER, Server, ("name", "description", "host", "location"), "name", "servers"
    ),
    EntityType.DATABASE: SearchTarget(
        EntityType.DATABASE, Database, ("name", "description", "purpose"), "name", "databases"
    ),
    EntityType.TABLE: SearchTarget(
        EntityType.TABLE, Table, ("name", "description"), "name", "tables"
    ),
    EntityType.ELEMENT: SearchTarget(
        EntityType.ELEMENT, Element, ("name", "description", "data_type"), "name", "elements"
    ),
    EntityType.ABBREVIATION: SearchTarget(
        EntityType.ABBREVIATION,
        Abbreviation,
        ("source", "abbreviation", "definition"),
        "abbreviation",
        "abbreviations",
    ),
}

# URL 경로용 별칭 (servers, server, SERVER 모두 허용)
_TYPE_ALIASES = {
    alias: target.entity_type
    for target in SEARCH_TARGETS.values()
    for alias in (target.result_key, target.entity_type.value.lower())
}


def resolve_entity_type(value: Union[str, EntityType]) -> EntityType:
    """검색 대상 타입 해석 (지원하지 않는 타입은 ValidationError)"""
    if isinstance(value, EntityType) and value in SEARCH_TARGETS:
        return value
    entity_type = _TYPE_ALIASES.get(str(value).strip().lower())
    if entity_type is None:
        raise ValidationError(
            f"Unsupported entity type: {value}",
            details={"supported": sorted(t.result_key for t in SEARCH_TARGETS.values())},
        )
    return entity_type


def search_condition(model: Type[Any], fields: Sequence[str], query: str):
    """필드 중 하나라도 query를 그대로 포함하는 조건 (대소문자 무시, % _ 도 일반 문자)"""
    return or_(*[getattr(model, field).icontains(query, autoescape=True) for field in fields])


def _require_query(query: Optional[str]) -> str:
    text = (query or "").strip()
    if not text:
        raise ValidationError("Search query is required")
    return text


def search_entity(
    db: Session,
    entity_type: Union[str, EntityType],
    query: str,
    limit: int = 10,
) -> List[Any]:
    """
    단일 엔티티 타입 검색 (삭제되지 않은 행, 이름순)

    Args:
        db: DB 세션
        entity_type: 엔티티 타입 또는 별칭
        query: 검색어
        limit: 최대 결과 수

    Returns:
        ORM 인스턴스 목록
    """
    target = SEARCH_TARGETS[resolve_entity_type(entity_type)]
    text = _require_query(query)

    stmt = (
        select(target.model)
        .where(target.model.deleted_at.is_(None))
        .where(search_condition(target.model, target.fields, text))
        .order_by(getattr(target.model, target.order_by).asc())
        .limit(limit)
    )
    return list(db.scalars(stmt).all())


def search_all(db: Session, query: str, limit: int = 10) -> Dict[str, Any]:
    """
    모든 카탈로그 엔티티 타입 통합 검색

    Returns:
        {"servers": [...], "databases": [...], "tables": [...], "elements": [...],
         "abbreviations": [...], "totalResults": n}
    """
    text = _require_query(query)
    results: Dict[str, Any] = {}
    total = 0
    for entity_type, target in SEARCH_TARGETS.items():
        items = search_entity(db, entity_type, text, limit)
        results[target.result_key] = items
        total += len(items)

    results["totalResults"] = total
    logger.debug(f"Search '{text}' returned {total} results")
    return results


def search_index(
    db: Session,
    query: str,
    entity_type: Optional[Union[str, EntityType]] = None,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> Tuple[List[SearchIndex], int]:
    """
    검색 인덱스 조회

    Returns:
        (SearchIndex 목록, 전체 건수)
    """
    text = _require_query(query)
    stmt = select(SearchIndex).where(SearchIndex.content.icontains(text, autoescape=True))
    if entity_type:
        stmt = stmt.where(SearchIndex.entity_type == resolve_entity_type(entity_type).value)
    stmt = stmt.order_by(SearchIndex.updated_at.desc(), SearchIndex.id)
    return paginate(db, stmt, page, limit)


def build_index_content(entity_type: EntityType, instance: Any) -> str:
    """검색 필드 값을 공백으로 이어 붙인 인덱스 텍스트"""
    target = SEARCH_TARGETS[entity_type]
    values = [getattr(instance, field) for field in target.fields]
    return " ".join(str(value) for value in values if value)


def build_index_metadata(entity_type: EntityType, instance: Any) -> Dict[str, Any]:
    """검색 결과 표시에 필요한 최소 정보"""
    target = SEARCH_TARGETS[entity_type]
    metadata: Dict[str, Any] = {"label": str(getattr(instance, target.order_by))}
    for parent_key in ("server_id", "database_id", "table_id"):
        value = getattr(instance, parent_key, None)
        if value is not None:
            metadata[parent_key] = str(value)
    return metadata


class SearchIndexer:
    """
    SearchIndex 유지 관리자

    Usage:
        indexer = SearchIndexer(db, durability=settings.search_index_durability)
        indexer.upsert(EntityType.SERVER, server)
        indexer.remove(EntityType.SERVER, server.id)
    """

    def __init__(self, db: Session, durability: str = BEST_EFFORT):
        self.db = db
        self.durability = validate_durability(durability)

    def upsert(self, entity_type: EntityType, instance: Any) -> None:
        """인덱스 행 생성 또는 갱신"""
        if entity_type not in SEARCH_TARGETS:
            return

        def write() -> None:
            row = self.db.scalars(
                select(SearchIndex).where(
                    SearchIndex.entity_type == entity_type.value,
                    SearchIndex.entity_id == instance.id,
                )
            ).first()
            if row is None:
                row = SearchIndex(entity_type=entity_type.value, entity_id=instance.id)
                self.db.add(row)
            row.content = build_index_content(entity_type, instance)
            row.index_metadata = build_index_metadata(entity_type, instance)
            self.db.flush()

        run_side_effect(self.db, self.durability, write, f"search index upsert {entity_type.value}:{instance.id}")

    def remove(self, entity_type: EntityType, entity_id: UUID) -> None:
        """인덱스 행 삭제"""
        if entity_type not in SEARCH_TARGETS:
            return

        def write() -> None:
            self.db.execute(
                delete(SearchIndex).where(
                    SearchIndex.entity_type == entity_type.value,
                    SearchIndex.entity_id == entity_id,
                )
            )

        run_side_effect(self.db, self.durability, write, f"search index remove {entity_type.value}:{entity_id}")
