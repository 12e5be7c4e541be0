# -*- coding: utf-8 -*-
"""
Base Repository
모든 Repository의 기본 클래스

삭제되지 않은 행(deleted_at IS NULL)을 기본 조회 대상으로 한다.
"""
from typing import Any, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from schemajeli.utils.errors import raise_not_found

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """
    기본 Repository 클래스
    soft delete 인지 조회 및 공통 쓰기 메서드 제공
    """

    def __init__(self, db: Session, model: Type[T], label: Optional[str] = None):
        self.db = db
        self.model = model
        self.label = label or model.__name__

    def select(self, include_deleted: bool = False) -> Select:
        """기본 SELECT (삭제된 행 제외)"""
        stmt = select(self.model)
        if not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))  # type: ignore
        return stmt

    def get_by_id(
        self,
        id: UUID,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Optional[T]:
        """ID로 조회 (for_update: 행 잠금, SQLite에서는 무시됨)"""
        stmt = self.select(include_deleted).where(self.model.id == id)  # type: ignore
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.scalars(stmt).first()

    def get_by_id_or_404(
        self,
        id: UUID,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> T:
        """ID로 조회 (없으면 404)"""
        resource = self.get_by_id(id, include_deleted=include_deleted, for_update=for_update)
        if resource is None:
            raise_not_found(self.label, str(id))
        return resource

    def find_active(self, exclude_id: Optional[UUID] = None, **criteria: Any) -> Optional[T]:
        """조건에 맞는 삭제되지 않은 행 하나 (exclude_id 제외)"""
        stmt = self.select()
        for field, value in criteria.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)  # type: ignore
        return self.db.scalars(stmt.limit(1)).first()

    def count_active(self, **criteria: Any) -> int:
        """조건에 맞는 삭제되지 않은 행 수"""
        stmt = select(func.count()).select_from(self.model).where(
            self.model.deleted_at.is_(None)  # type: ignore
        )
        for field, value in criteria.items():
            stmt = stmt.where(getattr(self.model, field) == value)
        return self.db.scalar(stmt) or 0

    def list_where(self, *conditions: Any, order_by: Any = None) -> List[T]:
        """조건 목록으로 삭제되지 않은 행 조회"""
        stmt = self.select().where(*conditions)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(self.db.scalars(stmt).all())

    def create(self, obj: T) -> T:
        """생성"""
        self.db.add(obj)
        self.db.flush()
        return obj

    def update(self, obj: T) -> T:
        """업데이트"""
        self.db.add(obj)
        self.db.flush()
        return obj
