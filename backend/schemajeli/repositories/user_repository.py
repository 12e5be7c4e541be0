# -*- coding: utf-8 -*-
"""
User Repository
사용자 데이터 접근 계층
"""
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from schemajeli.models import User
from schemajeli.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 Repository"""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """이메일로 사용자 조회 (삭제되지 않은 사용자)"""
        return self.find_active(email=email)

    def get_by_username(self, username: str) -> Optional[User]:
        """사용자명으로 조회 (삭제되지 않은 사용자)"""
        return self.find_active(username=username)

    def get_by_identifier(self, identifier: str) -> Optional[User]:
        """사용자명 또는 이메일로 조회 (로그인용)"""
        stmt = self.select().where(
            or_(User.username == identifier, User.email == identifier)
        )
        return self.db.scalars(stmt.limit(1)).first()
