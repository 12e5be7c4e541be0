"""
Core Schema ORM Models
사용자, 감사 로그, 검색 인덱스

감사 로그는 append-only: ORM 레벨에서 수정/삭제를 거부한다.
"""
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    event,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB

from schemajeli.database import Base

# PostgreSQL에서는 JSONB, 그 외(SQLite 테스트)는 JSON
JSONType = JSON().with_variant(JSONB(), "postgresql")

ACTIVE_ONLY = text("deleted_at IS NULL")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityType(str, Enum):
    """감사/검색 대상 엔티티 타입"""
    SERVER = "SERVER"
    DATABASE = "DATABASE"
    TABLE = "TABLE"
    ELEMENT = "ELEMENT"
    ABBREVIATION = "ABBREVIATION"
    USER = "USER"


class AuditAction(str, Enum):
    """감사 액션"""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class User(Base):
    """사용자

    RBAC 역할: ADMIN(전체), MAINTAINER(읽기/쓰기), VIEWER(조회)
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'MAINTAINER', 'VIEWER')",
            name="ck_users_role"
        ),
        Index(
            "uq_users_username_active", "username", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
        Index(
            "uq_users_email_active", "email", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    username = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="VIEWER", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"


class AuditLog(Base):
    """감사 로그 (append-only)

    엔티티와 독립적으로 존재하며 엔티티 삭제 시에도 유지된다.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE')",
            name="ck_audit_logs_action"
        ),
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
        Index("ix_audit_logs_user", "user_id"),
        Index("ix_audit_logs_created_at", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    entity_type = Column(String(20), nullable=False)
    # FK 없음: 감사 이력은 대상 엔티티와 독립
    entity_id = Column(Uuid, nullable=False)
    action = Column(String(10), nullable=False)
    user_id = Column(Uuid, nullable=True)
    changes = Column(JSONType, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<AuditLog({self.action} {self.entity_type}:{self.entity_id})>"


class ImmutableAuditLogError(RuntimeError):
    """감사 로그 수정/삭제 시도"""


@event.listens_for(AuditLog, "before_update")
def _reject_audit_update(mapper, connection, target):
    raise ImmutableAuditLogError("Audit log entries are immutable")


@event.listens_for(AuditLog, "before_delete")
def _reject_audit_delete(mapper, connection, target):
    raise ImmutableAuditLogError("Audit log entries cannot be deleted")


class SearchIndex(Base):
    """검색 인덱스

    엔티티별 검색 가능한 텍스트를 집계하여 보관
    """

    __tablename__ = "search_index"
    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", name="uq_search_index_entity"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    entity_type = Column(String(20), nullable=False)
    entity_id = Column(Uuid, nullable=False)
    content = Column(Text, nullable=False)
    # metadata는 Declarative 예약어
    index_metadata = Column("metadata", JSONType, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<SearchIndex({self.entity_type}:{self.entity_id})>"


# created_by_id 컬럼 정의용 헬퍼
def created_by_column():
    return Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
