"""
Catalog ORM Models
Server → Database → Table → Element 계층 및 Abbreviation 사전

이름 유일성은 삭제되지 않은 행 사이에서만 적용된다 (부분 유니크 인덱스).
"""
from enum import Enum
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from schemajeli.database import Base
from schemajeli.models.core import ACTIVE_ONLY, created_by_column, utcnow


class EntityStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class RdbmsType(str, Enum):
    POSTGRESQL = "POSTGRESQL"
    MYSQL = "MYSQL"
    ORACLE = "ORACLE"
    SQLSERVER = "SQLSERVER"
    DB2 = "DB2"
    INFORMIX = "INFORMIX"
    SQLITE = "SQLITE"
    MARIADB = "MARIADB"


class TableType(str, Enum):
    TABLE = "TABLE"
    VIEW = "VIEW"
    MATERIALIZED_VIEW = "MATERIALIZED_VIEW"


def _values(enum_cls) -> str:
    return ", ".join(f"'{member.value}'" for member in enum_cls)


STATUS_CHECK = f"status IN ({_values(EntityStatus)})"


class Server(Base):
    """데이터베이스 서버"""

    __tablename__ = "servers"
    __table_args__ = (
        CheckConstraint(STATUS_CHECK, name="ck_servers_status"),
        CheckConstraint(f"rdbms_type IN ({_values(RdbmsType)})", name="ck_servers_rdbms_type"),
        Index(
            "uq_servers_name_active", "name", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    host = Column(String(255), nullable=True)
    port = Column(Integer, nullable=True)
    rdbms_type = Column(String(20), nullable=False)
    location = Column(String(255), nullable=True)
    status = Column(String(20), default=EntityStatus.ACTIVE.value, nullable=False)

    created_by_id = created_by_column()
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    databases = relationship("Database", back_populates="server")

    def __repr__(self):
        return f"<Server(id={self.id}, name='{self.name}')>"


class Database(Base):
    """서버 내 논리 데이터베이스"""

    __tablename__ = "databases"
    __table_args__ = (
        CheckConstraint(STATUS_CHECK, name="ck_databases_status"),
        Index(
            "uq_databases_server_name_active", "server_id", "name", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
        Index("ix_databases_server_id", "server_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    server_id = Column(Uuid, ForeignKey("servers.id", ondelete="RESTRICT"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    purpose = Column(Text, nullable=True)
    status = Column(String(20), default=EntityStatus.ACTIVE.value, nullable=False)

    created_by_id = created_by_column()
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    server = relationship("Server", back_populates="databases")
    tables = relationship("Table", back_populates="database")

    def __repr__(self):
        return f"<Database(id={self.id}, name='{self.name}')>"


class Table(Base):
    """데이터베이스 내 테이블/뷰"""

    __tablename__ = "tables"
    __table_args__ = (
        CheckConstraint(STATUS_CHECK, name="ck_tables_status"),
        CheckConstraint(f"table_type IN ({_values(TableType)})", name="ck_tables_table_type"),
        Index(
            "uq_tables_database_name_active", "database_id", "name", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
        Index("ix_tables_database_id", "database_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    database_id = Column(Uuid, ForeignKey("databases.id", ondelete="RESTRICT"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    table_type = Column(String(30), default=TableType.TABLE.value, nullable=False)
    row_count_estimate = Column(Integer, nullable=True)
    status = Column(String(20), default=EntityStatus.ACTIVE.value, nullable=False)

    created_by_id = created_by_column()
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    database = relationship("Database", back_populates="tables")
    elements = relationship("Element", back_populates="table")

    def __repr__(self):
        return f"<Table(id={self.id}, name='{self.name}')>"


class Element(Base):
    """테이블 컬럼

    position: 삭제되지 않은 형제 사이에서 1..n 연속
    deleted_position: 삭제 시점의 위치 (preserve 복원 정책용)
    """

    __tablename__ = "elements"
    __table_args__ = (
        CheckConstraint("position >= 1", name="ck_elements_position_positive"),
        Index(
            "uq_elements_table_name_active", "table_id", "name", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
        Index("ix_elements_table_position", "table_id", "position"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="RESTRICT"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    data_type = Column(String(100), nullable=False)
    length = Column(Integer, nullable=True)
    precision = Column(Integer, nullable=True)
    scale = Column(Integer, nullable=True)
    is_nullable = Column(Boolean, default=True, nullable=False)
    is_primary_key = Column(Boolean, default=False, nullable=False)
    is_foreign_key = Column(Boolean, default=False, nullable=False)
    default_value = Column(String(255), nullable=True)
    position = Column(Integer, nullable=False)
    deleted_position = Column(Integer, nullable=True)

    created_by_id = created_by_column()
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    table = relationship("Table", back_populates="elements")

    def __repr__(self):
        return f"<Element(id={self.id}, name='{self.name}', position={self.position})>"


class Abbreviation(Base):
    """명명 규칙 약어 사전"""

    __tablename__ = "abbreviations"
    __table_args__ = (
        Index(
            "uq_abbreviations_abbreviation_active", "abbreviation", unique=True,
            postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
        ),
        Index("ix_abbreviations_category", "category"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    source = Column(String(255), nullable=False)
    abbreviation = Column(String(50), nullable=False)
    definition = Column(Text, nullable=False)
    is_prime_class = Column(Boolean, default=False, nullable=False)
    category = Column(String(100), nullable=True)

    created_by_id = created_by_column()
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Abbreviation('{self.abbreviation}' = '{self.source}')>"
