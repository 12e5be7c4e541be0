"""
SQLAlchemy ORM Models
"""
from schemajeli.models.core import (
    AuditAction,
    AuditLog,
    EntityType,
    ImmutableAuditLogError,
    SearchIndex,
    User,
)
from schemajeli.models.catalog import (
    Abbreviation,
    Database,
    Element,
    EntityStatus,
    RdbmsType,
    Server,
    Table,
    TableType,
)

__all__ = [
    "AuditAction",
    "AuditLog",
    "EntityType",
    "ImmutableAuditLogError",
    "SearchIndex",
    "User",
    "Abbreviation",
    "Database",
    "Element",
    "EntityStatus",
    "RdbmsType",
    "Server",
    "Table",
    "TableType",
]
