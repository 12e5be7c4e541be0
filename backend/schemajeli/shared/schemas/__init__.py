"""
Shared Pydantic schemas
"""
from .base import AuditedMixin, BaseSchema, PatchSchema, TimestampMixin

__all__ = [
    'AuditedMixin',
    'BaseSchema',
    'PatchSchema',
    'TimestampMixin',
]
