"""
Base Pydantic schemas
"""
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with camelCase JSON keys"""
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=True,
    )

    @classmethod
    def serialize(cls, obj: Any) -> Dict[str, Any]:
        """ORM instance -> JSON-ready dict with camelCase keys"""
        return cls.model_validate(obj).model_dump(by_alias=True, mode="json")


class PatchSchema(BaseSchema):
    """Partial update schema: listed fields may be omitted but not set to null"""
    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_required(self):
        for field in self.non_nullable:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{to_camel(field)} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly sent by the client"""
        return self.model_dump(exclude_unset=True)


class TimestampMixin(BaseSchema):
    """Mixin for models with timestamps"""
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None


class AuditedMixin(TimestampMixin):
    """Mixin for catalog entities with creator tracking"""
    id: UUID
    created_by_id: Optional[UUID] = None
