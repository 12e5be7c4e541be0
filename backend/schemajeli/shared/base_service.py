"""
Base service class for soft-deletable catalog entities

Every mutation runs its checks and writes inside one transaction:
existence -> uniqueness -> cascade -> perform -> audit -> search index.
The first failing check short-circuits with its specific AppError and
the whole transaction is rolled back.
"""
import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Iterator, List, Optional, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from schemajeli.auth.dependencies import ActorContext
from schemajeli.config import Settings, get_settings
from schemajeli.models import AuditAction, EntityStatus, EntityType
from schemajeli.repositories.base_repository import BaseRepository
from schemajeli.services.audit_service import AuditService, snapshot
from schemajeli.services.search_service import SearchIndexer, search_condition
from schemajeli.shared.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, paginate
from schemajeli.utils.errors import (
    AppError,
    ConflictError,
    NotFoundError,
    ValidationError,
    classify_error,
    is_unique_violation,
)
from schemajeli.utils.metrics import record_mutation

logger = logging.getLogger(__name__)

T = TypeVar('T')

NO_ACTOR = ActorContext()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SoftDeleteService(Generic[T]):
    """
    Base service providing the consistency discipline for catalog entities

    Subclasses declare the model and its place in the hierarchy:

    Example:
        class DatabaseService(SoftDeleteService[Database]):
            model = Database
            entity_type = EntityType.DATABASE
            scope_field = "server_id"
            parent_model = Server
            child_model = Table
            child_fk = "database_id"
            child_label = "table"
    """

    model: Type[T]
    entity_type: EntityType
    label: str = ""

    # Name uniqueness among non-deleted rows within scope (None = global)
    unique_fields: Tuple[str, ...] = ("name",)
    scope_field: Optional[str] = None
    parent_model: Optional[Type[Any]] = None

    # Cascade guard
    child_model: Optional[Type[Any]] = None
    child_fk: Optional[str] = None
    child_label: str = ""

    # List options
    search_fields: Tuple[str, ...] = ("name",)
    exact_filters: Tuple[str, ...] = ()
    substring_filters: Tuple[str, ...] = ()
    order_by: Tuple[str, ...] = ("name",)

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        """
        Args:
            db: SQLAlchemy session (one transaction per operation)
            settings: Application settings (durability, restore policy)
        """
        self.db = db
        self.settings = settings or get_settings()
        self.label = self.label or self.model.__name__
        self.repo = BaseRepository(db, self.model, self.label)
        self.audit = AuditService(db, self.settings.audit_log_durability)
        self.indexer = SearchIndexer(db, self.settings.search_index_durability)
        if self.parent_model is not None:
            self.parent_repo = BaseRepository(db, self.parent_model)
        if self.child_model is not None:
            self.child_repo = BaseRepository(db, self.child_model)

    # ------------------------------------------------------------------
    # Transaction
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit on success, roll back everything on any failure"""
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"{self.label} write rejected by constraint: {e.orig}")
            raise self.constraint_error(e) from e
        except Exception:
            self.db.rollback()
            raise

    def conflict_error(self, field: str) -> ConflictError:
        message = f"{self.label} with this {field} already exists"
        if self.scope_field and self.parent_model is not None:
            message += f" in this {self.parent_model.__name__.lower()}"
        return ConflictError(message)

    def constraint_error(self, error: IntegrityError) -> AppError:
        """Unique index violation -> ConflictError naming the column, anything else -> classify_error"""
        if not is_unique_violation(error):
            return classify_error(error)
        text = str(error.orig).lower()
        for field in self.unique_fields:
            if re.search(rf"\b{field}\b", text):
                return self.conflict_error(field)
        return self.conflict_error(self.unique_fields[0])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, entity_id: UUID, include_deleted: bool = False) -> T:
        """
        Get entity by id

        Raises:
            NotFoundError: missing, or deleted unless include_deleted
        """
        return self.repo.get_by_id_or_404(entity_id, include_deleted=include_deleted)

    def build_query(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        include_deleted: bool = False,
    ) -> Select:
        stmt = self.repo.select(include_deleted)

        for field, value in (filters or {}).items():
            if value is None or value == "":
                continue
            if field in self.substring_filters:
                stmt = stmt.where(getattr(self.model, field).icontains(value, autoescape=True))
            elif field in self.exact_filters:
                stmt = stmt.where(getattr(self.model, field) == value)
            else:
                raise ValidationError(
                    f"Unsupported filter for {self.label}: {field}",
                    details={"allowed": sorted(self.exact_filters + self.substring_filters)},
                )

        if search:
            stmt = stmt.where(search_condition(self.model, self.search_fields, search))

        return stmt.order_by(*[getattr(self.model, f).asc() for f in self.order_by])

    def list(
        self,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        include_deleted: bool = False,
    ) -> Tuple[List[T], int]:
        """
        List entities with pagination, filtering and search

        Args:
            page: Page number (1-indexed)
            limit: Page size
            filters: field -> value (None values ignored)
            search: case-insensitive substring across search_fields
            include_deleted: include soft-deleted rows

        Returns:
            Tuple of (items, total)
        """
        stmt = self.build_query(filters, search, include_deleted)
        return paginate(self.db, stmt, page, limit)

    def count(self, filters: Optional[Dict[str, Any]] = None, include_deleted: bool = False) -> int:
        _, total = self.list(page=1, limit=1, filters=filters, include_deleted=include_deleted)
        return total

    def list_children_of(self, parent_id: UUID) -> List[T]:
        """Non-deleted entities under a non-deleted parent"""
        self.parent_repo.get_by_id_or_404(parent_id)
        stmt = self.build_query().where(getattr(self.model, self.scope_field) == parent_id)
        return list(self.db.scalars(stmt).all())

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _lock_parent(self, parent_id: UUID) -> Any:
        """Parent must exist and not be deleted; locked for the transaction"""
        return self.parent_repo.get_by_id_or_404(parent_id, for_update=True)

    def _lock_scope(self, entity_id: UUID, include_deleted: bool = False) -> None:
        """Lock the parent of entity_id before the entity itself (parent -> child lock order)"""
        if self.parent_model is None:
            return
        stmt = select(getattr(self.model, self.scope_field)).where(self.model.id == entity_id)
        if not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        parent_id = self.db.scalar(stmt)
        if parent_id is not None:
            self._lock_parent(parent_id)

    def _scope_criteria(self, scope_value: Any) -> Dict[str, Any]:
        return {self.scope_field: scope_value} if self.scope_field else {}

    def _ensure_unique(
        self,
        values: Dict[str, Any],
        scope_value: Any = None,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        """Each unique field present in values must be free among non-deleted rows in scope"""
        for field in self.unique_fields:
            value = values.get(field)
            if value is None:
                continue
            criteria = {field: value, **self._scope_criteria(scope_value)}
            if self.repo.find_active(exclude_id=exclude_id, **criteria) is not None:
                logger.warning(f"{self.label} conflict on {field}={value!r}")
                raise self.conflict_error(field)

    def _ensure_no_active_children(self, entity: T) -> None:
        if self.child_model is None:
            return
        active = self.child_repo.count_active(**{self.child_fk: entity.id})
        if active > 0:
            logger.warning(f"Refused to delete {self.label} {entity.id}: {active} active {self.child_label}(s)")
            raise ConflictError(
                f"Cannot delete {self.label.lower()}: {active} active "
                f"{self.child_label}(s) still reference it",
                details={"activeChildren": active},
            )

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _before_create(self, entity: T) -> None:
        """Called after checks, before insert"""

    def _before_update(self, entity: T, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Called after checks, before the patch is applied"""
        return changes

    def _after_soft_delete(self, entity: T) -> None:
        """Called after deleted_at is set, within the same transaction"""

    def _before_restore(self, entity: T) -> None:
        """Called after restore checks, before deleted_at is cleared"""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _record(
        self,
        entity: T,
        action: AuditAction,
        changes: Dict[str, Any],
        actor: ActorContext,
    ) -> None:
        self.audit.record(
            self.entity_type,
            entity.id,
            action,
            user_id=actor.user_id,
            changes=changes,
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
        )

    def create(self, data: Dict[str, Any], actor: ActorContext = NO_ACTOR) -> T:
        """
        Create entity

        Raises:
            NotFoundError: parent missing or deleted
            ConflictError: name already used in scope
        """
        with self.transaction():
            scope_value = data.get(self.scope_field) if self.scope_field else None
            if self.parent_model is not None:
                self._lock_parent(scope_value)

            self._ensure_unique(data, scope_value)

            entity = self.model(**data)
            if hasattr(entity, "created_by_id"):
                entity.created_by_id = actor.user_id
            self._before_create(entity)
            self.repo.create(entity)

            self._record(entity, AuditAction.CREATE, {"created": snapshot(entity)}, actor)
            self.indexer.upsert(self.entity_type, entity)

        logger.info(f"{self.label} created: {entity.id}")
        record_mutation(self.entity_type.value, AuditAction.CREATE.value)
        return entity

    def update(self, entity_id: UUID, data: Dict[str, Any], actor: ActorContext = NO_ACTOR) -> T:
        """
        Apply a partial patch

        Raises:
            NotFoundError: missing or deleted
            ConflictError: new name already used in scope
        """
        with self.transaction():
            self._lock_scope(entity_id)
            entity = self.repo.get_by_id_or_404(entity_id, for_update=True)
            before = snapshot(entity)

            changes = {k: v for k, v in data.items() if k != "id"}
            renamed = {
                field: changes[field]
                for field in self.unique_fields
                if changes.get(field) is not None and changes[field] != getattr(entity, field)
            }
            if renamed:
                scope_value = getattr(entity, self.scope_field) if self.scope_field else None
                self._ensure_unique(renamed, scope_value, exclude_id=entity.id)

            changes = self._before_update(entity, changes)
            for field, value in changes.items():
                setattr(entity, field, value)
            self.repo.update(entity)

            self._record(
                entity, AuditAction.UPDATE, {"before": before, "after": snapshot(entity)}, actor
            )
            self.indexer.upsert(self.entity_type, entity)

        logger.info(f"{self.label} updated: {entity.id}")
        record_mutation(self.entity_type.value, AuditAction.UPDATE.value)
        return entity

    def soft_delete(self, entity_id: UUID, actor: ActorContext = NO_ACTOR) -> T:
        """
        Soft delete (deleted_at = now, status = ARCHIVED)

        Raises:
            NotFoundError: missing or already deleted
            ConflictError: non-deleted children still reference it
        """
        with self.transaction():
            self._lock_scope(entity_id)
            entity = self.repo.get_by_id_or_404(entity_id, for_update=True)
            self._ensure_no_active_children(entity)

            entity.deleted_at = utcnow()
            if hasattr(entity, "status"):
                entity.status = EntityStatus.ARCHIVED.value
            self.repo.update(entity)
            self._after_soft_delete(entity)

            self._record(entity, AuditAction.DELETE, {"deleted": snapshot(entity)}, actor)
            self.indexer.remove(self.entity_type, entity.id)

        logger.info(f"{self.label} soft-deleted: {entity.id}")
        record_mutation(self.entity_type.value, AuditAction.DELETE.value)
        return entity

    def restore(self, entity_id: UUID, actor: ActorContext = NO_ACTOR) -> T:
        """
        Restore a soft-deleted entity (deleted_at = NULL, status = ACTIVE)

        Raises:
            NotFoundError: missing, not deleted, or parent deleted
            ConflictError: name taken in scope since deletion
        """
        with self.transaction():
            self._lock_scope(entity_id, include_deleted=True)
            entity = self.repo.get_by_id_or_404(entity_id, include_deleted=True, for_update=True)
            if entity.deleted_at is None:
                raise NotFoundError(f"Deleted {self.label.lower()} not found", details={"id": str(entity_id)})

            scope_value = getattr(entity, self.scope_field) if self.scope_field else None
            self._ensure_unique(
                {field: getattr(entity, field) for field in self.unique_fields},
                scope_value,
                exclude_id=entity.id,
            )

            before = snapshot(entity)
            self._before_restore(entity)
            entity.deleted_at = None
            if hasattr(entity, "status"):
                entity.status = EntityStatus.ACTIVE.value
            self.repo.update(entity)

            self._record(
                entity, AuditAction.UPDATE, {"before": before, "after": snapshot(entity)}, actor
            )
            self.indexer.upsert(self.entity_type, entity)

        logger.info(f"{self.label} restored: {entity.id}")
        record_mutation(self.entity_type.value, AuditAction.UPDATE.value)
        return entity

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def _active_count(self, *conditions: Any) -> int:
        stmt = select(func.count()).select_from(self.model).where(
            self.model.deleted_at.is_(None), *conditions
        )
        return self.db.scalar(stmt) or 0

    def _group_counts(
        self,
        field: str,
        key: str,
        limit: Optional[int] = None,
        skip_null: bool = False,
    ) -> List[Dict[str, Any]]:
        """Non-deleted row counts grouped by one column, largest first"""
        column = getattr(self.model, field)
        stmt = (
            select(column, func.count().label("count"))
            .where(self.model.deleted_at.is_(None))
            .group_by(column)
            .order_by(func.count().desc(), column)
        )
        if skip_null:
            stmt = stmt.where(column.is_not(None))
        if limit:
            stmt = stmt.limit(limit)
        return [{key: value, "count": count} for value, count in self.db.execute(stmt).all()]
