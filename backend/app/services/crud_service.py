"""
CRUD Service - shared business logic for reference-data resources

Every resource (states, districts, ..., permissions) is a subclass that
declares its model, searchable/sortable columns, parent foreign keys and
the child tables that block deletion. The subclass adds only what is
specific to the resource.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, func, or_, update
from sqlalchemy.sql import Select
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from app.core.database import Base
from app.core.exceptions import (
    DuplicateResourceError,
    ResourceInUseError,
    ResourceNotFoundError,
    ValidationError,
)
from app.core.logging_config import get_logger
from app.utils.pagination import ListParams, paginate

ModelT = TypeVar("ModelT", bound=Base)

BASE_SORT_COLUMNS = ("id", "created_date", "updated_date", "active")


def clean_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Enum members -> their values so String columns get plain strings"""
    return {key: value.value if isinstance(value, Enum) else value for key, value in data.items()}


class CRUDService(Generic[ModelT]):
    """Generic service for one table"""

    model: Type[ModelT]
    label: str = "Record"
    plural: str = "records"
    name_column: Optional[str] = None
    search_columns: Sequence[str] = ()
    sort_columns: Sequence[str] = ()
    filter_columns: Sequence[str] = ()
    default_order: Sequence[str] = ("id",)
    # column -> (parent model, label); parents must exist on create/update
    parents: Dict[str, Tuple[Type[Base], str]] = {}
    # (child model, foreign key column, plural label); any row blocks delete
    children: Sequence[Tuple[Type[Base], str, str]] = ()

    def __init__(self):
        self.logger = get_logger(f"services.{self.plural}")

    # ==================== QUERY BUILDING ====================

    def base_query(self) -> Select:
        return select(self.model)

    def order_clause(self) -> list:
        return [getattr(self.model, column).asc() for column in self.default_order]

    def apply_filters(
        self,
        query: Select,
        params: Optional[ListParams] = None,
        filters: Optional[Dict[str, Any]] = None
    ) -> Select:
        """Search, status and column-equality filters; None values are ignored"""
        for column, value in (filters or {}).items():
            if value is None:
                continue
            if column not in self.filter_columns:
                raise ValidationError(f"Unknown filter '{column}'", field=column)
            query = query.where(getattr(self.model, column) == value)

        if params is None:
            return query

        if params.search and self.search_columns:
            term = f"%{params.search}%"
            query = query.where(or_(*[
                getattr(self.model, column).ilike(term) for column in self.search_columns
            ]))

        if params.status == "active":
            query = query.where(self.model.active.is_(True))
        elif params.status == "inactive":
            query = query.where(self.model.active.is_(False))

        return query

    def sort_clause(self, params: ListParams):
        allowed = set(BASE_SORT_COLUMNS) | set(self.sort_columns)
        if params.sort_by not in allowed:
            raise ValidationError(
                f"sort_by must be one of: {', '.join(sorted(allowed))}",
                field="sort_by"
            )
        column = getattr(self.model, params.sort_by)
        return column.desc() if params.descending else column.asc()

    # ==================== READ ====================

    async def search(
        self,
        db: AsyncSession,
        params: ListParams,
        filters: Optional[Dict[str, Any]] = None
    ) -> Tuple[List[ModelT], Dict[str, Any]]:
        """Paginated search used by the list endpoints"""
        query = self.apply_filters(self.base_query(), params, filters)
        query = query.order_by(self.sort_clause(params), self.model.id.asc())
        return await paginate(db, query, params.page, params.limit)

    async def list_active(self, db: AsyncSession, **filters) -> List[ModelT]:
        """All active rows in the resource's natural order"""
        query = self.apply_filters(self.base_query(), filters=filters)
        query = query.where(self.model.active.is_(True)).order_by(*self.order_clause())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, item_id: int) -> ModelT:
        result = await db.execute(self.base_query().where(self.model.id == item_id))
        item = result.scalar_one_or_none()
        if item is None:
            raise ResourceNotFoundError(self.label, item_id)
        return item

    async def exists(self, db: AsyncSession, item_id: int) -> bool:
        count = await db.scalar(select(func.count()).select_from(self.model).where(self.model.id == item_id))
        return bool(count)

    # ==================== WRITE ====================

    async def check_parents(self, db: AsyncSession, data: Dict[str, Any]) -> None:
        for column, (parent_model, parent_label) in self.parents.items():
            parent_id = data.get(column)
            if parent_id is None:
                continue
            found = await db.scalar(
                select(func.count()).select_from(parent_model).where(parent_model.id == parent_id)
            )
            if not found:
                raise ResourceNotFoundError(parent_label, parent_id)

    async def flush(self, db: AsyncSession) -> None:
        """Flush pending writes, turning unique violations into a 400"""
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            self.logger.warning(f"{self.label} unique constraint violated: {e.orig}")
            raise DuplicateResourceError(self.label)

    async def create(self, db: AsyncSession, data: Dict[str, Any], user_id: Optional[int] = None) -> ModelT:
        data = {key: value for key, value in clean_values(data).items() if value is not None}
        await self.check_parents(db, data)

        item = self.model(**data)
        if data.get("active") is None:
            item.active = True
        item.created_by = user_id
        item.updated_by = user_id

        db.add(item)
        await self.flush(db)
        await db.refresh(item)

        self.logger.info(f"Created {self.label} {item.id}", extra={"created_by": user_id})
        return item

    async def update(
        self,
        db: AsyncSession,
        item_id: int,
        data: Dict[str, Any],
        user_id: Optional[int] = None
    ) -> ModelT:
        item = await self.get(db, item_id)
        data = clean_values(data)
        await self.check_parents(db, data)

        for field, value in data.items():
            setattr(item, field, value)
        item.updated_by = user_id
        item.updated_date = datetime.utcnow()

        await self.flush(db)
        await db.refresh(item)

        self.logger.info(f"Updated {self.label} {item_id}", extra={"updated_by": user_id})
        return item

    async def check_children(self, db: AsyncSession, item_id: int) -> None:
        for child_model, fk_column, child_label in self.children:
            count = await db.scalar(
                select(func.count()).select_from(child_model)
                .where(getattr(child_model, fk_column) == item_id)
            )
            if count:
                raise ResourceInUseError(self.label.lower(), child_label)

    async def delete(self, db: AsyncSession, item_id: int) -> None:
        item = await self.get(db, item_id)
        await self.check_children(db, item_id)
        await db.delete(item)
        await db.flush()
        self.logger.info(f"Deleted {self.label} {item_id}")

    async def set_active(
        self,
        db: AsyncSession,
        item_id: int,
        active: bool,
        user_id: Optional[int] = None
    ) -> ModelT:
        return await self.update(db, item_id, {"active": active}, user_id)

    async def toggle_status(self, db: AsyncSession, item_id: int, user_id: Optional[int] = None) -> ModelT:
        item = await self.get(db, item_id)
        return await self.update(db, item_id, {"active": not item.active}, user_id)

    # ==================== ORDERING ====================

    async def set_priority(
        self,
        db: AsyncSession,
        item_id: int,
        priority: int,
        user_id: Optional[int] = None
    ) -> ModelT:
        return await self.update(db, item_id, {"priority": priority}, user_id)

    async def reorder(self, db: AsyncSession, items: Sequence[Any], user_id: Optional[int] = None) -> int:
        """Bulk priority update from [{id, priority}]; unknown ids are a 404"""
        ids = [entry.id for entry in items]
        found = await db.scalar(
            select(func.count()).select_from(self.model).where(self.model.id.in_(ids))
        )
        if found != len(set(ids)):
            raise ResourceNotFoundError(self.label)

        for entry in items:
            await db.execute(
                update(self.model)
                .where(self.model.id == entry.id)
                .values(priority=entry.priority, updated_by=user_id, updated_date=datetime.utcnow())
            )
        self.logger.info(f"Reordered {len(items)} {self.plural}")
        return len(items)

    # ==================== STATISTICS ====================

    async def stats(self, db: AsyncSession) -> Dict[str, Any]:
        total = await db.scalar(select(func.count()).select_from(self.model)) or 0
        active = await db.scalar(
            select(func.count()).select_from(self.model).where(self.model.active.is_(True))
        ) or 0
        return {"total": total, "active": active, "inactive": total - active}
