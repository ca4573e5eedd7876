"""
Base CRUD operations for consistent data access patterns across all modules.

``BaseCRUD`` also acts as the SQL data source for ``PageResolver``: ``fetch``
and ``count`` share one filter pipeline so a page and its count always agree.
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from .exceptions import DataSourceError
from .logging import get_logger
from .pagination import SortDirection, SortField, calculate_offset

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

logger = get_logger("core.base_crud")


class RecordFilter(BaseModel):
    """
    Filter predicate understood by ``BaseCRUD``.

    Attributes:
        is_active: Match on ``is_active`` when the model has it
        search: Case-insensitive substring over the CRUD's search fields
        equals: Field equality conditions; ``None`` values are skipped
    """

    model_config = ConfigDict(frozen=True)

    is_active: bool | None = None
    search: str | None = None
    equals: dict[str, Any] = Field(default_factory=dict)


class BaseCRUD(Generic[ModelType, CreateSchemaType]):
    """
    Base CRUD class providing common database operations.

    Attributes:
        model: SQLAlchemy model class
        search_fields: Fields to search in for text-based queries
        default_order_by: Default ordering field
        default_order_desc: Whether the default ordering is descending
    """

    search_fields: list[str] = []
    default_order_by: str = "created_at"
    default_order_desc: bool = True

    def __init__(self, model: type[ModelType]):
        """Initialize CRUD operations for a specific model."""
        self.model = model

    def _apply_active_filter(self, query: Select, is_active: bool | None) -> Select:
        """Apply is_active filtering if the model supports it."""
        if is_active is not None and hasattr(self.model, "is_active"):
            return query.where(self.model.is_active == is_active)
        return query

    def _apply_search_filter(self, query: Select, search: str | None) -> Select:
        """Apply text-based search filtering across configured search fields."""
        if not search or not self.search_fields:
            return query

        conditions = [
            getattr(self.model, field_name).ilike(f"%{search}%")
            for field_name in self.search_fields
            if hasattr(self.model, field_name)
        ]
        if conditions:
            query = query.where(or_(*conditions))
        return query

    def _apply_equality_filters(self, query: Select, equals: dict[str, Any]) -> Select:
        """Apply field equality filters, skipping unset values and unknown fields."""
        for field_name, value in equals.items():
            column = self._column(field_name)
            if value is not None and column is not None:
                query = query.where(column == value)
        return query

    def _apply_filter(self, query: Select, record_filter: RecordFilter | None) -> Select:
        if record_filter is None:
            return query
        query = self._apply_active_filter(query, record_filter.is_active)
        query = self._apply_search_filter(query, record_filter.search)
        return self._apply_equality_filters(query, record_filter.equals)

    def _column(self, name: str):
        """Return the mapped column attribute for ``name``, or None."""
        if name not in inspect(self.model).columns:
            return None
        return getattr(self.model, name)

    def _apply_ordering(self, query: Select, ordering: Sequence[SortField]) -> Select:
        """Apply ordering terms, falling back to the default ordering."""
        clauses = []
        for term in ordering:
            column = self._column(term.field)
            if column is None:
                logger.debug(
                    "Ignoring unknown sort field",
                    extra={"model": self.model.__name__, "sort_field": term.field},
                )
                continue
            clauses.append(
                column.desc() if term.direction == SortDirection.DESC else column.asc()
            )

        if not clauses:
            column = self._column(self.default_order_by)
            if column is not None:
                clauses.append(
                    column.desc() if self.default_order_desc else column.asc()
                )

        # Primary key tiebreak keeps page boundaries stable for equal sort keys.
        clauses.append(self.model.id.asc())
        return query.order_by(*clauses)

    async def fetch(
        self,
        db: AsyncSession,
        record_filter: RecordFilter | None,
        index: int,
        size: int,
        ordering: Sequence[SortField] = (),
    ) -> list[ModelType]:
        """
        Fetch one page of records.

        Args:
            db: Database session
            record_filter: Filter to apply
            index: Page index (0-based)
            size: Number of records per page
            ordering: Ordering terms

        Returns:
            Records in the slice ``[index*size, index*size+size)``

        Raises:
            DataSourceError: If the query fails
        """
        query = self._apply_filter(select(self.model), record_filter)
        query = self._apply_ordering(query, ordering)
        query = query.offset(calculate_offset(index, size)).limit(size)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(
                "Page fetch failed",
                extra={"model": self.model.__name__, "page_index": index},
                exc_info=True,
            )
            raise DataSourceError("fetch", details={"error": str(e)}) from e
        return list(result.scalars().all())

    async def count(self, db: AsyncSession, record_filter: RecordFilter | None) -> int:
        """
        Count records matching the filter.

        Raises:
            DataSourceError: If the query fails
        """
        query = self._apply_filter(select(func.count(self.model.id)), record_filter)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(
                "Count failed", extra={"model": self.model.__name__}, exc_info=True
            )
            raise DataSourceError("count", details={"error": str(e)}) from e
        return result.scalar() or 0

    def source(self, db: AsyncSession) -> "CRUDDataSource[ModelType]":
        """Bind this CRUD to a session as a ``DataSource``."""
        return CRUDDataSource(self, db)

    async def get(self, db: AsyncSession, id: int) -> ModelType | None:
        """Get a single record by primary key."""
        return await db.get(self.model, id)

    async def get_by(self, db: AsyncSession, **filters: Any) -> ModelType | None:
        """Get the first record whose fields equal ``filters``.

        A ``None`` value matches NULL rather than being skipped.
        """
        query = select(self.model)
        for field_name, value in filters.items():
            column = getattr(self.model, field_name)
            query = query.where(column.is_(None) if value is None else column == value)

        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def create(
        self, db: AsyncSession, obj_in: CreateSchemaType | dict[str, Any]
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Database session
            obj_in: Data for creating the record

        Returns:
            The created model instance
        """
        if isinstance(obj_in, dict):
            obj_data = obj_in
        else:
            obj_data = obj_in.model_dump(exclude_unset=True)

        db_obj = self.model(**obj_data)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """Hard delete a record."""
        await db.delete(db_obj)
        await db.commit()


class CRUDDataSource(Generic[ModelType]):
    """``DataSource`` over a ``BaseCRUD`` bound to one session."""

    def __init__(self, crud: BaseCRUD[ModelType, Any], db: AsyncSession):
        self.crud = crud
        self.db = db

    async def fetch(
        self,
        filter: RecordFilter | None,
        index: int,
        size: int,
        ordering: Sequence[SortField],
    ) -> list[ModelType]:
        return await self.crud.fetch(self.db, filter, index, size, ordering)

    async def count(self, filter: RecordFilter | None) -> int:
        return await self.crud.count(self.db, filter)
