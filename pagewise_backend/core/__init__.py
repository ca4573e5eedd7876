"""Core infrastructure for Pagewise backend."""

from .base_crud import BaseCRUD, CRUDDataSource, RecordFilter
from .exceptions import (
    DataSourceError,
    InvalidRequestError,
    NotFoundError,
    PagewiseException,
    ValidationError,
)
from .pagination import (
    DataSource,
    PageRequest,
    PageResolver,
    ResultPage,
    SortDirection,
    SortField,
    calculate_offset,
    last_page_index,
    resolve_page,
    validate_page_request,
)

__all__ = [
    "BaseCRUD",
    "CRUDDataSource",
    "RecordFilter",
    "PagewiseException",
    "InvalidRequestError",
    "DataSourceError",
    "NotFoundError",
    "ValidationError",
    "DataSource",
    "PageRequest",
    "PageResolver",
    "ResultPage",
    "SortDirection",
    "SortField",
    "calculate_offset",
    "last_page_index",
    "resolve_page",
    "validate_page_request",
]
