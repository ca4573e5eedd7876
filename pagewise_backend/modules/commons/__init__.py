"""Common schemas and utilities shared across modules."""

from .schemas import (
    BaseResponse,
    PageResponse,
    PaginationParams,
    SortDirection,
)

__all__ = [
    "BaseResponse",
    "PageResponse",
    "PaginationParams",
    "SortDirection",
]
