"""Common schemas shared across all modules."""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from ...core.pagination import PageRequest, ResultPage, SortDirection, SortField

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    """Base response schema for API responses."""

    success: bool = Field(
        default=True, description="Whether the request was successful"
    )
    message: str | None = Field(default=None, description="Response message")
    data: T | None = Field(default=None, description="Response data")
    error: Any | None = Field(default=None, description="Error details if any")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response timestamp",
    )


class PaginationParams(BaseModel):
    """Pagination parameters as received from a client."""

    page: int = Field(default=0, description="Page index (0-based)")
    page_size: int = Field(default=20, description="Items per page")
    sort_field: str | None = Field(default=None, description="Field to sort by")
    sort_direction: SortDirection | None = Field(
        default=None, description="Sort direction"
    )

    def to_page_request(self) -> PageRequest:
        ordering: tuple[SortField, ...] = ()
        if self.sort_field:
            ordering = (
                SortField(
                    field=self.sort_field,
                    direction=self.sort_direction or SortDirection.ASC,
                ),
            )
        return PageRequest(index=self.page, size=self.page_size, ordering=ordering)


class PageResponse(BaseModel, Generic[T]):
    """Paginated response schema.

    ``page`` is the index actually served; ``requested_page`` is what the
    client asked for. They differ when an out-of-range request was redirected
    to the last page.
    """

    items: list[T] = Field(default_factory=list, description="List of items")
    page: int = Field(default=0, description="Page index served (0-based)")
    requested_page: int = Field(default=0, description="Page index requested")
    page_size: int = Field(default=20, description="Items per page")
    total: int | None = Field(
        default=None, description="Total matching items, when counted"
    )
    total_pages: int | None = Field(
        default=None, description="Total number of pages, when counted"
    )
    is_last: bool = Field(default=True, description="Whether this is the last page")
    redirected: bool = Field(
        default=False, description="Whether the requested page was out of range"
    )

    @classmethod
    def from_result(
        cls, result: ResultPage[Any], items: list[T], requested_page: int
    ) -> "PageResponse[T]":
        return cls(
            items=items,
            page=result.request_index,
            requested_page=requested_page,
            page_size=result.size,
            total=result.total_matching,
            total_pages=result.total_pages,
            is_last=result.is_last,
            redirected=result.request_index != requested_page,
        )
