"""
Offset pagination that never hands back a phantom page.

A client holding stale state (deleted rows, a narrower filter, a larger page
size) may ask for a page index that no longer exists. ``PageResolver`` fetches
the requested page first and, only when that comes back empty past the first
page, counts the matching records and re-fetches the last valid page once.

The resolver knows nothing about storage: anything exposing the ``DataSource``
pair of coroutines (``fetch`` and ``count``) can be paged through it.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict

from .exceptions import InvalidRequestError
from .logging import get_logger

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

logger = get_logger("core.pagination")


class SortDirection(str, Enum):
    """Sort direction enum."""

    ASC = "asc"
    DESC = "desc"


class SortField(BaseModel):
    """A single ``(field, direction)`` ordering term."""

    model_config = ConfigDict(frozen=True)

    field: str
    direction: SortDirection = SortDirection.ASC


class PageRequest(BaseModel):
    """
    Immutable page descriptor.

    Ranges are not checked on construction; ``PageResolver`` rejects bad
    values with ``InvalidRequestError`` before touching the data source.

    Attributes:
        index: Page index (0-based)
        size: Number of items per page
        ordering: Ordering terms, applied in sequence
    """

    model_config = ConfigDict(frozen=True)

    index: int = 0
    size: int = 20
    ordering: tuple[SortField, ...] = ()

    @property
    def offset(self) -> int:
        return calculate_offset(self.index, self.size)


class ResultPage(BaseModel, Generic[T]):
    """
    One page of results as produced by ``PageResolver``.

    ``request_index`` is the index the items were actually fetched at; it
    differs from the requested index when the request was redirected to the
    last valid page. ``total_matching`` is only set when a count was issued.
    Items may be any type, ORM instances included.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    items: list[T]
    request_index: int
    size: int
    total_matching: int | None = None
    is_last: bool

    @classmethod
    def create(
        cls,
        items: Sequence[T],
        request_index: int,
        size: int,
        total_matching: int | None = None,
    ) -> "ResultPage[T]":
        """
        Build a page, deriving ``is_last`` from what is known.

        Args:
            items: Items for this page
            request_index: Index the items were fetched at (0-based)
            size: Page size used for the fetch
            total_matching: Total matching records, if a count was issued

        Returns:
            ResultPage instance
        """
        items = list(items)
        if total_matching is not None:
            is_last = request_index >= last_page_index(total_matching, size)
        else:
            is_last = len(items) < size

        return cls(
            items=items,
            request_index=request_index,
            size=size,
            total_matching=total_matching,
            is_last=is_last,
        )

    @property
    def total_pages(self) -> int | None:
        if self.total_matching is None:
            return None
        return (self.total_matching + self.size - 1) // self.size

    @property
    def has_previous(self) -> bool:
        return self.request_index > 0

    @property
    def is_empty(self) -> bool:
        return not self.items


@runtime_checkable
class DataSource(Protocol[T_co]):
    """Read-only source of filtered, ordered records."""

    async def fetch(
        self,
        filter: Any,
        index: int,
        size: int,
        ordering: Sequence[SortField],
    ) -> Sequence[T_co]:
        """Return the slice ``[index*size, index*size+size)`` of matching records."""
        ...

    async def count(self, filter: Any) -> int:
        """Return the number of records matching ``filter``."""
        ...


def calculate_offset(index: int, size: int) -> int:
    """
    Calculate database offset for pagination.

    Args:
        index: Page index (0-based)
        size: Number of items per page

    Returns:
        Database offset (0-based)
    """
    return index * size


def last_page_index(total: int, size: int) -> int:
    """
    Index of the last page holding any of ``total`` records.

    Returns 0 when there are no records at all.

    Raises:
        InvalidRequestError: If ``size`` is below 1 or ``total`` is negative
    """
    if size < 1:
        raise InvalidRequestError("must be >= 1", field="size", value=size)
    if total < 0:
        raise InvalidRequestError("must be >= 0", field="total", value=total)
    if total == 0:
        return 0
    return (total + size - 1) // size - 1


def validate_page_request(request: PageRequest) -> PageRequest:
    """
    Check page request ranges.

    Raises:
        InvalidRequestError: If ``index`` is negative or ``size`` is below 1
    """
    if request.index < 0:
        raise InvalidRequestError("must be >= 0", field="index", value=request.index)
    if request.size < 1:
        raise InvalidRequestError("must be >= 1", field="size", value=request.size)
    return request


class PageResolver:
    """
    Resolves a page request to a page that exists.

    Stateless; a single instance may serve any number of concurrent calls.
    Errors raised by the data source propagate untouched.
    """

    async def resolve(
        self,
        request: PageRequest,
        filter: Any,
        source: DataSource[T],
    ) -> ResultPage[T]:
        """
        Fetch ``request`` from ``source``, falling back to the last valid page.

        Args:
            request: Requested page
            filter: Filter predicate, passed to the source unchanged
            source: Data source to count and fetch from

        Returns:
            The requested page, or the last valid page when the requested
            index is past the end of the matching records

        Raises:
            InvalidRequestError: If the request is out of range
        """
        validate_page_request(request)

        logger.debug(
            "Fetching page",
            extra={"page_index": request.index, "page_size": request.size},
        )
        primary = await source.fetch(
            filter, request.index, request.size, request.ordering
        )
        if primary or request.index == 0:
            return ResultPage.create(primary, request.index, request.size)

        total = await source.count(filter)
        logger.debug(
            "Requested page is empty, counted matching records",
            extra={"page_index": request.index, "total": total},
        )
        if total == 0:
            return ResultPage.create(primary, request.index, request.size, total)

        last_index = last_page_index(total, request.size)
        if last_index == request.index:
            # Rows vanished between the fetch and the count; keep the empty page.
            return ResultPage.create(primary, request.index, request.size, total)

        logger.info(
            "Redirecting out-of-range page request",
            extra={
                "requested_index": request.index,
                "resolved_index": last_index,
                "page_size": request.size,
                "total": total,
            },
        )
        corrected = await source.fetch(
            filter, last_index, request.size, request.ordering
        )
        return ResultPage.create(corrected, last_index, request.size, total)


_resolver = PageResolver()


async def resolve_page(
    request: PageRequest, filter: Any, source: DataSource[T]
) -> ResultPage[T]:
    """Resolve ``request`` with the shared stateless resolver."""
    return await _resolver.resolve(request, filter, source)
