"""Item catalog API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.pagination import SortDirection
from ...database import get_db
from ..commons import BaseResponse, PageResponse, PaginationParams
from . import services
from .schemas import ItemCreate, ItemResponse

router = APIRouter(prefix="/items", tags=["Items"])


@router.get("", response_model=BaseResponse[PageResponse[ItemResponse]])
async def list_items(
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(0, description="Page index (0-based)"),
    page_size: int = Query(settings.default_page_size, le=settings.max_page_size),
    sort_field: str | None = Query(None),
    sort_direction: SortDirection | None = Query(None),
    category: str | None = Query(None),
    is_active: bool | None = Query(None),
    search: str | None = Query(None),
):
    """Get items with pagination and filtering.

    A page index past the end is answered with the last page that has items.
    """
    pagination = PaginationParams(
        page=page,
        page_size=page_size,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
    result = await services.list_items(
        db,
        pagination.to_page_request(),
        category=category,
        is_active=is_active,
        search=search,
    )

    return BaseResponse(
        success=True,
        data=PageResponse.from_result(
            result,
            items=[ItemResponse.model_validate(i) for i in result.items],
            requested_page=page,
        ),
    )


@router.get("/{item_id}", response_model=BaseResponse[ItemResponse])
async def get_item(
    item_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get an item by ID."""
    item = await services.get_item(db, item_id)
    return BaseResponse(success=True, data=ItemResponse.model_validate(item))


@router.post("", response_model=BaseResponse[ItemResponse], status_code=201)
async def create_item(
    data: ItemCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new item."""
    item = await services.create_item(db, data)
    return BaseResponse(
        success=True,
        message="Item created successfully",
        data=ItemResponse.model_validate(item),
    )


@router.delete("/{item_id}", response_model=BaseResponse[None])
async def delete_item(
    item_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete an item."""
    await services.delete_item(db, item_id)
    return BaseResponse(success=True, message="Item deleted successfully")
