"""Item catalog business logic services."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import RecordFilter
from ...core.exceptions import NotFoundError, ValidationError
from ...core.logging import get_logger
from ...core.pagination import PageRequest, ResultPage, resolve_page
from .crud import item_crud
from .models import Item
from .schemas import ItemCreate

logger = get_logger(__name__)


async def list_items(
    db: AsyncSession,
    page_request: PageRequest,
    category: str | None = None,
    is_active: bool | None = None,
    search: str | None = None,
) -> ResultPage[Item]:
    """List items, serving the last page when the requested one is past the end."""
    record_filter = RecordFilter(
        is_active=is_active,
        search=search,
        equals={"category": category},
    )
    return await resolve_page(page_request, record_filter, item_crud.source(db))


async def get_item(db: AsyncSession, item_id: int) -> Item:
    item = await item_crud.get(db, item_id)
    if not item:
        raise NotFoundError(f"Item with ID {item_id} not found")
    return item


def _duplicate_sku(sku: str) -> ValidationError:
    return ValidationError(f"Item with SKU '{sku}' already exists", field="sku", value=sku)


async def create_item(db: AsyncSession, data: ItemCreate) -> Item:
    """Create an item, rejecting duplicate SKUs."""
    if await item_crud.get_by(db, sku=data.sku):
        raise _duplicate_sku(data.sku)

    try:
        item = await item_crud.create(db, data)
    except IntegrityError as e:
        # A concurrent insert took the SKU after the lookup above.
        await db.rollback()
        raise _duplicate_sku(data.sku) from e
    logger.info("Item created", extra={"item_id": item.id, "sku": item.sku})
    return item


async def delete_item(db: AsyncSession, item_id: int) -> None:
    item = await get_item(db, item_id)
    await item_crud.delete(db, item)
    logger.info("Item deleted", extra={"item_id": item_id})
