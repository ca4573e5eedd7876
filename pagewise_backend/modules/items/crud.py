"""CRUD operations for the item catalog."""

from ...core.base_crud import BaseCRUD
from .models import Item
from .schemas import ItemCreate


class ItemCRUD(BaseCRUD[Item, ItemCreate]):
    search_fields = ["name", "sku", "description"]
    default_order_by = "created_at"
    default_order_desc = True


item_crud = ItemCRUD(Item)
