"""Item catalog module for Pagewise."""

from .models import Item
from .routers import router

__all__ = [
    "Item",
    "router",
]
