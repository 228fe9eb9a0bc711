"""Catalog provider interface."""
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class Item(BaseModel):
    """Catalog item.

    Only ``price`` and ``available`` change after creation, and only through
    the explicit catalog update operations.
    """

    item_id: str
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    category: str
    available: bool = True


class Menu(BaseModel):
    """Menu model."""

    items: List[Item]
    categories: List[str] = []


class CatalogError(str, Enum):
    """Reasons a catalog mutation can be refused."""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"


class CatalogResult(BaseModel):
    """Outcome of a catalog mutation."""

    ok: bool
    item: Optional[Item] = None
    error: Optional[CatalogError] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, item: Item) -> "CatalogResult":
        return cls(ok=True, item=item)

    @classmethod
    def not_found(cls, item_id: str) -> "CatalogResult":
        return cls(
            ok=False,
            error=CatalogError.NOT_FOUND,
            message=f"Item '{item_id}' not found",
        )

    @classmethod
    def invalid(cls, message: str) -> "CatalogResult":
        return cls(ok=False, error=CatalogError.INVALID_ARGUMENT, message=message)


def distinct_categories(items: List[Item]) -> List[str]:
    """Return item categories without duplicates, in first-seen order."""
    seen = []
    for item in items:
        if item.category not in seen:
            seen.append(item.category)
    return seen


class MenuProvider(ABC):
    """Abstract base class for catalog providers."""

    @abstractmethod
    async def get_menu(self) -> Menu:
        """Get the full menu."""
        pass

    @abstractmethod
    async def get_item(self, item_id: str) -> Optional[Item]:
        """Get an item by its id, or None if it does not exist."""
        pass

    @abstractmethod
    async def add_item(self, item: Item) -> Item:
        """Add an item, replacing any item with the same id."""
        pass

    @abstractmethod
    async def remove_item(self, item_id: str) -> CatalogResult:
        """Remove an item by id."""
        pass

    @abstractmethod
    async def update_price(self, item_id: str, price: float) -> CatalogResult:
        """Change the price of an item."""
        pass

    @abstractmethod
    async def update_availability(self, item_id: str, available: bool) -> CatalogResult:
        """Mark an item available or unavailable."""
        pass
