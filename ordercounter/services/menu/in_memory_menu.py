"""In-memory catalog provider."""
import logging
import math
import yaml
from pathlib import Path
from typing import Dict, Optional
from ordercounter.services.menu.base import (
    CatalogResult,
    Item,
    Menu,
    MenuProvider,
    distinct_categories,
)

logger = logging.getLogger(__name__)


DEFAULT_ITEMS = [
    Item(item_id="B1", name="Cheeseburger", price=8.99, category="burgers"),
    Item(item_id="S1", name="Fries", price=3.99, category="sides"),
    Item(item_id="D1", name="Coca Cola", price=2.99, category="drinks"),
]


class InMemoryMenuProvider(MenuProvider):
    """In-memory catalog provider seeded from YAML configuration."""

    def __init__(self, menu_file: Optional[str] = None):
        """Initialize with optional menu file path."""
        if menu_file is None:
            menu_file = Path(__file__).parent / "data" / "menu.yaml"
        self.menu_file = Path(menu_file)
        self._items: Optional[Dict[str, Item]] = None

    def _load_items(self) -> Dict[str, Item]:
        """Load items from the YAML file on first use."""
        if self._items is None:
            if not self.menu_file.exists():
                # Default menu if file doesn't exist
                logger.info(f"[MENU] {self.menu_file} not found, using default menu")
                items = [item.model_copy() for item in DEFAULT_ITEMS]
            else:
                with open(self.menu_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                items = [Item(**item) for item in data.get("items", [])]
                logger.info(f"[MENU] Loaded {len(items)} items from {self.menu_file}")
            self._items = {item.item_id: item for item in items}
        return self._items

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        items = list(self._load_items().values())
        return Menu(items=items, categories=distinct_categories(items))

    async def get_item(self, item_id: str) -> Optional[Item]:
        """Get an item by id."""
        return self._load_items().get(item_id)

    async def add_item(self, item: Item) -> Item:
        """Add an item, replacing any item with the same id."""
        self._load_items()[item.item_id] = item
        return item

    async def remove_item(self, item_id: str) -> CatalogResult:
        """Remove an item by id."""
        item = self._load_items().pop(item_id, None)
        if item is None:
            return CatalogResult.not_found(item_id)
        return CatalogResult.success(item)

    async def update_price(self, item_id: str, price: float) -> CatalogResult:
        """Change the price of an item."""
        item = self._load_items().get(item_id)
        if item is None:
            return CatalogResult.not_found(item_id)
        if not math.isfinite(price) or price < 0:
            return CatalogResult.invalid(f"Price must be a non-negative number, got {price}")
        item.price = price
        return CatalogResult.success(item)

    async def update_availability(self, item_id: str, available: bool) -> CatalogResult:
        """Mark an item available or unavailable."""
        item = self._load_items().get(item_id)
        if item is None:
            return CatalogResult.not_found(item_id)
        item.available = available
        return CatalogResult.success(item)
