"""Catalog repository."""
from typing import List, Optional
from ordercounter.services.menu.base import CatalogResult, Item, Menu, MenuProvider


class MenuRepository:
    """Repository for catalog operations."""

    def __init__(self, provider: MenuProvider):
        self.provider = provider

    async def get_menu(self) -> Menu:
        """Get the full menu."""
        return await self.provider.get_menu()

    async def get_item(self, item_id: str) -> Optional[Item]:
        """Look up an item by id."""
        return await self.provider.get_item(item_id)

    async def add_item(self, item: Item) -> Item:
        """Add or replace an item."""
        return await self.provider.add_item(item)

    async def remove_item(self, item_id: str) -> CatalogResult:
        """Remove an item."""
        return await self.provider.remove_item(item_id)

    async def update_price(self, item_id: str, price: float) -> CatalogResult:
        """Update item price."""
        return await self.provider.update_price(item_id, price)

    async def update_availability(self, item_id: str, available: bool) -> CatalogResult:
        """Update item availability."""
        return await self.provider.update_availability(item_id, available)

    async def get_items_by_category(self, category: str) -> List[Item]:
        """Get all items in a category (case-insensitive)."""
        menu = await self.get_menu()
        category_lower = category.lower().strip()
        return [item for item in menu.items if item.category.lower() == category_lower]

    async def search_items(self, text: str) -> List[Item]:
        """Find items whose name contains ``text``, ignoring case."""
        menu = await self.get_menu()
        text_lower = text.lower().strip()
        return [item for item in menu.items if text_lower in item.name.lower()]

    async def get_categories(self) -> List[str]:
        """Get distinct categories."""
        menu = await self.get_menu()
        return menu.categories

    async def get_menu_text(self) -> str:
        """Get menu as formatted text."""
        menu = await self.get_menu()
        lines = ["Menu:"]
        for category in menu.categories:
            lines.append(f"\n{category.title()}:")
            for item in menu.items:
                if item.category == category:
                    status_str = "" if item.available else " (unavailable)"
                    lines.append(f"  - [{item.item_id}] {item.name} ${item.price:.2f}{status_str}")
        return "\n".join(lines)
