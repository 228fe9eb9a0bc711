"""Unit tests for menu service and repository."""
import pytest
from ordercounter.services.menu.base import CatalogError, Item
from ordercounter.services.menu.repository import MenuRepository
from ordercounter.services.menu.in_memory_menu import InMemoryMenuProvider


class TestMenuService:
    """Test menu repository and provider."""

    @pytest.mark.asyncio
    async def test_load_menu_from_yaml(self, test_menu_repository):
        """Test loading menu from YAML file."""
        menu = await test_menu_repository.get_menu()

        assert [item.item_id for item in menu.items] == ["B1", "S1", "D1", "D2"]
        assert menu.items[0].name == "burger"
        assert menu.items[3].available is False
        assert menu.categories == ["mains", "sides", "drinks"]

    @pytest.mark.asyncio
    async def test_default_menu_when_file_missing(self, tmp_path):
        """Test the built-in menu is used when the YAML file is absent."""
        repository = MenuRepository(InMemoryMenuProvider(menu_file=str(tmp_path / "none.yaml")))

        menu = await repository.get_menu()

        assert len(menu.items) == 3
        assert await repository.get_item("B1") is not None

    @pytest.mark.asyncio
    async def test_get_item(self, test_menu_repository):
        """Test lookup by id."""
        item = await test_menu_repository.get_item("B1")

        assert item is not None
        assert item.name == "burger"
        assert item.price == 10.00
        assert item.category == "mains"

    @pytest.mark.asyncio
    async def test_get_item_not_found(self, test_menu_repository):
        """Test lookup returns None for an unknown id."""
        assert await test_menu_repository.get_item("nonexistent") is None

    @pytest.mark.asyncio
    async def test_add_and_remove_item(self, test_menu_repository):
        """Test adding then removing an item."""
        pizza = Item(item_id="P1", name="pizza", price=12.99, category="mains")

        await test_menu_repository.add_item(pizza)
        assert (await test_menu_repository.get_item("P1")).name == "pizza"

        result = await test_menu_repository.remove_item("P1")
        assert result.ok is True
        assert result.item.item_id == "P1"
        assert await test_menu_repository.get_item("P1") is None

    @pytest.mark.asyncio
    async def test_remove_missing_item(self, test_menu_repository):
        result = await test_menu_repository.remove_item("nope")

        assert result.ok is False
        assert result.error == CatalogError.NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_price(self, test_menu_repository):
        """Test changing an item's price."""
        result = await test_menu_repository.update_price("S1", 4.25)

        assert result.ok is True
        assert (await test_menu_repository.get_item("S1")).price == 4.25

    @pytest.mark.asyncio
    async def test_update_price_missing_item(self, test_menu_repository):
        """Test a price change on an unknown id reports NOT_FOUND."""
        result = await test_menu_repository.update_price("nope", 1.0)

        assert result.ok is False
        assert result.error == CatalogError.NOT_FOUND
        assert "nope" in result.message

    @pytest.mark.asyncio
    async def test_update_price_negative(self, test_menu_repository):
        result = await test_menu_repository.update_price("S1", -1.0)

        assert result.error == CatalogError.INVALID_ARGUMENT
        assert (await test_menu_repository.get_item("S1")).price == 3.50

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", [float("nan"), float("inf")])
    async def test_update_price_not_finite(self, test_menu_repository, price):
        result = await test_menu_repository.update_price("S1", price)

        assert result.error == CatalogError.INVALID_ARGUMENT
        assert (await test_menu_repository.get_item("S1")).price == 3.50

    @pytest.mark.asyncio
    async def test_update_availability(self, test_menu_repository):
        result = await test_menu_repository.update_availability("D2", True)

        assert result.ok is True
        assert (await test_menu_repository.get_item("D2")).available is True

        missing = await test_menu_repository.update_availability("nope", True)
        assert missing.error == CatalogError.NOT_FOUND

    @pytest.mark.asyncio
    async def test_items_by_category_case_insensitive(self, test_menu_repository):
        items = await test_menu_repository.get_items_by_category("DRINKS")

        assert [item.item_id for item in items] == ["D1", "D2"]

    @pytest.mark.asyncio
    async def test_search_items_substring(self, test_menu_repository):
        """Test search matches name substrings, ignoring case."""
        items = await test_menu_repository.search_items("SODA")

        assert [item.name for item in items] == ["soda", "Diet Soda"]
        assert await test_menu_repository.search_items("pizza") == []

    @pytest.mark.asyncio
    async def test_categories_distinct(self, test_menu_repository):
        await test_menu_repository.add_item(
            Item(item_id="S2", name="onion rings", price=4.0, category="sides")
        )

        categories = await test_menu_repository.get_categories()

        assert categories == ["mains", "sides", "drinks"]

    @pytest.mark.asyncio
    async def test_get_menu_text(self, test_menu_repository):
        menu_text = await test_menu_repository.get_menu_text()

        assert menu_text.startswith("Menu:")
        assert "[B1] burger $10.00" in menu_text
        assert "Diet Soda $2.00 (unavailable)" in menu_text
