"""Menu API endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ordercounter.core.dependencies import get_menu_repository
from ordercounter.services.menu.base import (
    CatalogError,
    CatalogResult,
    Item,
    distinct_categories,
)
from ordercounter.services.menu.repository import MenuRepository


router = APIRouter()
logger = logging.getLogger(__name__)


class MenuResponse(BaseModel):
    """Menu response model."""
    items: List[Item]
    categories: List[str] = []


class PriceUpdate(BaseModel):
    """Price update request."""
    price: float


class AvailabilityUpdate(BaseModel):
    """Availability update request."""
    available: bool


_ERROR_STATUS = {
    CatalogError.NOT_FOUND: 404,
    CatalogError.INVALID_ARGUMENT: 400,
}


def _unwrap(result: CatalogResult) -> Item:
    """Return the item of a successful result, or raise the matching HTTP error."""
    if not result.ok:
        raise HTTPException(status_code=_ERROR_STATUS[result.error], detail=result.message)
    return result.item


@router.get("/api/menu", response_model=MenuResponse)
async def get_menu(
    category: Optional[str] = None,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get the full menu, optionally filtered by category."""
    logger.info(f"[MENU] Menu requested - category: {category or 'all'}")
    if category:
        items = await menu_repository.get_items_by_category(category)
        return MenuResponse(items=items, categories=distinct_categories(items))
    menu = await menu_repository.get_menu()
    logger.debug(f"[MENU] Menu loaded - {len(menu.items)} items, {len(menu.categories)} categories")
    return MenuResponse(items=menu.items, categories=menu.categories)


@router.get("/api/menu/search", response_model=List[Item])
async def search_menu(
    q: str = Query(..., min_length=1),
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Search items by name."""
    return await menu_repository.search_items(q)


@router.get("/api/menu/categories", response_model=List[str])
async def get_categories(menu_repository: MenuRepository = Depends(get_menu_repository)):
    """List distinct categories."""
    return await menu_repository.get_categories()


@router.get("/api/menu/items/{item_id}", response_model=Item)
async def get_item(
    item_id: str,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Get a single item."""
    item = await menu_repository.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item '{item_id}' not found")
    return item


@router.post("/api/menu/items", response_model=Item)
async def create_item(
    item: Item,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Add or replace a menu item."""
    created = await menu_repository.add_item(item)
    logger.info(f"[MENU] Item {created.item_id} saved - {created.name} ${created.price:.2f}")
    return created


@router.delete("/api/menu/items/{item_id}", response_model=Item)
async def delete_item(
    item_id: str,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Remove a menu item."""
    removed = _unwrap(await menu_repository.remove_item(item_id))
    logger.info(f"[MENU] Item {item_id} removed")
    return removed


@router.patch("/api/menu/items/{item_id}/price", response_model=Item)
async def update_price(
    item_id: str,
    body: PriceUpdate,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Change an item's price."""
    item = _unwrap(await menu_repository.update_price(item_id, body.price))
    logger.info(f"[MENU] Item {item_id} price -> ${item.price:.2f}")
    return item


@router.patch("/api/menu/items/{item_id}/availability", response_model=Item)
async def update_availability(
    item_id: str,
    body: AvailabilityUpdate,
    menu_repository: MenuRepository = Depends(get_menu_repository),
):
    """Change an item's availability."""
    item = _unwrap(await menu_repository.update_availability(item_id, body.available))
    logger.info(f"[MENU] Item {item_id} available -> {item.available}")
    return item
