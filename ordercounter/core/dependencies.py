"""FastAPI dependencies."""
from functools import lru_cache

from ordercounter.core.config import settings
from ordercounter.services.menu.repository import MenuRepository
from ordercounter.services.menu.in_memory_menu import InMemoryMenuProvider
from ordercounter.services.ordering.scheduler import OrderScheduler
from ordercounter.services.persistence.orders import OrderFileStore


@lru_cache
def get_menu_repository() -> MenuRepository:
    """Get the process-wide menu repository."""
    return MenuRepository(provider=InMemoryMenuProvider(menu_file=settings.menu_file))


@lru_cache
def get_order_scheduler() -> OrderScheduler:
    """Get the process-wide order scheduler, with history loaded from the store."""
    scheduler = OrderScheduler(store=OrderFileStore(settings.orders_file))
    scheduler.load_history()
    return scheduler
