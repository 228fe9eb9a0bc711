"""Shared test fixtures and configuration."""
import pytest
import os
from datetime import datetime
from pathlib import Path
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("APP_NAME", "Test Counter")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from ordercounter.main import app
from ordercounter.core.dependencies import get_menu_repository, get_order_scheduler
from ordercounter.services.menu.base import Item
from ordercounter.services.menu.repository import MenuRepository
from ordercounter.services.menu.in_memory_menu import InMemoryMenuProvider
from ordercounter.services.ordering.models import Order, OrderStatus
from ordercounter.services.ordering.scheduler import OrderScheduler
from ordercounter.services.persistence.orders import OrderFileStore


@pytest.fixture
def test_menu_path():
    """Return path to test menu YAML file."""
    return Path(__file__).parent / "fixtures" / "test_menu.yaml"


@pytest.fixture
def test_menu_repository(test_menu_path):
    """Create menu repository with test data."""
    provider = InMemoryMenuProvider(menu_file=str(test_menu_path))
    return MenuRepository(provider)


@pytest.fixture
def orders_file(tmp_path):
    """Path of a fresh order store file."""
    return tmp_path / "orders.txt"


@pytest.fixture
def order_store(orders_file):
    """Order store backed by a temporary file."""
    return OrderFileStore(orders_file)


@pytest.fixture
def scheduler(order_store):
    """Scheduler with an empty history."""
    scheduler = OrderScheduler(store=order_store)
    scheduler.load_history()
    return scheduler


@pytest.fixture
def make_order():
    """Factory for orders with sensible defaults."""

    def _make_order(
        order_id,
        customer_id="C1",
        minute=0,
        items=None,
        status=OrderStatus.PENDING,
        total_amount=0.0,
    ):
        return Order(
            order_id=order_id,
            customer_id=customer_id,
            status=status,
            total_amount=total_amount,
            order_time=datetime(2024, 1, 1, 10, minute, 0),
            items={line.item.item_id: line for line in items or []},
        )

    return _make_order


@pytest.fixture
def burger():
    return Item(item_id="B1", name="burger", price=10.00, category="mains")


@pytest.fixture
def fries():
    return Item(item_id="S1", name="fries", price=3.50, category="sides")


@pytest.fixture
def test_client(test_menu_repository, scheduler):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_menu_repository] = lambda: test_menu_repository
    app.dependency_overrides[get_order_scheduler] = lambda: scheduler

    # Lifespan is not run: TestClient is not used as a context manager
    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()
