"""Order models."""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from ordercounter.services.menu.base import Item


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        """Terminal orders leave the pending queues for good."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def __str__(self) -> str:
        return self.value


class OrderLine(BaseModel):
    """One item of an order."""

    item: Item
    quantity: int = Field(default=1, ge=1)
    special_request: Optional[str] = None


class Order(BaseModel):
    """Customer order.

    ``items`` is keyed by item id, so an order never holds the same item
    twice.
    """

    order_id: str
    customer_id: str
    status: OrderStatus = OrderStatus.PENDING
    total_amount: float = Field(default=0.0, allow_inf_nan=False)
    order_time: datetime
    items: Dict[str, OrderLine] = {}

    @field_validator("order_time")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        """Store times as naive UTC so queued orders always compare."""
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class OrderLineRequest(BaseModel):
    """Requested line, referencing a catalog item by id."""

    item_id: str
    quantity: int = 1
    special_request: Optional[str] = None


class OrderRequest(BaseModel):
    """Request to build an order from catalog items."""

    customer_id: str
    lines: List[OrderLineRequest] = []
    order_id: Optional[str] = None
    order_time: Optional[datetime] = None
