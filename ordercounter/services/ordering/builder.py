"""Order construction service."""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List

from ordercounter.services.menu.repository import MenuRepository
from ordercounter.services.ordering.models import (
    Order,
    OrderLine,
    OrderLineRequest,
    OrderRequest,
    OrderStatus,
)

logger = logging.getLogger(__name__)


class OrderValidationError(ValueError):
    """Raised when an order request cannot be turned into an order."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class OrderBuilder:
    """Service for building orders from catalog items."""

    def __init__(self, menu_repository: MenuRepository):
        self.menu_repository = menu_repository

    async def build_line(self, line: OrderLineRequest) -> tuple[OrderLine | None, List[str]]:
        """
        Resolve a requested line against the catalog.

        Returns:
            Tuple of (order line or None, list of error messages)
        """
        errors = []

        if line.quantity < 1:
            errors.append(f"Quantity for item '{line.item_id}' must be at least 1")

        item = await self.menu_repository.get_item(line.item_id)
        if item is None:
            errors.append(f"Item '{line.item_id}' is not on the menu")
        elif not item.available:
            errors.append(f"Item '{line.item_id}' is currently unavailable")

        if errors:
            return None, errors

        special_request = (line.special_request or "").strip() or None
        return (
            OrderLine(
                item=item.model_copy(),
                quantity=line.quantity,
                special_request=special_request,
            ),
            [],
        )

    async def build(self, request: OrderRequest) -> Order:
        """
        Build a PENDING order from a request.

        Args:
            request: Customer, requested lines and optional id/time

        Returns:
            Order with catalog items embedded and the total computed

        Raises:
            OrderValidationError: if any line is invalid
        """
        validation_errors = []
        items: Dict[str, OrderLine] = {}
        seen = set()

        for line in request.lines:
            if line.item_id in seen:
                validation_errors.append(f"Item '{line.item_id}' appears more than once")
                continue
            seen.add(line.item_id)
            order_line, errors = await self.build_line(line)
            if order_line is None:
                validation_errors.extend(errors)
            else:
                items[line.item_id] = order_line

        if validation_errors:
            logger.info(
                f"[ORDERS] Rejected order for customer {request.customer_id}: "
                f"{'; '.join(validation_errors)}"
            )
            raise OrderValidationError(validation_errors)

        total = sum(line.item.price * line.quantity for line in items.values())

        return Order(
            order_id=request.order_id or uuid.uuid4().hex,
            customer_id=request.customer_id,
            status=OrderStatus.PENDING,
            total_amount=round(total, 2),
            order_time=request.order_time or datetime.now(timezone.utc),
            items=items,
        )
