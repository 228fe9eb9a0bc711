"""Order API endpoints."""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from ordercounter.core.dependencies import get_menu_repository, get_order_scheduler
from ordercounter.services.menu.repository import MenuRepository
from ordercounter.services.ordering.builder import OrderBuilder, OrderValidationError
from ordercounter.services.ordering.models import Order, OrderRequest, OrderStatus
from ordercounter.services.ordering.scheduler import OrderScheduler


router = APIRouter()
logger = logging.getLogger(__name__)


class PlaceOrderRequest(OrderRequest):
    """Order submission request."""
    vip: bool = False


class StatusUpdate(BaseModel):
    """Status update request."""
    status: OrderStatus


@router.post("/api/orders", response_model=Order, status_code=201)
async def place_order(
    body: PlaceOrderRequest,
    menu_repository: MenuRepository = Depends(get_menu_repository),
    scheduler: OrderScheduler = Depends(get_order_scheduler),
):
    """Build an order from catalog items and queue it."""
    logger.info(
        f"[ORDERS] Order received - customer: {body.customer_id}, "
        f"lines: {len(body.lines)}, vip: {body.vip}"
    )
    try:
        order = await OrderBuilder(menu_repository).build(body)
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors)

    try:
        return await run_in_threadpool(scheduler.place_order, order, body.vip)
    except Exception as e:
        logger.error(
            f"[ORDERS] Error placing order {order.order_id} - "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")


@router.get("/api/orders/pending", response_model=List[Order])
def get_pending_orders(scheduler: OrderScheduler = Depends(get_order_scheduler)):
    """Pending orders, VIP tier first, each tier oldest first."""
    return scheduler.get_pending_orders()


@router.get("/api/orders", response_model=List[Order])
def get_all_orders(scheduler: OrderScheduler = Depends(get_order_scheduler)):
    """Every order in history."""
    orders = scheduler.get_all_orders()
    logger.debug(f"[ORDERS] History requested - {len(orders)} orders")
    return orders


@router.get("/api/orders/{order_id}", response_model=Order)
def get_order(order_id: str, scheduler: OrderScheduler = Depends(get_order_scheduler)):
    """Get an order by id."""
    order = scheduler.find_order(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order '{order_id}' not found")
    return order


@router.patch("/api/orders/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    body: StatusUpdate,
    scheduler: OrderScheduler = Depends(get_order_scheduler),
):
    """Move an order to a new status."""
    if not scheduler.update_order_status(order_id, body.status):
        raise HTTPException(status_code=404, detail=f"Order '{order_id}' not found")
    return scheduler.find_order(order_id)


@router.get("/api/customers/{customer_id}/orders", response_model=List[Order])
def get_customer_history(
    customer_id: str,
    scheduler: OrderScheduler = Depends(get_order_scheduler),
):
    """A customer's orders, oldest first. Unknown customers have none."""
    return scheduler.get_customer_history(customer_id)
