"""Health check endpoint."""
import logging
from fastapi import APIRouter, Depends

from ordercounter.core.config import settings
from ordercounter.core.dependencies import get_order_scheduler
from ordercounter.services.ordering.scheduler import OrderScheduler

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(scheduler: OrderScheduler = Depends(get_order_scheduler)):
    """Report liveness and queue depth."""
    pending = scheduler.queue
    logger.debug(
        f"[HEALTH] vip={pending.size_vip()} standard={pending.size_standard()}"
    )
    return {
        "status": "healthy",
        "service": settings.app_name,
        "pending": {"vip": pending.size_vip(), "standard": pending.size_standard()},
    }
