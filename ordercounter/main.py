"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ordercounter.core.config import settings
from ordercounter.core.dependencies import get_order_scheduler
from ordercounter.core.logging import setup_logging
from ordercounter.api import health, menu, orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: the scheduler reads the order history once
    setup_logging()
    get_order_scheduler()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Service counter catalog, order queue and order history",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(menu.router, tags=["menu"])
app.include_router(orders.router, tags=["orders"])


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("ordercounter.main:app", host=settings.host, port=settings.port)
