"""FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from manualbot.app.api.deps import get_controller, get_engine
from manualbot.app.api.routes.health import router as health_router
from manualbot.app.api.routes.manuals import router as manuals_router
from manualbot.app.api.routes.messages import router as messages_router
from manualbot.app.api.routes.metrics import router as metrics_router
from manualbot.app.config import get_settings
from manualbot.app.db.engine import create_schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    if not settings.use_inmemory_store:
        await create_schema(get_engine())
        logger.info("Database schema ready")

    yield

    await get_controller().drain_background()
    if not settings.use_inmemory_store:
        await get_engine().dispose()


app = FastAPI(title="Manual Bot API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(messages_router, tags=["messages"])
app.include_router(manuals_router, tags=["manuals"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Manual Bot API", "version": "0.1.0"}
