"""Health check endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from manualbot.app.api.deps import get_engine, get_session_store
from manualbot.app.config import Settings, get_settings
from manualbot.app.dialogue.session_store import InMemorySessionStore

router = APIRouter()


async def check_db(settings: Settings) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    if settings.use_inmemory_store:
        return (True, "inmemory")

    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    sessions: Annotated[InMemorySessionStore, Depends(get_session_store)],
) -> dict[str, Any] | JSONResponse:
    """Component health plus live session statistics.

    Returns:
        200 with component status if the record store is reachable
        503 otherwise
    """
    settings = get_settings()
    db_ok, db_status = await check_db(settings)

    # Expired sessions are dropped here as well as lazily on access
    swept = sessions.sweep()

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {"db": db_status},
        "sessions": {**sessions.stats(), "swept": swept},
    }

    if not db_ok:
        return JSONResponse(content=response_body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return response_body
