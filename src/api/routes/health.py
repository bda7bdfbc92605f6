from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from src.api.deps import SessionFactory, get_db_session_factory
from src.core.config import get_settings
from src.infrastructure.db.models import EventModel, WorkspaceModel

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def probe_record_store(session_factory: SessionFactory) -> dict[str, Any]:
    """Count the report roots and time the round trip.

    Both counts come from the same tables the analytics endpoints start from,
    so an "ok" here means reports can at least be located.
    """
    started = time.perf_counter()
    try:
        async with session_factory() as session:
            events = await session.scalar(select(func.count()).select_from(EventModel))
            workspaces = await session.scalar(select(func.count()).select_from(WorkspaceModel))
    except Exception as exc:
        await logger.awarning("record_store_unreachable", error_type=exc.__class__.__name__)
        return {"status": "error", "message": str(exc)[:100]}

    return {
        "status": "ok",
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
        "events": events or 0,
        "workspaces": workspaces or 0,
    }


@router.get("/health", summary="Service health probe")
async def health_check(
    session_factory: SessionFactory = Depends(get_db_session_factory),  # noqa: B008
) -> dict[str, Any]:
    """Service metadata plus the record store probe; "degraded" when the probe fails."""
    settings = get_settings()
    record_store = await probe_record_store(session_factory)

    return {
        "service": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "status": "ok" if record_store["status"] == "ok" else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {"database": record_store},
    }
