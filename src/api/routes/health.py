"""
Health Check Routes.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.database.connection import get_session
from src.utils.structured_logging import get_logger

logger = get_logger("health")
router = APIRouter()


class ComponentHealth(BaseModel):
    """Health status for a system component."""
    name: str
    healthy: bool
    latency_ms: Optional[float] = None
    details: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class SystemHealth(BaseModel):
    """Service health report."""
    status: str  # "healthy", "unhealthy"
    timestamp: str
    service: str
    components: Dict[str, ComponentHealth]


@router.get("", response_model=SystemHealth)
async def health_check(session: AsyncSession = Depends(get_session)):
    """Liveness plus a round trip to the database."""
    start = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
        database = ComponentHealth(
            name="database",
            healthy=True,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        database = ComponentHealth(name="database", healthy=False, error=str(e))

    report = SystemHealth(
        status="healthy" if database.healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=settings.service_name,
        components={"database": database},
    )
    return JSONResponse(
        status_code=200 if database.healthy else 503,
        content=report.model_dump(),
    )
