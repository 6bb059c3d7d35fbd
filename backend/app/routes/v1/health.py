# backend/app/routes/v1/health.py
"""
Health check endpoints for monitoring and load balancer probes.

Endpoints:
    GET /           → Service info plus database connectivity
    GET /lite       → Liveness probe, no database access
    GET /readiness  → 503 until the database answers
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...api.dependencies import get_db
from ...core.config import settings
from ...core.constants import API_VERSION, BRAND_NAME
from ...schemas.health import HealthLiteResponse, HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _database_connected(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database health probe failed: {e}")
        db.rollback()
        return False


@router.get("", response_model=HealthResponse)
async def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Health check endpoint.

    Returns basic health status including service info and environment.
    Reports ``degraded`` when the database does not answer.
    """
    connected = await asyncio.to_thread(_database_connected, db)
    return HealthResponse(
        status="healthy" if connected else "degraded",
        service=f"{BRAND_NAME.lower()}-api",
        version=API_VERSION,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
        database="connected" if connected else "disconnected",
    )


@router.get("/lite", response_model=HealthLiteResponse)
def health_check_lite() -> HealthLiteResponse:
    """
    Lightweight health check that doesn't hit database.

    Use this for high-frequency health probes.
    """
    return HealthLiteResponse(status="ok")


@router.get("/readiness", response_model=ReadinessResponse)
async def readiness(response: Response, db: Session = Depends(get_db)) -> ReadinessResponse:
    if not await asyncio.to_thread(_database_connected, db):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not_ready", database="disconnected")
    return ReadinessResponse(status="ready", database="connected")
