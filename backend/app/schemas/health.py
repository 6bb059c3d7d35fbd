"""Health check schemas."""

from typing import Literal

from .base import StandardizedModel, UtcDateTime


class HealthResponse(StandardizedModel):
    status: Literal["healthy", "degraded"]
    service: str
    version: str
    environment: str
    timestamp: UtcDateTime
    database: Literal["connected", "disconnected"]


class HealthLiteResponse(StandardizedModel):
    status: Literal["ok"]


class ReadinessResponse(StandardizedModel):
    status: Literal["ready", "not_ready"]
    database: Literal["connected", "disconnected"]
