# backend/app/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.broadcast import connect_broadcast, disconnect_broadcast
from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import prometheus
from .routes.v1 import (
    account as account_v1,
    analytics as analytics_v1,
    auth as auth_v1,
    booking_types as booking_types_v1,
    calendar as calendar_v1,
    conversations as conversations_v1,
    custom_services as custom_services_v1,
    discounts as discounts_v1,
    health as health_v1,
    messages as messages_v1,
    notifications as notifications_v1,
    payments as payments_v1,
    sessions as sessions_v1,
    time_slots as time_slots_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    if settings.is_testing or is_running_tests():
        logger.info("Running under pytest (test mode active)")
    else:
        init_db()
    await connect_broadcast()

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")
    await disconnect_broadcast()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s allow_credentials=%s", settings.cors_origin_list, True)

app.add_middleware(PrometheusMiddleware)

api_v1 = APIRouter(prefix="/api/v1")

api_v1.include_router(auth_v1.router, prefix="/auth")
api_v1.include_router(account_v1.router, prefix="/accounts")
api_v1.include_router(booking_types_v1.router, prefix="/booking-types")
api_v1.include_router(time_slots_v1.router, prefix="/time-slots")
api_v1.include_router(sessions_v1.router, prefix="/sessions")
api_v1.include_router(discounts_v1.router, prefix="/discounts")
api_v1.include_router(payments_v1.router, prefix="/payments")
api_v1.include_router(messages_v1.router, prefix="/messages")
api_v1.include_router(conversations_v1.router, prefix="/conversations")
api_v1.include_router(custom_services_v1.router, prefix="/custom-services")
api_v1.include_router(notifications_v1.router, prefix="/notifications")
api_v1.include_router(calendar_v1.router, prefix="/calendar")
api_v1.include_router(analytics_v1.router, prefix="/analytics")
api_v1.include_router(health_v1.router, prefix="/health")

app.include_router(api_v1)

# Prometheus metrics - Standard /metrics/prometheus path for Prometheus scraping
app.include_router(prometheus.router)


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": f"Welcome to the {BRAND_NAME} API", "docs": "/docs"}
