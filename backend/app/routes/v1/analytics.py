# backend/app/routes/v1/analytics.py
"""
Analytics routes - API v1

Dashboard figures for coaches (scoped to their own clients and sessions)
and admins (platform wide). Every endpoint accepts ``time_range`` and, for
``custom``, ``start_date``/``end_date``.

Endpoints:
    GET /dashboard         → Combined dashboard (COACH, ADMIN)
    GET /revenue           → Financial analytics (COACH, ADMIN)
    GET /users             → User statistics (COACH, ADMIN)
    GET /sessions          → Session metrics (COACH, ADMIN)
    GET /custom-services   → Custom service statistics (COACH, ADMIN)
    GET /system            → System metrics (ADMIN)
    GET /growth            → Platform growth (ADMIN)
    GET /export            → Dashboard export as json or csv (COACH, ADMIN)
"""

import asyncio
from datetime import datetime
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...api.dependencies import get_analytics_service, require_admin, require_coach_or_admin
from ...core.enums import AnalyticsTimeRange
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.analytics import (
    CustomServiceStats,
    DashboardAnalytics,
    FinancialAnalytics,
    PlatformGrowth,
    SessionMetrics,
    SystemMetrics,
    UserStatistics,
)
from ...services.analytics_service import AnalyticsService, Period, resolve_period

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["analytics-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def get_period(
    time_range: AnalyticsTimeRange = Query(AnalyticsTimeRange.LAST_30_DAYS),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> Period:
    try:
        return resolve_period(time_range, start_date, end_date)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/dashboard", response_model=DashboardAnalytics, response_model_exclude_none=True)
async def get_dashboard(
    period: Period = Depends(get_period),
    current_user: Account = Depends(require_coach_or_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> DashboardAnalytics:
    dashboard = await asyncio.to_thread(analytics_service.get_dashboard, current_user, period)
    return DashboardAnalytics.model_validate(dashboard)


@router.get("/revenue", response_model=FinancialAnalytics)
async def get_revenue(
    period: Period = Depends(get_period),
    current_user: Account = Depends(require_coach_or_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> FinancialAnalytics:
    result = await asyncio.to_thread(
        analytics_service.get_financial_analytics, period, _coach_scope(current_user)
    )
    return FinancialAnalytics.model_validate(result)


@router.get("/users", response_model=UserStatistics)
async def get_users(
    period: Period = Depends(get_period),
    current_user: Account = Depends(require_coach_or_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> UserStatistics:
    result = await asyncio.to_thread(
        analytics_service.get_user_statistics, period, _coach_scope(current_user)
    )
    return UserStatistics.model_validate(result)


@router.get("/sessions", response_model=SessionMetrics)
async def get_sessions(
    period: Period = Depends(get_period),
    current_user: Account = Depends(require_coach_or_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> SessionMetrics:
    result = await asyncio.to_thread(
        analytics_service.get_session_metrics, period, _coach_scope(current_user)
    )
    return SessionMetrics.model_validate(result)


@router.get("/custom-services", response_model=CustomServiceStats)
async def get_custom_services(
    current_user: Account = Depends(require_coach_or_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> CustomServiceStats:
    result = await asyncio.to_thread(
        analytics_service.get_custom_service_stats, _coach_scope(current_user)
    )
    return CustomServiceStats.model_validate(result)


@router.get("/system", response_model=SystemMetrics)
async def get_system(
    current_user: Account = Depends(require_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> SystemMetrics:
    result = await asyncio.to_thread(analytics_service.get_system_metrics)
    return SystemMetrics.model_validate(result)


@router.get("/growth", response_model=PlatformGrowth)
async def get_growth(
    period: Period = Depends(get_period),
    current_user: Account = Depends(require_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> PlatformGrowth:
    result = await asyncio.to_thread(analytics_service.get_platform_growth, period)
    return PlatformGrowth.model_validate(result)


@router.get("/export")
async def export_analytics(
    export_format: str = Query("json", alias="format"),
    period: Period = Depends(get_period),
    current_user: Account = Depends(require_coach_or_admin),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> Response:
    """Download the dashboard as ``json`` or ``csv``; other formats are rejected with 400."""
    try:
        content, filename, media_type = await asyncio.to_thread(
            analytics_service.export, current_user, period, export_format
        )
    except DomainException as e:
        handle_domain_exception(e)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _coach_scope(account: Account) -> Optional[str]:
    return account.id if account.is_coach else None
