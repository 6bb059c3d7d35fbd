"""Dashboard analytics response schemas."""

from typing import Dict, List, Optional

from pydantic import Field

from .base import StandardizedModel


class UsersByRole(StandardizedModel):
    users: int = 0
    coaches: int = 0
    admins: int = 0


class UserStatistics(StandardizedModel):
    total_users: int
    active_users: int
    online_users: int
    new_users_this_period: int
    users_by_role: UsersByRole


class MonthlyRevenue(StandardizedModel):
    month: str = Field(..., description="YYYY-MM")
    revenue: float
    session_count: int


class TopBookingType(StandardizedModel):
    name: str
    booking_count: int
    revenue: float


class FinancialAnalytics(StandardizedModel):
    total_revenue: float
    revenue_this_period: float
    average_session_price: float
    total_sessions: int
    paid_sessions: int
    pending_sessions: int
    revenue_by_month: List[MonthlyRevenue]
    top_booking_types: List[TopBookingType]


class HourlySessions(StandardizedModel):
    hour: int = Field(..., ge=0, le=23)
    session_count: int


class SessionMetrics(StandardizedModel):
    total_sessions: int
    completed_sessions: int
    cancelled_sessions: int
    no_show_sessions: int
    average_duration: float
    sessions_by_status: Dict[str, int]
    sessions_by_time_slot: List[HourlySessions]


class CustomServiceStats(StandardizedModel):
    total_custom_services: int
    templates_created: int
    public_services: int
    total_usage: int


class SystemMetrics(StandardizedModel):
    total_coaches: int
    active_coaches: int
    total_booking_types: int
    total_time_slots: int
    total_discounts: int
    message_count: int


class PlatformGrowth(StandardizedModel):
    user_growth_rate: float
    revenue_growth_rate: float
    session_growth_rate: float


class DashboardAnalytics(StandardizedModel):
    user_statistics: UserStatistics
    financial_analytics: FinancialAnalytics
    session_metrics: SessionMetrics
    custom_service_stats: CustomServiceStats
    system_metrics: Optional[SystemMetrics] = None
    platform_growth: Optional[PlatformGrowth] = None
