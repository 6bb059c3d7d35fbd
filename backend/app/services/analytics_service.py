# backend/app/services/analytics_service.py
"""
Analytics service for Courtside dashboards.

Coaches get figures scoped to their own clients and sessions; admins get
platform-wide figures plus system metrics and growth rates. Revenue is
derived from completed sessions as ``max(0, base_price - discount)`` and
aggregated in Python.
"""

from collections import Counter, OrderedDict
import csv
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import io
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_SESSION_DURATION, TOP_BOOKING_TYPES_LIMIT
from ..core.enums import AnalyticsTimeRange, ExportFormat, Role, SessionStatus
from ..core.exceptions import ValidationException
from ..core.timezone_utils import ensure_utc
from ..models.account import Account
from ..models.coaching_session import CoachingSession
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

PRESET_WINDOWS = {
    AnalyticsTimeRange.LAST_7_DAYS: timedelta(days=7),
    AnalyticsTimeRange.LAST_30_DAYS: timedelta(days=30),
    AnalyticsTimeRange.LAST_90_DAYS: timedelta(days=90),
    AnalyticsTimeRange.LAST_YEAR: timedelta(days=365),
}

STATUS_KEYS = OrderedDict(
    [
        (SessionStatus.SCHEDULED.value, "scheduled"),
        (SessionStatus.CONFIRMED.value, "confirmed"),
        (SessionStatus.COMPLETED.value, "completed"),
        (SessionStatus.CANCELLED.value, "cancelled"),
        (SessionStatus.NO_SHOW.value, "no_show"),
    ]
)

Period = Tuple[datetime, datetime]


def resolve_period(
    time_range: AnalyticsTimeRange = AnalyticsTimeRange.LAST_30_DAYS,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> Period:
    """Turn a preset or custom range into ``(start, end)`` in UTC."""
    if time_range == AnalyticsTimeRange.CUSTOM:
        if start_date is None or end_date is None:
            raise ValidationException(
                "start_date and end_date are required for a custom time range",
                code="CUSTOM_RANGE_INCOMPLETE",
            )
        start, end = ensure_utc(start_date), ensure_utc(end_date)
        if start > end:
            raise ValidationException(
                "start_date must be before end_date", code="INVALID_DATE_RANGE"
            )
        return start, end
    end = now or datetime.now(timezone.utc)
    return end - PRESET_WINDOWS.get(time_range, timedelta(days=30)), end


def session_revenue(session: CoachingSession) -> Decimal:
    base_price = Decimal(session.booking_type.base_price) if session.booking_type else Decimal("0")
    discount = Decimal(session.discount.amount) if session.discount else Decimal("0")
    return max(Decimal("0"), base_price - discount)


def growth_rate(current: float, previous: float) -> float:
    """Percentage change versus the previous period."""
    if previous == 0:
        return 100.0 if current else 0.0
    return round((current - previous) / previous * 100, 2)


class AnalyticsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.account_repository = RepositoryFactory.create_account_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.booking_type_repository = RepositoryFactory.create_booking_type_repository(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)
        self.discount_repository = RepositoryFactory.create_discount_repository(db)
        self.message_repository = RepositoryFactory.create_message_repository(db)
        self.custom_service_repository = RepositoryFactory.create_custom_service_repository(db)

    @staticmethod
    def _coach_scope(account: Account) -> Optional[str]:
        return account.id if account.is_coach else None

    @BaseService.measure_operation("dashboard_analytics")
    def get_dashboard(self, account: Account, period: Period) -> Dict[str, Any]:
        coach_id = self._coach_scope(account)
        dashboard: Dict[str, Any] = {
            "user_statistics": self.get_user_statistics(period, coach_id),
            "financial_analytics": self.get_financial_analytics(period, coach_id),
            "session_metrics": self.get_session_metrics(period, coach_id),
            "custom_service_stats": self.get_custom_service_stats(coach_id),
        }
        if account.is_admin:
            dashboard["system_metrics"] = self.get_system_metrics()
            dashboard["platform_growth"] = self.get_platform_growth(period)
        return dashboard

    def get_user_statistics(self, period: Period, coach_id: Optional[str] = None) -> Dict[str, Any]:
        start, end = period
        ids: Optional[List[str]] = None
        if coach_id:
            ids = self.session_repository.client_ids_for_coach(coach_id)

        by_role = self.account_repository.count_by_role(ids)
        return {
            "total_users": self.account_repository.count_accounts(ids),
            "active_users": self.account_repository.count_active(start, end, ids),
            "online_users": self.account_repository.count_online(ids),
            "new_users_this_period": self.account_repository.count_created_between(
                start, end, ids
            ),
            "users_by_role": {
                "users": by_role.get(Role.USER.value, 0),
                "coaches": by_role.get(Role.COACH.value, 0),
                "admins": by_role.get(Role.ADMIN.value, 0),
            },
        }

    def get_financial_analytics(
        self, period: Period, coach_id: Optional[str] = None
    ) -> Dict[str, Any]:
        start, end = period
        completed = self.session_repository.list_for_analytics(
            coach_id=coach_id, status=SessionStatus.COMPLETED
        )
        in_period = [s for s in completed if start <= ensure_utc(s.created_at) <= end]

        total_revenue = sum((session_revenue(s) for s in completed), Decimal("0"))
        period_revenue = sum((session_revenue(s) for s in in_period), Decimal("0"))
        average = total_revenue / len(completed) if completed else Decimal("0")

        return {
            "total_revenue": float(total_revenue),
            "revenue_this_period": float(period_revenue),
            "average_session_price": round(float(average), 2),
            "total_sessions": len(completed),
            "paid_sessions": len(completed),
            "pending_sessions": self.session_repository.count_sessions(
                coach_id=coach_id, status=SessionStatus.SCHEDULED
            ),
            "revenue_by_month": self._revenue_by_month(completed),
            "top_booking_types": self._top_booking_types(completed),
        }

    @staticmethod
    def _revenue_by_month(sessions: Iterable[CoachingSession]) -> List[Dict[str, Any]]:
        months: Dict[str, Dict[str, Any]] = {}
        for session in sessions:
            month = ensure_utc(session.created_at).strftime("%Y-%m")
            entry = months.setdefault(month, {"revenue": Decimal("0"), "session_count": 0})
            entry["revenue"] += session_revenue(session)
            entry["session_count"] += 1
        return [
            {
                "month": month,
                "revenue": float(data["revenue"]),
                "session_count": data["session_count"],
            }
            for month, data in sorted(months.items())
        ]

    @staticmethod
    def _top_booking_types(sessions: Iterable[CoachingSession]) -> List[Dict[str, Any]]:
        counts: Counter = Counter()
        booking_types = {}
        for session in sessions:
            if session.booking_type is None:
                continue
            counts[session.booking_type_id] += 1
            booking_types[session.booking_type_id] = session.booking_type
        top = []
        for booking_type_id, count in counts.most_common(TOP_BOOKING_TYPES_LIMIT):
            booking_type = booking_types[booking_type_id]
            top.append(
                {
                    "name": booking_type.name,
                    "booking_count": count,
                    "revenue": float(Decimal(booking_type.base_price) * count),
                }
            )
        return top

    def get_session_metrics(self, period: Period, coach_id: Optional[str] = None) -> Dict[str, Any]:
        start, end = period
        sessions = self.session_repository.list_for_analytics(
            coach_id=coach_id, created_from=start, created_to=end
        )
        by_status = {key: 0 for key in STATUS_KEYS.values()}
        hours: Counter = Counter()
        for session in sessions:
            key = STATUS_KEYS.get(session.status)
            if key:
                by_status[key] += 1
            if session.time_slot is not None:
                hours[ensure_utc(session.time_slot.date_time).hour] += 1

        durations = [s.duration_min for s in sessions if s.duration_min]
        average_duration = (
            sum(durations) / len(durations) if durations else DEFAULT_SESSION_DURATION
        )
        return {
            "total_sessions": len(sessions),
            "completed_sessions": by_status["completed"],
            "cancelled_sessions": by_status["cancelled"],
            "no_show_sessions": by_status["no_show"],
            "average_duration": round(float(average_duration), 2),
            "sessions_by_status": by_status,
            "sessions_by_time_slot": [
                {"hour": hour, "session_count": count} for hour, count in sorted(hours.items())
            ],
        }

    def get_custom_service_stats(self, coach_id: Optional[str] = None) -> Dict[str, Any]:
        repo = self.custom_service_repository
        return {
            "total_custom_services": repo.count_services(coach_id),
            "templates_created": repo.count_services(coach_id, is_template=True),
            "public_services": repo.count_services(coach_id, is_public=True),
            "total_usage": repo.total_usage(coach_id),
        }

    def get_system_metrics(self) -> Dict[str, Any]:
        return {
            "total_coaches": self.account_repository.count_role(Role.COACH),
            "active_coaches": self.account_repository.count_role(Role.COACH, active_only=True),
            "total_booking_types": self.booking_type_repository.count_all(),
            "total_time_slots": self.time_slot_repository.count_all(),
            "total_discounts": self.discount_repository.count_all(),
            "message_count": self.message_repository.count_all(),
        }

    def get_platform_growth(self, period: Period) -> Dict[str, float]:
        start, end = period
        previous = (start - (end - start), start)

        def snapshot(window: Period) -> Tuple[int, int, int]:
            window_start, window_end = window
            return (
                self.account_repository.count_created_between(window_start, window_end),
                self.session_repository.count_sessions(
                    status=SessionStatus.COMPLETED,
                    created_from=window_start,
                    created_to=window_end,
                ),
                self.session_repository.count_sessions(
                    created_from=window_start, created_to=window_end
                ),
            )

        current_users, current_completed, current_sessions = snapshot(period)
        previous_users, previous_completed, previous_sessions = snapshot(previous)
        return {
            "user_growth_rate": growth_rate(current_users, previous_users),
            "revenue_growth_rate": growth_rate(current_completed, previous_completed),
            "session_growth_rate": growth_rate(current_sessions, previous_sessions),
        }

    @BaseService.measure_operation("export_analytics")
    def export(self, account: Account, period: Period, fmt: str) -> Tuple[str, str, str]:
        """Return ``(content, filename, media_type)`` for the dashboard export."""
        try:
            export_format = ExportFormat(fmt.lower())
        except ValueError:
            raise ValidationException(
                f"Unsupported export format: {fmt}", code="UNSUPPORTED_EXPORT_FORMAT"
            )
        dashboard = self.get_dashboard(account, period)
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        filename = f"analytics-{account.role.lower()}-{stamp}.{export_format.value}"
        if export_format == ExportFormat.CSV:
            return dashboard_to_csv(dashboard), filename, "text/csv"
        return json.dumps(dashboard, indent=2, default=str), filename, "application/json"


def dashboard_to_csv(dashboard: Dict[str, Any]) -> str:
    """Flatten the dashboard into ``section,metric,value`` rows."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["section", "metric", "value"])
    for section, values in dashboard.items():
        for metric, value in values.items():
            if isinstance(value, (dict, list)):
                value = json.dumps(value, default=str)
            writer.writerow([section, metric, value])
    return buffer.getvalue()
