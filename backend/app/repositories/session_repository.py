# backend/app/repositories/session_repository.py
"""
Coaching session repository.

Besides per-account listings this repository serves the booking guard
(pending-booking count) and the analytics service, which loads sessions with
their booking type and discount and aggregates in Python.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload

from ..core.enums import SessionStatus
from ..models.coaching_session import CoachingSession
from .base_repository import BaseRepository


class SessionRepository(BaseRepository[CoachingSession]):
    def __init__(self, db: Session):
        super().__init__(db, CoachingSession)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(CoachingSession.booking_type),
            joinedload(CoachingSession.time_slot),
            joinedload(CoachingSession.user),
            joinedload(CoachingSession.coach),
            joinedload(CoachingSession.discount),
        )

    def count_pending_for_user(self, user_id: str) -> int:
        """Unpaid sessions still awaiting payment."""
        query = self.db.query(func.count(CoachingSession.id)).filter(
            CoachingSession.user_id == user_id,
            CoachingSession.is_paid.is_(False),
            CoachingSession.status == SessionStatus.SCHEDULED.value,
        )
        return int(self._execute_scalar(query) or 0)

    def list_for_account(
        self,
        account_id: str,
        as_coach: bool,
        status: Optional[SessionStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[CoachingSession]:
        column = CoachingSession.coach_id if as_coach else CoachingSession.user_id
        query = self._apply_eager_loading(self.db.query(CoachingSession)).filter(
            column == account_id
        )
        if status is not None:
            query = query.filter(CoachingSession.status == status.value)
        if start_date is not None:
            query = query.filter(CoachingSession.date_time >= start_date)
        if end_date is not None:
            query = query.filter(CoachingSession.date_time <= end_date)
        return self._execute_query(
            query.order_by(CoachingSession.date_time.desc(), CoachingSession.id.desc())
        )

    def list_starting_between(
        self, start: datetime, end: datetime, statuses: Iterable[SessionStatus]
    ) -> List[CoachingSession]:
        query = self._apply_eager_loading(self.db.query(CoachingSession)).filter(
            CoachingSession.date_time >= start,
            CoachingSession.date_time < end,
            CoachingSession.status.in_([s.value for s in statuses]),
        )
        return self._execute_query(query.order_by(CoachingSession.date_time.asc()))

    def get_by_calendar_event_id(self, event_id: str) -> Optional[CoachingSession]:
        return self.find_one_by(calendar_event_id=event_id)

    # Analytics

    def client_ids_for_coach(self, coach_id: str) -> List[str]:
        query = (
            self.db.query(CoachingSession.user_id)
            .filter(CoachingSession.coach_id == coach_id)
            .distinct()
        )
        return [row[0] for row in self._execute_query(query)]

    def list_for_analytics(
        self,
        coach_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> List[CoachingSession]:
        query = self.db.query(CoachingSession).options(
            joinedload(CoachingSession.booking_type),
            joinedload(CoachingSession.discount),
            joinedload(CoachingSession.time_slot),
        )
        if coach_id:
            query = query.filter(CoachingSession.coach_id == coach_id)
        if status is not None:
            query = query.filter(CoachingSession.status == status.value)
        if created_from is not None:
            query = query.filter(CoachingSession.created_at >= created_from)
        if created_to is not None:
            query = query.filter(CoachingSession.created_at <= created_to)
        return self._execute_query(query)

    def count_sessions(
        self,
        coach_id: Optional[str] = None,
        status: Optional[SessionStatus] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
    ) -> int:
        query = self.db.query(func.count(CoachingSession.id))
        if coach_id:
            query = query.filter(CoachingSession.coach_id == coach_id)
        if status is not None:
            query = query.filter(CoachingSession.status == status.value)
        if created_from is not None:
            query = query.filter(CoachingSession.created_at >= created_from)
        if created_to is not None:
            query = query.filter(CoachingSession.created_at <= created_to)
        return int(self._execute_scalar(query) or 0)
