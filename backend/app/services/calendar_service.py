# backend/app/services/calendar_service.py
"""
Calendar service for Courtside.

Builds a calendar event for a session and records its id on the session.
Event ids are generated locally; no third-party calendar account is used.
"""

import logging
from typing import Any, Dict

from sqlalchemy.orm import Session
import ulid

from ..core.exceptions import ForbiddenException, NotFoundException
from ..models.account import Account
from ..models.coaching_session import CoachingSession
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class CalendarService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)

    @BaseService.measure_operation("create_calendar_event")
    def create_event(self, session_id: str, account: Account) -> Dict[str, Any]:
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        self._check_participant(session, account)

        event_id = session.calendar_event_id or f"event_{str(ulid.ULID()).lower()}"
        with self.transaction():
            session.calendar_event_id = event_id
        self.log_operation("create_calendar_event", session_id=session.id, event_id=event_id)
        return self.build_event(session)

    @BaseService.measure_operation("delete_calendar_event")
    def delete_event(self, event_id: str, account: Account) -> None:
        session = self.session_repository.get_by_calendar_event_id(event_id)
        if session is None:
            raise NotFoundException("Calendar event not found", code="EVENT_NOT_FOUND")
        self._check_participant(session, account)
        with self.transaction():
            session.calendar_event_id = None

    @staticmethod
    def build_event(session: CoachingSession) -> Dict[str, Any]:
        booking_type_name = session.booking_type.name if session.booking_type else "Session"
        return {
            "event_id": session.calendar_event_id,
            "session_id": session.id,
            "summary": f"Tennis coaching: {booking_type_name}",
            "description": f"{booking_type_name} with {session.coach.name}",
            "start": session.starts_at,
            "end": session.ends_at,
            "attendees": [session.user.email, session.coach.email],
        }

    @staticmethod
    def _check_participant(session: CoachingSession, account: Account) -> None:
        if not session.is_participant(account.id):
            raise ForbiddenException("Only session participants can manage calendar events")
