# backend/app/repositories/time_slot_repository.py
"""
Time slot repository.

Overlap checks load the coach's neighbouring slots and compare intervals in
Python, since slot end times are derived from ``duration_min``.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.enums import SessionStatus
from ..models.coaching_session import CoachingSession
from ..models.time_slot import TimeSlot
from .base_repository import BaseRepository

# Longest slot we expect; bounds the neighbour window for overlap checks
_OVERLAP_LOOKBACK = timedelta(hours=24)


class TimeSlotRepository(BaseRepository[TimeSlot]):
    def __init__(self, db: Session):
        super().__init__(db, TimeSlot)

    def list_available(
        self,
        start: datetime,
        end: Optional[datetime] = None,
        coach_id: Optional[str] = None,
    ) -> List[TimeSlot]:
        query = self.db.query(TimeSlot).filter(
            TimeSlot.is_available.is_(True), TimeSlot.date_time >= start
        )
        if end is not None:
            query = query.filter(TimeSlot.date_time <= end)
        if coach_id:
            query = query.filter(TimeSlot.coach_id == coach_id)
        return self._execute_query(query.order_by(TimeSlot.date_time.asc()))

    def list_by_coach(self, coach_id: str) -> List[TimeSlot]:
        query = (
            self.db.query(TimeSlot)
            .filter(TimeSlot.coach_id == coach_id)
            .order_by(TimeSlot.date_time.asc())
        )
        return self._execute_query(query)

    def find_overlapping(
        self,
        coach_id: str,
        start: datetime,
        duration_min: int,
        exclude_id: Optional[str] = None,
    ) -> List[TimeSlot]:
        end = start + timedelta(minutes=duration_min)
        query = self.db.query(TimeSlot).filter(
            TimeSlot.coach_id == coach_id,
            TimeSlot.date_time < end,
            TimeSlot.date_time > start - _OVERLAP_LOOKBACK,
        )
        if exclude_id:
            query = query.filter(TimeSlot.id != exclude_id)
        candidate = TimeSlot(date_time=start, duration_min=duration_min)
        return [slot for slot in self._execute_query(query) if slot.overlaps(candidate)]

    def has_active_session(self, slot_id: str) -> bool:
        query = (
            self.db.query(CoachingSession.id)
            .filter(
                CoachingSession.time_slot_id == slot_id,
                CoachingSession.status != SessionStatus.CANCELLED.value,
            )
            .limit(1)
        )
        return self._execute_scalar(query) is not None

    def count_all(self) -> int:
        return int(self._execute_scalar(self.db.query(func.count(TimeSlot.id))) or 0)
