# backend/app/services/time_slot_service.py
"""
Time slot service for Courtside.

Coaches publish slots in the future; a coach's slots never overlap. A slot
referenced by a session that is still active cannot be removed.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    SlotOverlapException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc
from ..models.account import Account
from ..models.time_slot import TimeSlot
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


def _format_range(start: datetime, end: datetime) -> str:
    return f"{start.strftime('%Y-%m-%d %H:%M')}-{end.strftime('%H:%M')}"


class TimeSlotService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_time_slot_repository(db)

    def list_available(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        coach_id: Optional[str] = None,
    ) -> List[TimeSlot]:
        start = ensure_utc(start_date) if start_date else datetime.now(timezone.utc)
        end = ensure_utc(end_date) if end_date else None
        return self.repository.list_available(start, end, coach_id)

    def list_for_coach(self, coach_id: str) -> List[TimeSlot]:
        return self.repository.list_by_coach(coach_id)

    def get_time_slot(self, slot_id: str) -> TimeSlot:
        slot = self.repository.get_by_id(slot_id)
        if slot is None:
            raise NotFoundException("Time slot not found", code="TIME_SLOT_NOT_FOUND")
        return slot

    @BaseService.measure_operation("create_time_slot")
    def create_time_slot(self, coach: Account, data: Dict[str, Any]) -> TimeSlot:
        start = ensure_utc(data["date_time"])
        duration = data["duration_min"]
        self._check_schedule(coach.id, start, duration)

        with self.transaction():
            slot = self.repository.create(
                coach_id=coach.id,
                date_time=start,
                duration_min=duration,
                is_available=data.get("is_available", True),
            )
        self.log_operation("create_time_slot", slot_id=slot.id, coach_id=coach.id)
        return slot

    @BaseService.measure_operation("update_time_slot")
    def update_time_slot(self, slot_id: str, coach: Account, data: Dict[str, Any]) -> TimeSlot:
        slot = self._owned(slot_id, coach)
        updates = dict(data)
        if updates.get("is_available") and self.repository.has_active_session(slot.id):
            raise ConflictException(
                "Time slot is booked and cannot be reopened", code="SLOT_IN_USE"
            )
        if "date_time" in updates or "duration_min" in updates:
            start = ensure_utc(updates.get("date_time") or slot.date_time)
            duration = updates.get("duration_min") or slot.duration_min
            if "date_time" in updates:
                updates["date_time"] = start
            self._check_schedule(coach.id, start, duration, exclude_id=slot.id)

        with self.transaction():
            self.repository.update_entity(slot, **updates)
        return slot

    @BaseService.measure_operation("delete_time_slot")
    def delete_time_slot(self, slot_id: str, coach: Account) -> None:
        slot = self._owned(slot_id, coach)
        if self.repository.has_active_session(slot.id):
            raise ConflictException(
                "Time slot has an active session and cannot be deleted", code="SLOT_IN_USE"
            )
        with self.transaction():
            try:
                self.repository.delete(slot.id)
            except RepositoryException as exc:
                raise ConflictException(
                    "Time slot is referenced by past sessions and cannot be deleted",
                    code="SLOT_IN_USE",
                ) from exc
        self.log_operation("delete_time_slot", slot_id=slot_id)

    def _owned(self, slot_id: str, coach: Account) -> TimeSlot:
        slot = self.get_time_slot(slot_id)
        if slot.coach_id != coach.id:
            raise ForbiddenException("You can only manage your own time slots")
        return slot

    def _check_schedule(
        self, coach_id: str, start: datetime, duration: int, exclude_id: Optional[str] = None
    ) -> None:
        if start < datetime.now(timezone.utc):
            raise ValidationException("Cannot create time slots in the past", code="SLOT_IN_PAST")
        conflicts = self.repository.find_overlapping(coach_id, start, duration, exclude_id)
        if conflicts:
            candidate = TimeSlot(date_time=start, duration_min=duration)
            existing = conflicts[0]
            raise SlotOverlapException(
                _format_range(candidate.starts_at, candidate.ends_at),
                _format_range(existing.starts_at, existing.ends_at),
            )
