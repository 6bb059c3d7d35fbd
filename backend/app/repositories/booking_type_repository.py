# backend/app/repositories/booking_type_repository.py
"""Booking type queries."""

from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..models.booking_type import BookingType
from .base_repository import BaseRepository


class BookingTypeRepository(BaseRepository[BookingType]):
    def __init__(self, db: Session):
        super().__init__(db, BookingType)

    def _apply_eager_loading(self, query):
        return query.options(joinedload(BookingType.coach))

    def list_active(self) -> List[BookingType]:
        query = (
            self.db.query(BookingType)
            .filter(BookingType.is_active.is_(True))
            .order_by(BookingType.created_at.desc(), BookingType.id.desc())
        )
        return self._execute_query(query)

    def list_by_coach(self, coach_id: str, active_only: bool = True) -> List[BookingType]:
        query = self.db.query(BookingType).filter(BookingType.coach_id == coach_id)
        if active_only:
            query = query.filter(BookingType.is_active.is_(True))
        return self._execute_query(query.order_by(BookingType.name))

    def list_active_for_coaches(self, coach_ids: Iterable[str]) -> List[BookingType]:
        ids = list(coach_ids)
        if not ids:
            return []
        query = (
            self.db.query(BookingType)
            .filter(BookingType.coach_id.in_(ids), BookingType.is_active.is_(True))
            .order_by(BookingType.name)
        )
        return self._execute_query(query)

    def count_all(self) -> int:
        return int(self._execute_scalar(self.db.query(func.count(BookingType.id))) or 0)
