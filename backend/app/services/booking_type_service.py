# backend/app/services/booking_type_service.py
"""
Booking type service for Courtside.

Coaches manage their own offerings; everyone can browse the active ones.
Deleting a booking type only deactivates it so past sessions keep their link.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, NotFoundException
from ..models.account import Account
from ..models.booking_type import BookingType
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class BookingTypeService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_type_repository(db)

    def list_active(self) -> List[BookingType]:
        return self.repository.list_active()

    def list_for_coach(self, coach_id: str) -> List[BookingType]:
        return self.repository.list_by_coach(coach_id)

    def get_booking_type(self, booking_type_id: str) -> BookingType:
        booking_type = self.repository.get_by_id(booking_type_id)
        if booking_type is None:
            raise NotFoundException("Booking type not found", code="BOOKING_TYPE_NOT_FOUND")
        return booking_type

    @BaseService.measure_operation("create_booking_type")
    def create_booking_type(self, coach: Account, data: Dict[str, Any]) -> BookingType:
        with self.transaction():
            booking_type = self.repository.create(coach_id=coach.id, **data)
        self.log_operation("create_booking_type", booking_type_id=booking_type.id)
        return booking_type

    @BaseService.measure_operation("update_booking_type")
    def update_booking_type(
        self, booking_type_id: str, coach: Account, data: Dict[str, Any]
    ) -> BookingType:
        booking_type = self._owned(booking_type_id, coach)
        with self.transaction():
            self.repository.update_entity(booking_type, **data)
        return booking_type

    @BaseService.measure_operation("delete_booking_type")
    def delete_booking_type(self, booking_type_id: str, coach: Account) -> None:
        booking_type = self._owned(booking_type_id, coach)
        with self.transaction():
            booking_type.is_active = False
        self.log_operation("deactivate_booking_type", booking_type_id=booking_type_id)

    def _owned(self, booking_type_id: str, coach: Account) -> BookingType:
        booking_type = self.get_booking_type(booking_type_id)
        if booking_type.coach_id != coach.id:
            raise ForbiddenException("You can only manage your own booking types")
        return booking_type
