# backend/app/services/discount_service.py
"""
Discount code service for Courtside.

Coaches issue codes that reduce a session's price. Codes are looked up by
their text; deleting one only deactivates it.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..core.timezone_utils import ensure_utc
from ..models.account import Account
from ..models.discount import Discount
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class DiscountService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_discount_repository(db)

    def list_for_coach(self, coach: Account) -> List[Discount]:
        return self.repository.list_by_coach(coach.id)

    @BaseService.measure_operation("validate_discount")
    def validate_code(self, code: str, coach_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Check that a code can be applied right now.

        Raises:
            ValidationException: Unknown, inactive, expired or foreign code,
                or the usage limit has been reached
        """
        discount = self.repository.get_active_by_code(code)
        foreign = bool(coach_id) and discount is not None and discount.coach_id != coach_id
        if discount is None or discount.is_expired() or foreign:
            raise ValidationException("Invalid or expired discount code", code="INVALID_DISCOUNT")
        if discount.is_exhausted:
            raise ValidationException(
                "Discount code usage limit reached", code="DISCOUNT_EXHAUSTED"
            )
        return {"code": discount.code, "amount": discount.amount, "is_valid": True}

    @BaseService.measure_operation("create_discount")
    def create_discount(self, coach: Account, data: Dict[str, Any]) -> Discount:
        if self.repository.get_by_code(data["code"]) is not None:
            raise ValidationException("Discount code already exists", code="DISCOUNT_EXISTS")
        expiry = ensure_utc(data["expiry"])
        self._check_expiry(expiry)

        with self.transaction():
            discount = self.repository.create(
                coach_id=coach.id, **{**data, "expiry": expiry}
            )
        self.log_operation("create_discount", code=discount.code, coach_id=coach.id)
        return discount

    @BaseService.measure_operation("update_discount")
    def update_discount(self, code: str, account: Account, data: Dict[str, Any]) -> Discount:
        discount = self._owned(code, account)
        updates = dict(data)
        if updates.get("expiry") is not None:
            updates["expiry"] = ensure_utc(updates["expiry"])
            self._check_expiry(updates["expiry"])
        with self.transaction():
            self.repository.update_entity(discount, **updates)
        return discount

    @BaseService.measure_operation("delete_discount")
    def delete_discount(self, code: str, account: Account) -> None:
        discount = self._owned(code, account)
        with self.transaction():
            discount.is_active = False
        self.log_operation("deactivate_discount", code=code)

    def _owned(self, code: str, account: Account) -> Discount:
        discount = self.repository.get_active_by_code(code)
        if discount is None:
            raise NotFoundException("Discount not found", code="DISCOUNT_NOT_FOUND")
        if discount.coach_id != account.id:
            raise ForbiddenException("You can only manage your own discount codes")
        return discount

    @staticmethod
    def _check_expiry(expiry: datetime) -> None:
        if expiry <= datetime.now(timezone.utc):
            raise ValidationException(
                "Discount expiry must be in the future", code="DISCOUNT_EXPIRY_PAST"
            )
