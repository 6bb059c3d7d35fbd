# backend/app/repositories/discount_repository.py
"""Discount code queries."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.discount import Discount
from .base_repository import BaseRepository


class DiscountRepository(BaseRepository[Discount]):
    def __init__(self, db: Session):
        super().__init__(db, Discount)

    def get_by_code(self, code: str) -> Optional[Discount]:
        return self.find_one_by(code=code)

    def get_active_by_code(self, code: str) -> Optional[Discount]:
        return self.find_one_by(code=code, is_active=True)

    def list_by_coach(self, coach_id: str) -> List[Discount]:
        query = (
            self.db.query(Discount)
            .filter(Discount.coach_id == coach_id)
            .order_by(Discount.created_at.desc(), Discount.id.desc())
        )
        return self._execute_query(query)

    def increment_usage(self, discount: Discount) -> Discount:
        discount.use_count = (discount.use_count or 0) + 1
        self.db.flush()
        return discount

    def count_all(self) -> int:
        return int(self._execute_scalar(self.db.query(func.count(Discount.id))) or 0)
