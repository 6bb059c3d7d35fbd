# backend/app/repositories/custom_service_repository.py
"""Custom service queries, including the per-role visibility filter."""

from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from ..models.custom_service import CustomService
from .base_repository import BaseRepository


class CustomServiceRepository(BaseRepository[CustomService]):
    def __init__(self, db: Session):
        super().__init__(db, CustomService)

    def _filtered(self, is_template: Optional[bool], is_public: Optional[bool]) -> Query:
        query = self.db.query(CustomService)
        if is_template is not None:
            query = query.filter(CustomService.is_template.is_(is_template))
        if is_public is not None:
            query = query.filter(CustomService.is_public.is_(is_public))
        return query

    def list_all(
        self, is_template: Optional[bool] = None, is_public: Optional[bool] = None
    ) -> List[CustomService]:
        query = self._filtered(is_template, is_public)
        return self._execute_query(query.order_by(CustomService.created_at.desc()))

    def list_for_coach(
        self,
        coach_id: str,
        is_template: Optional[bool] = None,
        is_public: Optional[bool] = None,
    ) -> List[CustomService]:
        query = self._filtered(is_template, is_public).filter(
            or_(CustomService.coach_id == coach_id, CustomService.is_public.is_(True))
        )
        return self._execute_query(query.order_by(CustomService.created_at.desc()))

    def list_for_client(
        self,
        received_ids: Iterable[str],
        is_template: Optional[bool] = None,
        is_public: Optional[bool] = None,
    ) -> List[CustomService]:
        ids = list(received_ids)
        visibility = CustomService.is_public.is_(True)
        if ids:
            visibility = or_(visibility, CustomService.id.in_(ids))
        query = self._filtered(is_template, is_public).filter(visibility)
        return self._execute_query(query.order_by(CustomService.created_at.desc()))

    def _scope(self, coach_id: Optional[str]) -> Query:
        query = self.db.query(func.count(CustomService.id))
        if coach_id:
            query = query.filter(CustomService.coach_id == coach_id)
        return query

    def count_services(
        self,
        coach_id: Optional[str] = None,
        is_template: Optional[bool] = None,
        is_public: Optional[bool] = None,
    ) -> int:
        query = self._scope(coach_id)
        if is_template is not None:
            query = query.filter(CustomService.is_template.is_(is_template))
        if is_public is not None:
            query = query.filter(CustomService.is_public.is_(is_public))
        return int(self._execute_scalar(query) or 0)

    def total_usage(self, coach_id: Optional[str] = None) -> int:
        query = self.db.query(func.coalesce(func.sum(CustomService.usage_count), 0))
        if coach_id:
            query = query.filter(CustomService.coach_id == coach_id)
        return int(self._execute_scalar(query) or 0)
