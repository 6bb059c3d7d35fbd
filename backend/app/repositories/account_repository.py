# backend/app/repositories/account_repository.py
"""
Account repository for the Courtside platform.

Covers account lookups and the aggregate counts used by analytics, plus the
refresh-token store used by the auth service.
"""

from datetime import datetime
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from ..core.enums import Role
from ..models.account import Account, RefreshToken
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AccountRepository(BaseRepository[Account]):
    """Repository for accounts of every role."""

    def __init__(self, db: Session):
        super().__init__(db, Account)

    def get_by_email(self, email: str) -> Optional[Account]:
        query = self.db.query(Account).filter(func.lower(Account.email) == email.lower())
        with self._guard("load"):
            return query.first()

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(Account.id).filter(func.lower(Account.email) == email.lower())
        if exclude_id:
            query = query.filter(Account.id != exclude_id)
        return self._execute_scalar(query.limit(1)) is not None

    def list_accounts(self, skip: int = 0, limit: int = 100) -> List[Account]:
        query = self.db.query(Account).order_by(Account.created_at.desc(), Account.id.desc())
        return self._execute_query(query.offset(skip).limit(limit))

    def list_coaches(
        self, country: Optional[str] = None, is_active: Optional[bool] = True
    ) -> List[Account]:
        query = self.db.query(Account).filter(Account.role == Role.COACH.value)
        if is_active is not None:
            query = query.filter(Account.is_active.is_(is_active))
        if country:
            query = query.filter(func.lower(Account.country) == country.lower())
        return self._execute_query(query.order_by(Account.name))

    def get_coach(self, coach_id: str) -> Optional[Account]:
        return self.find_one_by(id=coach_id, role=Role.COACH.value)

    # Analytics counts

    def _scoped(self, account_ids: Optional[Iterable[str]]) -> Query:
        query = self.db.query(func.count(Account.id))
        if account_ids is not None:
            query = query.filter(Account.id.in_(list(account_ids)))
        return query

    def count_accounts(self, account_ids: Optional[Iterable[str]] = None) -> int:
        return int(self._execute_scalar(self._scoped(account_ids)) or 0)

    def count_active(
        self, start: datetime, end: datetime, account_ids: Optional[Iterable[str]] = None
    ) -> int:
        query = self._scoped(account_ids).filter(
            or_(
                Account.is_online.is_(True),
                Account.updated_at.between(start, end),
            )
        )
        return int(self._execute_scalar(query) or 0)

    def count_online(self, account_ids: Optional[Iterable[str]] = None) -> int:
        query = self._scoped(account_ids).filter(Account.is_online.is_(True))
        return int(self._execute_scalar(query) or 0)

    def count_created_between(
        self, start: datetime, end: datetime, account_ids: Optional[Iterable[str]] = None
    ) -> int:
        query = self._scoped(account_ids).filter(Account.created_at.between(start, end))
        return int(self._execute_scalar(query) or 0)

    def count_by_role(self, account_ids: Optional[Iterable[str]] = None) -> Dict[str, int]:
        query = self.db.query(Account.role, func.count(Account.id)).group_by(Account.role)
        if account_ids is not None:
            query = query.filter(Account.id.in_(list(account_ids)))
        return {role: int(count) for role, count in self._execute_query(query)}

    def count_role(self, role: Role, active_only: bool = False) -> int:
        query = self.db.query(func.count(Account.id)).filter(Account.role == role.value)
        if active_only:
            query = query.filter(Account.is_active.is_(True))
        return int(self._execute_scalar(query) or 0)


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persisted refresh-token identifiers."""

    def __init__(self, db: Session):
        super().__init__(db, RefreshToken)

    def get_by_token(self, token: str) -> Optional[RefreshToken]:
        return self.find_one_by(token=token)

    def revoke(self, token: str) -> bool:
        with self._guard("revoke", rollback=True):
            deleted = self.db.query(RefreshToken).filter(RefreshToken.token == token).delete(
                synchronize_session="fetch"
            )
            self.db.flush()
        return deleted > 0

    def revoke_all_for_account(self, account_id: str) -> int:
        with self._guard("revoke", rollback=True):
            deleted = (
                self.db.query(RefreshToken)
                .filter(RefreshToken.account_id == account_id)
                .delete(synchronize_session="fetch")
            )
            self.db.flush()
        return int(deleted)
