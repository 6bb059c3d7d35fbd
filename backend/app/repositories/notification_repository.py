# backend/app/repositories/notification_repository.py
"""In-app notification inbox queries."""

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.enums import NotificationType
from ..models.notification import Notification
from .base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def get_for_recipient(self, notification_id: str, recipient_id: str) -> Optional[Notification]:
        return self.find_one_by(id=notification_id, recipient_id=recipient_id)

    def list_for_recipient(
        self,
        recipient_id: str,
        limit: int,
        offset: int,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
    ) -> Tuple[List[Notification], int]:
        query = self.db.query(Notification).filter(Notification.recipient_id == recipient_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        if notification_type is not None:
            query = query.filter(Notification.type == notification_type.value)
        with self._guard("count"):
            total = query.count()
        page = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return self._execute_query(page), total

    def count_unread(self, recipient_id: str) -> int:
        query = self.db.query(func.count(Notification.id)).filter(
            Notification.recipient_id == recipient_id, Notification.is_read.is_(False)
        )
        return int(self._execute_scalar(query) or 0)

    def mark_all_read(self, recipient_id: str) -> int:
        with self._guard("mark read", rollback=True):
            updated = (
                self.db.query(Notification)
                .filter(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
                .update(
                    {Notification.is_read: True, Notification.read_at: datetime.now(timezone.utc)},
                    synchronize_session="fetch",
                )
            )
            self.db.flush()
        return int(updated)
