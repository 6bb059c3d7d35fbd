# backend/app/repositories/message_repository.py
"""
Message repository.

Listing helpers return ORM rows; pagination is offset/limit based. Read
receipts are bulk updates scoped to the receiving account.
"""

from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from ..models.message import Message
from .base_repository import BaseRepository


class MessageRepository(BaseRepository[Message]):
    def __init__(self, db: Session):
        super().__init__(db, Message)

    def list_for_account(self, account_id: str) -> List[Message]:
        query = (
            self.db.query(Message)
            .filter(or_(Message.sender_id == account_id, Message.receiver_id == account_id))
            .order_by(Message.sent_at.desc(), Message.id.desc())
        )
        return self._execute_query(query)

    def list_between(self, first_id: str, second_id: str) -> List[Message]:
        query = (
            self.db.query(Message)
            .filter(
                or_(
                    and_(Message.sender_id == first_id, Message.receiver_id == second_id),
                    and_(Message.sender_id == second_id, Message.receiver_id == first_id),
                )
            )
            .order_by(Message.sent_at.asc(), Message.id.asc())
        )
        return self._execute_query(query)

    def list_for_session(
        self, session_id: str, offset: int, limit: int
    ) -> Tuple[List[Message], int]:
        base = self.db.query(Message).filter(Message.session_id == session_id)
        total = base.count()
        page = base.order_by(Message.sent_at.desc(), Message.id.desc()).offset(offset).limit(limit)
        return self._execute_query(page), total

    def list_for_conversation(
        self, conversation_id: str, offset: int, limit: int
    ) -> Tuple[List[Message], int]:
        base = self.db.query(Message).filter(Message.conversation_id == conversation_id)
        total = base.count()
        page = base.order_by(Message.sent_at.asc(), Message.id.asc()).offset(offset).limit(limit)
        return self._execute_query(page), total

    def count_unread(self, receiver_id: str) -> int:
        query = self.db.query(func.count(Message.id)).filter(
            Message.receiver_id == receiver_id, Message.is_read.is_(False)
        )
        return int(self._execute_scalar(query) or 0)

    def count_unread_in_conversation(self, conversation_id: str, receiver_id: str) -> int:
        query = self.db.query(func.count(Message.id)).filter(
            Message.conversation_id == conversation_id,
            Message.receiver_id == receiver_id,
            Message.is_read.is_(False),
        )
        return int(self._execute_scalar(query) or 0)

    def mark_conversation_read(self, conversation_id: str, receiver_id: str) -> int:
        with self._guard("mark read", rollback=True):
            updated = (
                self.db.query(Message)
                .filter(
                    Message.conversation_id == conversation_id,
                    Message.receiver_id == receiver_id,
                    Message.is_read.is_(False),
                )
                .update(
                    {Message.is_read: True, Message.read_at: datetime.now(timezone.utc)},
                    synchronize_session="fetch",
                )
            )
            self.db.flush()
        return int(updated)

    def custom_service_ids_sent_to(self, receiver_id: str) -> List[str]:
        query = (
            self.db.query(Message.custom_service_id)
            .filter(Message.receiver_id == receiver_id, Message.custom_service_id.isnot(None))
            .distinct()
        )
        return [row[0] for row in self._execute_query(query)]

    def count_all(self) -> int:
        return int(self._execute_scalar(self.db.query(func.count(Message.id))) or 0)
