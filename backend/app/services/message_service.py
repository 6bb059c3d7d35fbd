# backend/app/services/message_service.py
"""
Message service for Courtside.

Every message belongs to the conversation of its two participants; the
conversation is created on first contact and tracks the latest message.
Only the two participants can read a message and only the receiver can
mark it read.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_MESSAGE_PAGE_SIZE
from ..core.enums import MessageType
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.account import Account
from ..models.message import Message
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

BOOKING_REQUEST_DEFAULT = "I'd like to book a {name} session."


class MessageService(BaseService):
    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_message_repository(db)
        self.conversation_repository = RepositoryFactory.create_conversation_repository(db)
        self.account_repository = RepositoryFactory.create_account_repository(db)
        self.session_repository = RepositoryFactory.create_session_repository(db)
        self.booking_type_repository = RepositoryFactory.create_booking_type_repository(db)
        self.custom_service_repository = RepositoryFactory.create_custom_service_repository(db)
        self.notification_service = notification_service or NotificationService(db)

    @BaseService.measure_operation("send_message")
    def send_message(
        self,
        sender: Account,
        receiver_id: str,
        content: str,
        session_id: Optional[str] = None,
        message_type: MessageType = MessageType.TEXT,
        custom_service_id: Optional[str] = None,
    ) -> Message:
        """
        Store a message and bump its conversation.

        Raises:
            NotFoundException: Receiver, session or custom service does not exist
            ForbiddenException: The session belongs to someone else
            ValidationException: Sender and receiver are the same account
        """
        receiver = self.account_repository.get_by_id(receiver_id, load_relationships=False)
        if receiver is None:
            raise NotFoundException("Receiver not found", code="RECEIVER_NOT_FOUND")
        if receiver.id == sender.id:
            raise ValidationException("Cannot send a message to yourself", code="SELF_MESSAGE")
        if session_id:
            self._check_session_thread(session_id, sender.id, receiver.id)
        if custom_service_id and not self.custom_service_repository.exists(id=custom_service_id):
            raise NotFoundException("Custom service not found", code="CUSTOM_SERVICE_NOT_FOUND")

        with self.transaction():
            conversation = self.conversation_repository.get_or_create_for_pair(
                sender.id, receiver.id
            )
            message = self.repository.create(
                content=content,
                sent_at=datetime.now(timezone.utc),
                sender_id=sender.id,
                receiver_id=receiver.id,
                sender_type=sender.role,
                receiver_type=receiver.role,
                message_type=MessageType(message_type).value,
                session_id=session_id,
                custom_service_id=custom_service_id,
                conversation_id=conversation.id,
            )
            conversation.last_message_id = message.id
            conversation.last_message_at = message.sent_at

        self.log_operation(
            "send_message", message_id=message.id, conversation_id=conversation.id
        )
        self.notification_service.notify_message_received(sender, receiver.id, message.id)
        return message

    def _check_session_thread(self, session_id: str, sender_id: str, receiver_id: str) -> None:
        session = self.session_repository.get_by_id(session_id, load_relationships=False)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        if not (session.is_participant(sender_id) and session.is_participant(receiver_id)):
            raise ForbiddenException(
                "Messages can only be attached to a session between the two participants"
            )

    @BaseService.measure_operation("send_booking_request")
    def send_booking_request(
        self,
        sender: Account,
        coach_id: str,
        booking_type_id: str,
        message: Optional[str] = None,
    ) -> Message:
        booking_type = self.booking_type_repository.get_by_id(booking_type_id)
        if booking_type is None or booking_type.coach_id != coach_id:
            raise ValidationException(
                "Booking type does not belong to this coach", code="BOOKING_TYPE_MISMATCH"
            )
        return self.send_message(
            sender,
            coach_id,
            message or BOOKING_REQUEST_DEFAULT.format(name=booking_type.name),
            message_type=MessageType.BOOKING_REQUEST,
        )

    def list_messages(self, account: Account) -> List[Message]:
        return self.repository.list_for_account(account.id)

    def list_with(self, account: Account, other_user_id: str) -> List[Message]:
        return self.repository.list_between(account.id, other_user_id)

    def ensure_session_access(self, session_id: str, account: Account) -> None:
        """
        Raises:
            NotFoundException: Session does not exist
            ForbiddenException: Caller is not one of the session's participants
        """
        session = self.session_repository.get_by_id(session_id, load_relationships=False)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        if not session.is_participant(account.id):
            raise ForbiddenException("You do not have access to this session's messages")

    def list_for_session(
        self,
        session_id: str,
        account: Account,
        page: int = 1,
        limit: int = DEFAULT_MESSAGE_PAGE_SIZE,
    ) -> Dict[str, Any]:
        self.ensure_session_access(session_id, account)
        messages, total = self.repository.list_for_session(
            session_id, offset=(page - 1) * limit, limit=limit
        )
        return {"messages": messages, "total": total, "page": page, "limit": limit}

    def get_unread_count(self, account: Account) -> int:
        return self.repository.count_unread(account.id)

    def get_message(self, message_id: str, account: Account) -> Message:
        message = self.repository.get_by_id(message_id)
        if message is None:
            raise NotFoundException("Message not found", code="MESSAGE_NOT_FOUND")
        if not message.is_participant(account.id):
            raise ForbiddenException("You do not have access to this message")
        return message

    def mark_read(self, message_id: str, account: Account) -> Message:
        message = self.get_message(message_id, account)
        if message.receiver_id != account.id:
            raise ForbiddenException("Only the receiver can mark a message as read")
        with self.transaction():
            message.mark_read()
        return message
