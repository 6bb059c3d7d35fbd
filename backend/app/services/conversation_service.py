# backend/app/services/conversation_service.py
"""
Conversation service for Courtside.

Lists a participant's conversations with the other participant and the
unread count attached, and handles pinning and read receipts.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_MESSAGE_PAGE_SIZE
from ..core.exceptions import ForbiddenException, NotFoundException
from ..models.account import Account
from ..models.conversation import Conversation
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class ConversationService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_conversation_repository(db)
        self.message_repository = RepositoryFactory.create_message_repository(db)
        self.account_repository = RepositoryFactory.create_account_repository(db)

    def list_conversations(
        self, account: Account, is_pinned: Optional[bool] = None
    ) -> List[Dict[str, Any]]:
        conversations = self.repository.list_for_participant(account.id, is_pinned=is_pinned)
        return [self._summary(conversation, account) for conversation in conversations]

    def get_conversation(self, conversation_id: str, account: Account) -> Dict[str, Any]:
        return self._summary(self._accessible(conversation_id, account), account)

    @BaseService.measure_operation("pin_conversation")
    def pin(self, conversation_id: str, account: Account) -> Dict[str, Any]:
        conversation = self._pinnable(conversation_id, account)
        with self.transaction():
            conversation.pin(account.id)
        return self._summary(conversation, account)

    @BaseService.measure_operation("unpin_conversation")
    def unpin(self, conversation_id: str, account: Account) -> Dict[str, Any]:
        conversation = self._pinnable(conversation_id, account)
        with self.transaction():
            conversation.unpin()
        return self._summary(conversation, account)

    def list_messages(
        self,
        conversation_id: str,
        account: Account,
        page: int = 1,
        limit: int = DEFAULT_MESSAGE_PAGE_SIZE,
    ) -> Dict[str, Any]:
        conversation = self._accessible(conversation_id, account)
        messages, total = self.message_repository.list_for_conversation(
            conversation.id, offset=(page - 1) * limit, limit=limit
        )
        return {"messages": messages, "total": total, "page": page, "limit": limit}

    @BaseService.measure_operation("mark_conversation_read")
    def mark_read(self, conversation_id: str, account: Account) -> int:
        conversation = self._accessible(conversation_id, account)
        with self.transaction():
            updated = self.message_repository.mark_conversation_read(conversation.id, account.id)
        return updated

    def _get(self, conversation_id: str) -> Conversation:
        conversation = self.repository.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundException("Conversation not found", code="CONVERSATION_NOT_FOUND")
        return conversation

    def _accessible(self, conversation_id: str, account: Account) -> Conversation:
        conversation = self._get(conversation_id)
        if not (account.is_admin or conversation.is_participant(account.id)):
            raise ForbiddenException("You do not have access to this conversation")
        return conversation

    def _pinnable(self, conversation_id: str, account: Account) -> Conversation:
        conversation = self._get(conversation_id)
        if not conversation.is_participant(account.id):
            raise ForbiddenException("You do not have access to this conversation")
        if not (account.is_coach or account.is_admin):
            raise ForbiddenException("Only coaches and admins can pin conversations")
        return conversation

    def _summary(self, conversation: Conversation, account: Account) -> Dict[str, Any]:
        other_id = conversation.get_other_user_id(account.id)
        other = (
            self.account_repository.get_by_id(other_id, load_relationships=False)
            if other_id
            else None
        )
        return {
            "id": conversation.id,
            "participant_ids": conversation.participants,
            "other_participant": other,
            "last_message": conversation.last_message,
            "last_message_at": conversation.last_message_at,
            "is_pinned": conversation.is_pinned,
            "pinned_at": conversation.pinned_at,
            "pinned_by": conversation.pinned_by,
            "unread_count": self.message_repository.count_unread_in_conversation(
                conversation.id, account.id
            ),
            "created_at": conversation.created_at,
            "updated_at": conversation.updated_at,
        }
