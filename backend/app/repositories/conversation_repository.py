# backend/app/repositories/conversation_repository.py
"""Conversation lookups keyed by participant pair."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.conversation import Conversation, participant_key_for
from .base_repository import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    def __init__(self, db: Session):
        super().__init__(db, Conversation)

    def find_by_pair(self, first_id: str, second_id: str) -> Optional[Conversation]:
        return self.find_one_by(participant_key=participant_key_for(first_id, second_id))

    def get_or_create_for_pair(self, first_id: str, second_id: str) -> Conversation:
        existing = self.find_by_pair(first_id, second_id)
        if existing:
            return existing
        return self.create(
            participant_ids=sorted([first_id, second_id]),
            participant_key=participant_key_for(first_id, second_id),
        )

    def list_for_participant(
        self, account_id: str, is_pinned: Optional[bool] = None
    ) -> List[Conversation]:
        # Account ids are fixed-width ULIDs, so a substring match on the key is exact
        query = self.db.query(Conversation).filter(
            Conversation.participant_key.contains(account_id)
        )
        if is_pinned is not None:
            query = query.filter(Conversation.is_pinned.is_(is_pinned))
        query = query.order_by(
            Conversation.is_pinned.desc(),
            Conversation.pinned_at.desc(),
            Conversation.last_message_at.desc(),
            Conversation.id.desc(),
        )
        return self._execute_query(query)
