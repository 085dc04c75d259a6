# crud/chat_message.py
from typing import List
from sqlalchemy.orm import Session

from clarity.core.clock import to_utc_naive
from clarity.models.chat_message import ChatMessage


class CRUDChatMessage:
    """CRUD operations for the coach chat log."""

    def create(self, db: Session, *, content: str, is_user: bool, timestamp, is_error: bool = False) -> ChatMessage:
        db_obj = ChatMessage(
            content=content,
            is_user=is_user,
            is_error=is_error,
            timestamp=to_utc_naive(timestamp),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_recent(self, db: Session, *, limit: int = 50) -> List[ChatMessage]:
        """Most recent messages, returned oldest first for display."""
        rows = (
            db.query(ChatMessage)
            .order_by(ChatMessage.timestamp.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))

    def count(self, db: Session) -> int:
        return db.query(ChatMessage).count()


crud_chat_message = CRUDChatMessage()
