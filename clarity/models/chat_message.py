# models/chat_message.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, DateTime, Text
from clarity.core.config import Base


class ChatMessage(Base):
    __tablename__ = "chat_message"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))
    is_user = Column(Boolean, nullable=False)
    is_error = Column(Boolean, nullable=False, default=False)
