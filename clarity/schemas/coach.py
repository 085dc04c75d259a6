# schemas/coach.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from clarity.schemas.records import FrozenRecordModel, RecordModel


class AiCoachContext(FrozenRecordModel):
    """Summary of recent activity handed to the AI coach prompt."""
    user_name: str
    performance_summary: str  # "Avg Score: 75, Avg Accuracy: 80.0%"
    mood_summary: str
    sleep_summary: str
    recent_activity: List[str]  # ["GO_NO_GO: 80 pts"]
    streak: int
    total_sessions: int


class ChatMessageCreate(RecordModel):
    content: str = Field(..., min_length=1, max_length=2000)


class ChatMessageRead(FrozenRecordModel):
    id: str
    content: str
    timestamp: datetime
    is_user: bool
    is_error: bool = False


class ChatHistory(FrozenRecordModel):
    messages: List[ChatMessageRead]
    total: int
    limit: Optional[int] = None
