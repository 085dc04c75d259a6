# models/game_session_entry.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, Enum as SqlEnum
from clarity.core.config import Base
from clarity.schemas.records import GameType


class GameSessionEntry(Base):
    __tablename__ = "game_session_entry"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    timestamp = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    game_type = Column(SqlEnum(GameType), nullable=False)
    difficulty_level = Column(Integer, nullable=False, default=1)
    score = Column(Integer, nullable=False)
    accuracy = Column(Float, nullable=False)
    reaction_time_ms = Column(Integer, nullable=True)

    # ---- Advanced metrics ----
    reaction_time_variability = Column(Float, nullable=True)
    omission_errors = Column(Integer, nullable=False, default=0)
    commission_errors = Column(Integer, nullable=False, default=0)

    # Weak link to the preceding check-in; a missing EMA means "no context"
    ema_id = Column(String(64), nullable=True, index=True)
    is_baseline_session = Column(Boolean, nullable=False, default=False)
