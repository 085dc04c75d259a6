# models/ema_entry.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, Text, Enum as SqlEnum
from clarity.core.config import Base
from clarity.schemas.records import (
    AlcoholUse,
    SubstanceType,
    PreSessionActivity,
    SocialContext,
    EnvironmentContext,
)


class EmaEntry(Base):
    __tablename__ = "ema_entry"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    # Stored as naive UTC
    timestamp = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    # ---- Mood (1-5) ----
    anger = Column(Integer, nullable=False)
    anxiety = Column(Integer, nullable=False)
    sadness = Column(Integer, nullable=False)
    happiness = Column(Integer, nullable=False)

    recent_stressful_event = Column(Boolean, nullable=False, default=False)

    # ---- Sleep ----
    sleep_hours = Column(Float, nullable=False)
    sleep_quality = Column(Integer, nullable=False)

    # ---- Intake ----
    caffeine_recent = Column(Boolean, nullable=False, default=False)
    alcohol_use = Column(SqlEnum(AlcoholUse), nullable=False, default=AlcoholUse.NONE)
    substance_type = Column(SqlEnum(SubstanceType), nullable=False, default=SubstanceType.NONE)
    substance_description = Column(Text, nullable=True)

    # ---- Events ----
    has_positive_event = Column(Boolean, nullable=False, default=False)
    positive_event_intensity = Column(Integer, nullable=True)
    positive_event_description = Column(Text, nullable=True)
    has_negative_event = Column(Boolean, nullable=False, default=False)
    negative_event_intensity = Column(Integer, nullable=True)
    negative_event_description = Column(Text, nullable=True)

    # ---- Context ----
    pre_session_activity = Column(SqlEnum(PreSessionActivity), nullable=False, default=PreSessionActivity.OTHER)
    social_context = Column(SqlEnum(SocialContext), nullable=False, default=SocialContext.OTHER)
    environment_context = Column(SqlEnum(EnvironmentContext), nullable=False, default=EnvironmentContext.MODERATE)
