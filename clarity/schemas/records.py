# schemas/records.py
import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =====================================================================
# ENUMS
# =====================================================================

class AlcoholUse(str, enum.Enum):
    """Alcohol consumption for the day."""
    NONE = "NONE"
    SMALL = "SMALL"  # 1-2 drinks
    MODERATE = "MODERATE"  # 3-4 drinks
    HIGH = "HIGH"  # 5+ drinks


class SubstanceType(str, enum.Enum):
    NONE = "NONE"
    PRESCRIBED = "PRESCRIBED"
    OTC = "OTC"  # over-the-counter
    RECREATIONAL = "RECREATIONAL"


class PreSessionActivity(str, enum.Enum):
    """Activity performed immediately before the session."""
    STUDYING_WORKING = "STUDYING_WORKING"
    PHYSICAL_ACTIVITY = "PHYSICAL_ACTIVITY"
    RELAXING = "RELAXING"
    SOCIAL_MEDIA = "SOCIAL_MEDIA"
    JUST_WOKE_UP = "JUST_WOKE_UP"
    OTHER = "OTHER"


class SocialContext(str, enum.Enum):
    ALONE = "ALONE"
    WITH_FAMILY = "WITH_FAMILY"
    WITH_FRIENDS = "WITH_FRIENDS"
    WITH_COLLEAGUES = "WITH_COLLEAGUES"
    PUBLIC_STRANGERS = "PUBLIC_STRANGERS"
    OTHER = "OTHER"


class EnvironmentContext(str, enum.Enum):
    """Auditory environment."""
    QUIET = "QUIET"
    MODERATE = "MODERATE"
    LOUD = "LOUD"


class GameType(str, enum.Enum):
    """Available cognitive games. Declaration order breaks ties."""
    GO_NO_GO = "GO_NO_GO"
    VISUOSPATIAL_GRID = "VISUOSPATIAL_GRID"
    SIMON_SEQUENCE = "SIMON_SEQUENCE"
    VISUAL_SEARCH = "VISUAL_SEARCH"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")


GAME_TYPE_ORDER = {game_type: index for index, game_type in enumerate(GameType)}


# =====================================================================
# BASE CONFIG
# =====================================================================

class RecordModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FrozenRecordModel(RecordModel):
    model_config = ConfigDict(frozen=True)


# =====================================================================
# EMA (check-in)
# =====================================================================

class EMAFields(RecordModel):
    """Fields shared by stored EMAs and create payloads."""
    # Mood, 1-5 scales
    anger: int = Field(..., ge=1, le=5)
    anxiety: int = Field(..., ge=1, le=5)
    sadness: int = Field(..., ge=1, le=5)
    happiness: int = Field(..., ge=1, le=5)

    recent_stressful_event: bool = Field(
        ..., description="Stressful event within the last 2 hours"
    )

    # Sleep
    sleep_hours: float = Field(..., ge=0.0, description="Hours slept the previous night")
    sleep_quality: int = Field(..., ge=1, le=5)

    # Intake
    caffeine_recent: bool = Field(..., description="Caffeine within the last hour")
    alcohol_use: AlcoholUse = AlcoholUse.NONE
    substance_type: SubstanceType = SubstanceType.NONE
    substance_description: Optional[str] = None

    # Events
    has_positive_event: bool = False
    positive_event_intensity: Optional[int] = Field(None, ge=1, le=5)
    positive_event_description: Optional[str] = None

    has_negative_event: bool = False
    negative_event_intensity: Optional[int] = Field(None, ge=1, le=5)
    negative_event_description: Optional[str] = None

    # Context
    pre_session_activity: PreSessionActivity = PreSessionActivity.OTHER
    social_context: SocialContext = SocialContext.OTHER
    environment_context: EnvironmentContext = EnvironmentContext.MODERATE


class EMACreate(EMAFields):
    """Check-in payload; id and timestamp are assigned when missing."""
    id: Optional[str] = None
    timestamp: Optional[datetime] = None


class EMA(EMAFields, FrozenRecordModel):
    """Ecological Momentary Assessment captured before a training session."""
    id: str
    timestamp: datetime

    @property
    def is_baseline(self) -> bool:
        """Clean state: no recent stress, at least 6h sleep, no alcohol."""
        return (
            not self.recent_stressful_event
            and self.sleep_hours >= 6.0
            and self.alcohol_use == AlcoholUse.NONE
        )


# =====================================================================
# GAME SESSION
# =====================================================================

class GameSessionFields(RecordModel):
    game_type: GameType
    difficulty_level: int = Field(..., gt=0)
    score: int = Field(..., ge=0)
    accuracy: float = Field(..., ge=0.0, le=1.0)
    reaction_time_ms: Optional[int] = Field(None, ge=0)
    reaction_time_variability: Optional[float] = Field(
        None, ge=0.0, description="Std dev of reaction time, fatigue indicator"
    )
    omission_errors: int = Field(0, ge=0, description="Missed targets")
    commission_errors: int = Field(0, ge=0, description="False alarms")
    ema_id: Optional[str] = Field(None, description="EMA taken before this session")


class GameSessionCreate(GameSessionFields):
    """Finished-game payload; the baseline flag is derived on save."""
    id: Optional[str] = None
    timestamp: Optional[datetime] = None


class GameSession(GameSessionFields, FrozenRecordModel):
    """A completed game linked (weakly) to its preceding EMA."""
    id: str
    timestamp: datetime
    is_baseline_session: bool = False
