# schemas/analytics.py
import enum
from datetime import datetime
from typing import Dict, Optional

from clarity.schemas.records import FrozenRecordModel, GameType


# =====================================================================
# ANALYTICS SUMMARY
# =====================================================================

class SleepImpactData(FrozenRecordModel):
    """Good sleep (6h+) vs poor sleep (<6h) score comparison."""
    average_score_with_good_sleep: float = 0.0
    average_score_with_poor_sleep: float = 0.0
    performance_difference: float = 0.0  # (good - poor) / good * 100
    has_enough_data: bool = False


class BaselineComparisonData(FrozenRecordModel):
    """Baseline vs stressed score comparison."""
    baseline_average_score: float = 0.0
    stressed_average_score: float = 0.0
    performance_difference: float = 0.0  # (baseline - stressed) / baseline * 100
    has_enough_data: bool = False


class AnalyticsSummary(FrozenRecordModel):
    average_score_per_game: Dict[GameType, float]
    best_game: Optional[GameType] = None
    sleep_impact: SleepImpactData
    peak_performance_hour: Optional[int] = None  # 0-23
    peak_performance_value: float = 0.0
    baseline_vs_stressed: BaselineComparisonData
    total_sessions: int

    omission_errors_when_tired: int = 0
    commission_errors_when_stressed: int = 0
    fatigue_detected: bool = False
    recent_variability_percentage: float = 0.0


# =====================================================================
# PROFILE
# =====================================================================

class ProfileStats(FrozenRecordModel):
    total_sessions: int = 0
    total_emas: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    average_score: float = 0.0
    favorite_game: Optional[GameType] = None
    first_session_date: Optional[datetime] = None


class DailyActivity(FrozenRecordModel):
    """One bar of the last-7-days chart."""
    label: str
    session_count: int


# =====================================================================
# INSIGHT CARDS
# =====================================================================

class InsightType(str, enum.Enum):
    POSITIVE = "POSITIVE"
    WARNING = "WARNING"
    NEUTRAL = "NEUTRAL"
    TIP = "TIP"
    AI_GENERATED = "AI_GENERATED"


class Insight(FrozenRecordModel):
    title: str
    description: str
    type: InsightType = InsightType.NEUTRAL
    related_metric: Optional[str] = None
    score: float = 0.0  # magnitude, 0.0 - 1.0
