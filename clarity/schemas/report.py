# schemas/report.py
import enum
from datetime import datetime
from typing import Dict, List

from clarity.schemas.records import FrozenRecordModel, GameSession, GameType


class ReportPeriod(str, enum.Enum):
    LAST_7_DAYS = "LAST_7_DAYS"
    LAST_14_DAYS = "LAST_14_DAYS"
    LAST_30_DAYS = "LAST_30_DAYS"

    @property
    def days(self) -> int:
        return _PERIOD_DAYS[self]

    @property
    def label(self) -> str:
        return f"Last {self.days} Days"


_PERIOD_DAYS = {
    ReportPeriod.LAST_7_DAYS: 7,
    ReportPeriod.LAST_14_DAYS: 14,
    ReportPeriod.LAST_30_DAYS: 30,
}


# =====================================================================
# REPORT SECTIONS
# =====================================================================

class PerformanceScoreBreakdown(FrozenRecordModel):
    accuracy_score: int = 0  # 0-50
    streak_score: int = 0  # 0-20
    improvement_score: int = 0  # 0-20
    variety_score: int = 0  # 0-10
    improvement_percent: float = 0.0
    games_played: int = 0


class PerformanceScore(FrozenRecordModel):
    score: int
    breakdown: PerformanceScoreBreakdown


class MoodStats(FrozenRecordModel):
    avg_happiness: float
    avg_anxiety: float
    avg_sadness: float
    avg_anger: float
    interpretation: str


class SleepStats(FrozenRecordModel):
    avg_hours: float
    min_hours: float
    max_hours: float
    avg_quality: float
    impact_on_performance: float  # % accuracy difference, good vs poor sleep
    quality_interpretation: str


class LifestyleNotes(FrozenRecordModel):
    caffeine_usage_percent: float
    alcohol_usage_percent: float
    stressful_events_percent: float


class SleepImpactRow(FrozenRecordModel):
    avg_accuracy: float  # 0-100
    session_count: int


class SleepImpactTable(FrozenRecordModel):
    under_6_hours: SleepImpactRow
    six_to_7_hours: SleepImpactRow
    seven_to_9_hours: SleepImpactRow
    over_9_hours: SleepImpactRow


class CircadianProfile(FrozenRecordModel):
    peak_hour: int
    peak_accuracy: float
    lowest_hour: int
    lowest_accuracy: float
    recommendation: str


class ErrorAnalysis(FrozenRecordModel):
    total_omission_errors: int
    total_commission_errors: int
    omission_when_tired: int  # sleep < 6h
    commission_when_stressed: int  # anxiety or sadness >= 4
    omission_trend: str
    commission_trend: str


class GameStatsSummary(FrozenRecordModel):
    sessions_played: int
    avg_score: float
    avg_accuracy: float
    best_score: int
    improvement_percent: float  # first half vs second half


# =====================================================================
# FULL REPORT
# =====================================================================

class PdfReportData(FrozenRecordModel):
    """Everything the report renderer needs for one period."""
    report_period: ReportPeriod
    report_period_label: str
    generated_at: datetime
    user_name: str = "Guest User"

    performance_score: int
    performance_score_breakdown: PerformanceScoreBreakdown

    mood_stats: MoodStats
    sleep_stats: SleepStats
    lifestyle_notes: LifestyleNotes
    sleep_impact_table: SleepImpactTable
    circadian_profile: CircadianProfile
    error_analysis: ErrorAnalysis

    coach_insights: List[str]
    game_stats: Dict[GameType, GameStatsSummary]
    recent_sessions: List[GameSession]

    total_sessions: int
    total_emas: int
    current_streak: int
    average_accuracy: float
