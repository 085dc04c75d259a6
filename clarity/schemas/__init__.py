# clarity/schemas/__init__.py

from .records import (
    AlcoholUse,
    SubstanceType,
    PreSessionActivity,
    SocialContext,
    EnvironmentContext,
    GameType,
    EMA,
    EMACreate,
    GameSession,
    GameSessionCreate,
)
from .analytics import (
    SleepImpactData,
    BaselineComparisonData,
    AnalyticsSummary,
    ProfileStats,
    DailyActivity,
    Insight,
    InsightType,
)
from .report import (
    ReportPeriod,
    PerformanceScore,
    PerformanceScoreBreakdown,
    MoodStats,
    SleepStats,
    LifestyleNotes,
    SleepImpactRow,
    SleepImpactTable,
    CircadianProfile,
    ErrorAnalysis,
    GameStatsSummary,
    PdfReportData,
)
from .coach import AiCoachContext, ChatMessageCreate, ChatMessageRead, ChatHistory
from .export import DataExport, ImportResult, parse_export


__all__ = [
    # Records
    "AlcoholUse", "SubstanceType", "PreSessionActivity", "SocialContext",
    "EnvironmentContext", "GameType", "EMA", "EMACreate", "GameSession",
    "GameSessionCreate",

    # Analytics
    "SleepImpactData", "BaselineComparisonData", "AnalyticsSummary",
    "ProfileStats", "DailyActivity", "Insight", "InsightType",

    # Report
    "ReportPeriod", "PerformanceScore", "PerformanceScoreBreakdown", "MoodStats",
    "SleepStats", "LifestyleNotes", "SleepImpactRow", "SleepImpactTable",
    "CircadianProfile", "ErrorAnalysis", "GameStatsSummary", "PdfReportData",

    # Coach
    "AiCoachContext", "ChatMessageCreate", "ChatMessageRead", "ChatHistory",

    # Export
    "DataExport", "ImportResult", "parse_export",
]
