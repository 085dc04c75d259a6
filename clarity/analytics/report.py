# analytics/report.py
import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from clarity.analytics.coaching import coach_insight_generator
from clarity.analytics.engine import (
    FATIGUE_PERCENT_THRESHOLD,
    FATIGUE_WINDOW,
    average,
    build_ema_map,
    group_by_local_hour,
    is_good_sleep,
    is_high_variability,
    is_poor_sleep,
    is_stressed_mood,
    sessions_where,
)
from clarity.analytics.scoring import performance_score_calculator, split_improvement_percent
from clarity.analytics.streaks import calculate_streaks
from clarity.core.clock import local_now, local_today, to_local
from clarity.schemas.records import EMA, GAME_TYPE_ORDER, AlcoholUse, GameSession, GameType
from clarity.schemas.report import (
    CircadianProfile,
    ErrorAnalysis,
    GameStatsSummary,
    LifestyleNotes,
    MoodStats,
    PdfReportData,
    ReportPeriod,
    SleepImpactRow,
    SleepImpactTable,
    SleepStats,
)

logger = logging.getLogger(__name__)

RECENT_SESSIONS_IN_REPORT = 20
MIN_SESSIONS_FOR_CIRCADIAN = 5

DEFAULT_PEAK_HOUR = 9
DEFAULT_LOWEST_HOUR = 15


# =====================================================================
# MOOD, SLEEP AND LIFESTYLE
# =====================================================================

def calculate_mood_stats(emas: Sequence[EMA]) -> MoodStats:
    if not emas:
        return MoodStats(
            avg_happiness=0.0, avg_anxiety=0.0, avg_sadness=0.0, avg_anger=0.0,
            interpretation="No mood data available",
        )

    avg_happiness = average(e.happiness for e in emas)
    avg_anxiety = average(e.anxiety for e in emas)
    avg_sadness = average(e.sadness for e in emas)
    avg_anger = average(e.anger for e in emas)

    if avg_happiness >= 4 and avg_anxiety < 2.5:
        interpretation = "Generally positive mood 😊"
    elif avg_anxiety >= 3.5 or avg_sadness >= 3.5:
        interpretation = "Elevated stress indicators detected"
    elif avg_happiness >= 3:
        interpretation = "Stable neutral mood"
    else:
        interpretation = "Mixed emotional patterns"

    return MoodStats(
        avg_happiness=avg_happiness,
        avg_anxiety=avg_anxiety,
        avg_sadness=avg_sadness,
        avg_anger=avg_anger,
        interpretation=interpretation,
    )


def _sleep_quality_label(avg_quality: float) -> str:
    if avg_quality >= 4.0:
        return "Excellent sleep quality"
    if avg_quality >= 3.0:
        return "Good sleep quality"
    if avg_quality >= 2.0:
        return "Fair sleep quality"
    return "Poor sleep quality - consider improvements"


def calculate_sleep_stats(
    emas: Sequence[EMA],
    sessions: Sequence[GameSession],
    ema_map: Mapping[str, EMA],
) -> SleepStats:
    """
    Sleep averages over the period's check-ins.

    `impact_on_performance` compares mean accuracy of sessions after good
    sleep (>= 6h) with sessions after poor sleep, as a percentage of the
    good-sleep accuracy. Any non-empty pair of groups counts; otherwise 0.
    """
    if not emas:
        return SleepStats(
            avg_hours=0.0, min_hours=0.0, max_hours=0.0, avg_quality=0.0,
            impact_on_performance=0.0, quality_interpretation="No sleep data",
        )

    hours = [e.sleep_hours for e in emas]
    avg_quality = average(e.sleep_quality for e in emas)

    good = sessions_where(sessions, ema_map, is_good_sleep)
    poor = sessions_where(sessions, ema_map, is_poor_sleep)
    impact = 0.0
    if good and poor:
        good_avg = average(s.accuracy for s in good)
        poor_avg = average(s.accuracy for s in poor)
        if good_avg > 0:
            impact = (good_avg - poor_avg) / good_avg * 100

    return SleepStats(
        avg_hours=average(hours),
        min_hours=min(hours),
        max_hours=max(hours),
        avg_quality=avg_quality,
        impact_on_performance=impact,
        quality_interpretation=_sleep_quality_label(avg_quality),
    )


def _percent_of(count: int, total: int) -> float:
    return count / total * 100 if total else 0.0


def calculate_lifestyle_notes(emas: Sequence[EMA]) -> LifestyleNotes:
    total = len(emas)
    return LifestyleNotes(
        caffeine_usage_percent=_percent_of(sum(1 for e in emas if e.caffeine_recent), total),
        alcohol_usage_percent=_percent_of(sum(1 for e in emas if e.alcohol_use != AlcoholUse.NONE), total),
        stressful_events_percent=_percent_of(sum(1 for e in emas if e.has_negative_event), total),
    )


def build_sleep_impact_table(
    sessions: Sequence[GameSession], ema_map: Mapping[str, EMA]
) -> SleepImpactTable:
    """Mean accuracy (0-100) per sleep-hours bucket of the linked check-in."""

    def row(low: float, high: float) -> SleepImpactRow:
        bucket = sessions_where(sessions, ema_map, lambda ema: low <= ema.sleep_hours < high)
        return SleepImpactRow(
            avg_accuracy=average(s.accuracy for s in bucket) * 100,
            session_count=len(bucket),
        )

    return SleepImpactTable(
        under_6_hours=row(0.0, 6.0),
        six_to_7_hours=row(6.0, 7.0),
        seven_to_9_hours=row(7.0, 9.0),
        over_9_hours=row(9.0, 24.0),
    )


# =====================================================================
# TIME OF DAY AND ERRORS
# =====================================================================

def _circadian_recommendation(peak_hour: int) -> str:
    if 6 <= peak_hour <= 11:
        return f"Schedule training between {peak_hour - 1}:00 - {peak_hour + 2}:00 AM"
    if 12 <= peak_hour <= 17:
        return f"Afternoon training around {peak_hour}:00 works best for you"
    return f"Evening sessions around {peak_hour}:00 suit your rhythm"


def build_circadian_profile(sessions: Sequence[GameSession]) -> CircadianProfile:
    """
    Best and worst local hour by mean accuracy.

    Fewer than 5 sessions yields a fixed 9 AM / 3 PM placeholder. Ties on
    either end go to the earliest hour.
    """
    if len(sessions) < MIN_SESSIONS_FOR_CIRCADIAN:
        return CircadianProfile(
            peak_hour=DEFAULT_PEAK_HOUR,
            peak_accuracy=0.0,
            lowest_hour=DEFAULT_LOWEST_HOUR,
            lowest_accuracy=0.0,
            recommendation="Not enough data for circadian analysis",
        )

    by_hour = {
        hour: average(s.accuracy for s in group)
        for hour, group in group_by_local_hour(sessions).items()
    }
    peak_hour = min(by_hour, key=lambda hour: (-by_hour[hour], hour))
    lowest_hour = min(by_hour, key=lambda hour: (by_hour[hour], hour))

    return CircadianProfile(
        peak_hour=peak_hour,
        peak_accuracy=by_hour[peak_hour] * 100,
        lowest_hour=lowest_hour,
        lowest_accuracy=by_hour[lowest_hour] * 100,
        recommendation=_circadian_recommendation(peak_hour),
    )


def build_error_analysis(
    sessions: Sequence[GameSession], ema_map: Mapping[str, EMA]
) -> ErrorAnalysis:
    total_omission = sum(s.omission_errors for s in sessions)
    total_commission = sum(s.commission_errors for s in sessions)
    omission_when_tired = sum(
        s.omission_errors for s in sessions_where(sessions, ema_map, is_poor_sleep)
    )
    commission_when_stressed = sum(
        s.commission_errors for s in sessions_where(sessions, ema_map, is_stressed_mood)
    )

    # More than a third of all errors of that kind
    if omission_when_tired > total_omission // 3:
        omission_trend = "Increases significantly with poor sleep"
    else:
        omission_trend = "Stable across conditions"
    if commission_when_stressed > total_commission // 3:
        commission_trend = "Increases with stress/anxiety"
    else:
        commission_trend = "Stable across conditions"

    return ErrorAnalysis(
        total_omission_errors=total_omission,
        total_commission_errors=total_commission,
        omission_when_tired=omission_when_tired,
        commission_when_stressed=commission_when_stressed,
        omission_trend=omission_trend,
        commission_trend=commission_trend,
    )


# =====================================================================
# PER-GAME STATS
# =====================================================================

def calculate_game_stats(sessions: Sequence[GameSession]) -> Dict[GameType, GameStatsSummary]:
    """Per-game summary, keyed in `GameType` declaration order."""
    by_game: Dict[GameType, List[GameSession]] = defaultdict(list)
    for session in sessions:
        by_game[session.game_type].append(session)

    stats = {}
    for game_type in GameType:
        played = by_game.get(game_type)
        if not played:
            continue
        stats[game_type] = GameStatsSummary(
            sessions_played=len(played),
            avg_score=average(s.score for s in played),
            avg_accuracy=average(s.accuracy for s in played),
            best_score=max(s.score for s in played),
            improvement_percent=split_improvement_percent(played),
        )
    return stats


def weakest_game(game_stats: Mapping[GameType, GameStatsSummary]) -> Optional[str]:
    """Display name of the game with the lowest mean accuracy."""
    if not game_stats:
        return None
    game_type = min(
        game_stats,
        key=lambda g: (game_stats[g].avg_accuracy, GAME_TYPE_ORDER[g]),
    )
    return game_type.display_name


def detect_recent_fatigue(sessions: Sequence[GameSession]) -> bool:
    """High reaction-time variability in over 40% of the 10 most recent sessions."""
    if len(sessions) < FATIGUE_WINDOW:
        return False
    recent = sorted(sessions, key=lambda s: to_local(s.timestamp), reverse=True)[:FATIGUE_WINDOW]
    high = sum(1 for s in recent if is_high_variability(s))
    return high / FATIGUE_WINDOW * 100 > FATIGUE_PERCENT_THRESHOLD


# =====================================================================
# REPORT
# =====================================================================

class ReportBuilder:
    """Aggregates one reporting period into `PdfReportData`."""

    def build(
        self,
        sessions: Sequence[GameSession],
        emas: Sequence[EMA],
        period: ReportPeriod,
        now: Optional[datetime] = None,
        current_streak: Optional[int] = None,
        user_name: str = "Guest User",
    ) -> PdfReportData:
        """
        Args:
            sessions: All stored sessions; filtered to the period here
            emas: All stored check-ins; the lookup map uses every one of them
                so a session early in the period still resolves its check-in
            period: Reporting window ending at `now`
            now: Report time, defaults to the current local time
            current_streak: Streak to score with; computed from all sessions
                when omitted
            user_name: Shown on the report
        """
        now = to_local(now) if now is not None else local_now()
        cutoff = now - timedelta(days=period.days)

        period_sessions = [s for s in sessions if to_local(s.timestamp) >= cutoff]
        period_emas = [e for e in emas if to_local(e.timestamp) >= cutoff]
        ema_map = build_ema_map(emas)

        if current_streak is None:
            current_streak, _ = calculate_streaks(
                (s.timestamp for s in sessions), today=local_today(now)
            )

        score, breakdown = performance_score_calculator.calculate(period_sessions, current_streak)

        mood_stats = calculate_mood_stats(period_emas)
        sleep_stats = calculate_sleep_stats(period_emas, period_sessions, ema_map)
        circadian_profile = build_circadian_profile(period_sessions)
        error_analysis = build_error_analysis(period_sessions, ema_map)
        game_stats = calculate_game_stats(period_sessions)

        coach_insights = coach_insight_generator.generate(
            sleep_stats=sleep_stats,
            mood_stats=mood_stats,
            circadian_profile=circadian_profile,
            error_analysis=error_analysis,
            improvement_percent=breakdown.improvement_percent,
            weakest_game=weakest_game(game_stats),
            fatigue_detected=detect_recent_fatigue(period_sessions),
        )

        recent_sessions = sorted(
            period_sessions, key=lambda s: to_local(s.timestamp), reverse=True
        )[:RECENT_SESSIONS_IN_REPORT]

        logger.info(
            "Built %s report: %d sessions, %d check-ins, score %d",
            period.value, len(period_sessions), len(period_emas), score,
        )

        return PdfReportData(
            report_period=period,
            report_period_label=period.label,
            generated_at=now,
            user_name=user_name,
            performance_score=score,
            performance_score_breakdown=breakdown,
            mood_stats=mood_stats,
            sleep_stats=sleep_stats,
            lifestyle_notes=calculate_lifestyle_notes(period_emas),
            sleep_impact_table=build_sleep_impact_table(period_sessions, ema_map),
            circadian_profile=circadian_profile,
            error_analysis=error_analysis,
            coach_insights=coach_insights,
            game_stats=game_stats,
            recent_sessions=recent_sessions,
            total_sessions=len(period_sessions),
            total_emas=len(period_emas),
            current_streak=current_streak,
            average_accuracy=average(s.accuracy for s in period_sessions),
        )


report_builder = ReportBuilder()
