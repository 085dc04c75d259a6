# analytics/insights.py
"""
Pattern insight cards for the insights screen.

Each analyzer takes already-computed statistics (or session/EMA pairs) and
returns one `Insight`, or None when the data shows nothing worth saying.
"""
from typing import Callable, List, Optional, Sequence, Tuple

from clarity.analytics.coaching import format_hour
from clarity.analytics.engine import average, is_poor_sleep
from clarity.analytics.scoring import round_half_up
from clarity.schemas.analytics import (
    BaselineComparisonData,
    Insight,
    InsightType,
    SleepImpactData,
)
from clarity.schemas.records import EMA, GameSession


SessionPair = Tuple[GameSession, EMA]

MIN_PAIRS_PER_GROUP = 2
FACTOR_GAP_PERCENT = 10.0
CAFFEINE_SPEEDUP_PERCENT = 5.0


# =====================================================================
# SUMMARY-BASED ANALYZERS
# =====================================================================

def analyze_sleep(data: SleepImpactData) -> Optional[Insight]:
    if not data.has_enough_data:
        return None

    impact = data.performance_difference
    if impact > 5.0:
        return Insight(
            title="Sleep Power",
            description=(
                f"You perform ~{round_half_up(impact)}% better when well-rested (7h+). "
                "Sleep is your secret weapon."
            ),
            type=InsightType.POSITIVE,
            related_metric="Sleep",
            score=impact / 100.0,
        )
    if impact < -5.0:
        return None
    return Insight(
        title="Sleep Consistency",
        description="Your performance is stable regardless of sleep duration. Focus on sleep quality.",
        type=InsightType.NEUTRAL,
        related_metric="Sleep",
    )


def analyze_chronotype(peak_hour: Optional[int]) -> Optional[Insight]:
    if peak_hour is None:
        return None

    peak_time = format_hour(peak_hour)
    if 5 <= peak_hour <= 11:
        return Insight(
            title="Morning Lark",
            description=f"Your brain is sharpest around {peak_time}. Tackle complex tasks before lunch.",
            type=InsightType.NEUTRAL,
            related_metric="Time",
        )
    if 12 <= peak_hour <= 17:
        return Insight(
            title="Afternoon Peak",
            description=f"You consistently score highest around {peak_time}. Good time for training.",
            type=InsightType.NEUTRAL,
            related_metric="Time",
        )
    return Insight(
        title="Night Owl",
        description=(
            f"You truly shine in the evening ({peak_time}). "
            "Don't force early starts if you can avoid them."
        ),
        type=InsightType.NEUTRAL,
        related_metric="Time",
    )


def analyze_stress(data: BaselineComparisonData) -> Optional[Insight]:
    """Positive difference means stress hurts (baseline beats stressed)."""
    if not data.has_enough_data:
        return None

    impact = data.performance_difference
    if impact > 10.0:
        return Insight(
            title="Stress Sensitive",
            description=(
                f"High stress drops your accuracy by ~{round_half_up(impact)}%. "
                "Consider 5m box breathing before sessions."
            ),
            type=InsightType.WARNING,
            related_metric="Stress",
            score=impact / 100.0,
        )
    if impact < -5.0:
        return Insight(
            title="Pressure Performer",
            description="Surprisingly, you perform better under stress! Use this adrenaline for challenges.",
            type=InsightType.POSITIVE,
            related_metric="Stress",
        )
    return None


# =====================================================================
# PAIRED-SESSION ANALYZERS
# =====================================================================

def analyze_factor(
    pairs: Sequence[SessionPair],
    factor_name: str,
    is_bad: Callable[[EMA], bool],
    good_condition: str,
    bad_condition: str,
) -> Optional[Insight]:
    """
    Compare mean score with and without a factor present.

    Needs two sessions on each side. A gap above 10% in favor of the good
    condition is reported as an impact; the reverse as a surprising pattern.
    """
    bad = [session for session, ema in pairs if is_bad(ema)]
    good = [session for session, ema in pairs if not is_bad(ema)]
    if len(bad) < MIN_PAIRS_PER_GROUP or len(good) < MIN_PAIRS_PER_GROUP:
        return None

    good_avg = average(s.score for s in good)
    bad_avg = average(s.score for s in bad)
    if good_avg == 0:
        return None

    diff_percent = (good_avg - bad_avg) / good_avg * 100
    if diff_percent > FACTOR_GAP_PERCENT:
        return Insight(
            title=f"{factor_name} Impacts Performance",
            description=(
                f"You perform {int(diff_percent)}% better when you are {good_condition} "
                f"compared to when you are {bad_condition}."
            ),
            type=InsightType.WARNING,
            related_metric=factor_name,
            score=0.85,
        )
    if diff_percent < -FACTOR_GAP_PERCENT:
        return Insight(
            title=f"Surprising {factor_name} Pattern",
            description=(
                f"Interestingly, you performed {int(-diff_percent)}% better when {bad_condition}. "
                "This might be due to hyper-focus or other factors."
            ),
            type=InsightType.NEUTRAL,
            related_metric=factor_name,
            score=0.7,
        )
    return None


def analyze_caffeine(pairs: Sequence[SessionPair]) -> Optional[Insight]:
    """Reaction-time speedup after caffeine; sessions without a reaction time are ignored."""
    caffeinated = [session for session, ema in pairs if ema.caffeine_recent]
    plain = [session for session, ema in pairs if not ema.caffeine_recent]
    if len(caffeinated) < MIN_PAIRS_PER_GROUP or len(plain) < MIN_PAIRS_PER_GROUP:
        return None

    caffeinated_rt = [s.reaction_time_ms for s in caffeinated if s.reaction_time_ms is not None]
    plain_rt = [s.reaction_time_ms for s in plain if s.reaction_time_ms is not None]
    if not caffeinated_rt or not plain_rt:
        return None

    plain_avg = average(plain_rt)
    if plain_avg == 0:
        return None

    percent_faster = (plain_avg - average(caffeinated_rt)) / plain_avg * 100
    if percent_faster > CAFFEINE_SPEEDUP_PERCENT:
        return Insight(
            title="Caffeine Boost",
            description=(
                "Caffeine seems to work! Your reaction times are "
                f"{percent_faster:.1f}% faster after consuming caffeine."
            ),
            type=InsightType.POSITIVE,
            related_metric="Caffeine",
            score=0.9,
        )
    return None


def is_stressed_state(ema: EMA) -> bool:
    return ema.anxiety >= 4 or ema.recent_stressful_event


def analyze_paired_factors(pairs: Sequence[SessionPair]) -> List[Insight]:
    """Sleep, stress and caffeine comparisons over sessions with a resolved check-in."""
    candidates = [
        analyze_factor(
            pairs, "Sleep", is_poor_sleep,
            good_condition="rested (7+ hours)",
            bad_condition="sleep deprived (<6 hours)",
        ),
        analyze_factor(
            pairs, "Stress", is_stressed_state,
            good_condition="relaxed",
            bad_condition="stressed",
        ),
        analyze_caffeine(pairs),
    ]
    return [insight for insight in candidates if insight is not None]
