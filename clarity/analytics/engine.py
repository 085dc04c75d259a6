# analytics/engine.py
"""
Performance analytics over game sessions and their check-ins.

Every function here is pure: it takes already-loaded records and returns a
new value. Sample-size minimums are reported through `has_enough_data` flags
or empty values, never through exceptions.
"""
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from clarity.core.clock import to_local
from clarity.schemas.analytics import AnalyticsSummary, BaselineComparisonData, SleepImpactData
from clarity.schemas.records import EMA, GAME_TYPE_ORDER, GameSession, GameType


# =====================================================================
# THRESHOLDS
# =====================================================================

GOOD_SLEEP_HOURS = 6.0
MIN_SESSIONS_PER_PARTITION = 3
MIN_SESSIONS_FOR_PEAK_HOUR = 5
FATIGUE_WINDOW = 10
HIGH_VARIABILITY_MS = 100.0
FATIGUE_PERCENT_THRESHOLD = 40.0
STRESSED_MOOD_LEVEL = 4


# =====================================================================
# LOOKUP HELPERS
# =====================================================================

def build_ema_map(emas: Sequence[EMA]) -> Dict[str, EMA]:
    return {ema.id: ema for ema in emas}


def linked_ema(session: GameSession, ema_map: Mapping[str, EMA]) -> Optional[EMA]:
    """The session's check-in, or None when unlinked or dangling."""
    if session.ema_id is None:
        return None
    return ema_map.get(session.ema_id)


def sessions_where(
    sessions: Sequence[GameSession],
    ema_map: Mapping[str, EMA],
    predicate: Callable[[EMA], bool],
) -> List[GameSession]:
    """Sessions whose linked EMA resolves and satisfies `predicate`."""
    result = []
    for session in sessions:
        ema = linked_ema(session, ema_map)
        if ema is not None and predicate(ema):
            result.append(session)
    return result


def is_poor_sleep(ema: EMA) -> bool:
    return ema.sleep_hours < GOOD_SLEEP_HOURS


def is_good_sleep(ema: EMA) -> bool:
    return ema.sleep_hours >= GOOD_SLEEP_HOURS


def is_stressed_mood(ema: EMA) -> bool:
    return ema.anxiety >= STRESSED_MOOD_LEVEL or ema.sadness >= STRESSED_MOOD_LEVEL


def average(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for no values."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def _average_score(sessions: Sequence[GameSession]) -> float:
    return average(session.score for session in sessions)


def _percent_drop(reference: float, other: float) -> float:
    if reference == 0:
        return 0.0
    return (reference - other) / reference * 100


# =====================================================================
# PER-GAME AVERAGES
# =====================================================================

def average_score_per_game(sessions: Sequence[GameSession]) -> Dict[GameType, float]:
    """Mean score per game type, keyed in `GameType` declaration order."""
    scores: Dict[GameType, List[int]] = defaultdict(list)
    for session in sessions:
        scores[session.game_type].append(session.score)
    return {
        game_type: average(scores[game_type])
        for game_type in GameType
        if scores.get(game_type)
    }


def best_game(averages: Mapping[GameType, float]) -> Optional[GameType]:
    """Highest average; ties go to the earliest game in `GameType` order."""
    if not averages:
        return None
    return min(averages, key=lambda game_type: (-averages[game_type], GAME_TYPE_ORDER[game_type]))


# =====================================================================
# CONDITION COMPARISONS
# =====================================================================

def calculate_sleep_impact(
    sessions: Sequence[GameSession], ema_map: Mapping[str, EMA]
) -> SleepImpactData:
    """Good sleep (>= 6h) vs poor sleep; needs 3 sessions on each side."""
    good = sessions_where(sessions, ema_map, is_good_sleep)
    poor = sessions_where(sessions, ema_map, is_poor_sleep)

    if len(good) < MIN_SESSIONS_PER_PARTITION or len(poor) < MIN_SESSIONS_PER_PARTITION:
        return SleepImpactData(has_enough_data=False)

    good_avg = _average_score(good)
    poor_avg = _average_score(poor)
    return SleepImpactData(
        average_score_with_good_sleep=good_avg,
        average_score_with_poor_sleep=poor_avg,
        performance_difference=_percent_drop(good_avg, poor_avg),
        has_enough_data=True,
    )


def calculate_baseline_comparison(
    sessions: Sequence[GameSession], ema_map: Mapping[str, EMA]
) -> BaselineComparisonData:
    """Baseline (no negative event, 6h+ sleep) vs stressed (the complement)."""
    baseline = sessions_where(
        sessions, ema_map, lambda ema: not ema.has_negative_event and is_good_sleep(ema)
    )
    stressed = sessions_where(
        sessions, ema_map, lambda ema: ema.has_negative_event or is_poor_sleep(ema)
    )

    if len(baseline) < MIN_SESSIONS_PER_PARTITION or len(stressed) < MIN_SESSIONS_PER_PARTITION:
        return BaselineComparisonData(has_enough_data=False)

    baseline_avg = _average_score(baseline)
    stressed_avg = _average_score(stressed)
    return BaselineComparisonData(
        baseline_average_score=baseline_avg,
        stressed_average_score=stressed_avg,
        performance_difference=_percent_drop(baseline_avg, stressed_avg),
        has_enough_data=True,
    )


# =====================================================================
# TIME OF DAY
# =====================================================================

def group_by_local_hour(sessions: Sequence[GameSession]) -> Dict[int, List[GameSession]]:
    by_hour: Dict[int, List[GameSession]] = defaultdict(list)
    for session in sessions:
        by_hour[to_local(session.timestamp).hour].append(session)
    return dict(by_hour)


def calculate_peak_performance(sessions: Sequence[GameSession]) -> Tuple[Optional[int], float]:
    """
    Hour of day (0-23) with the highest mean score, and that mean.

    Needs at least 5 sessions; otherwise returns (None, 0.0). Ties go to
    the earliest hour.
    """
    if len(sessions) < MIN_SESSIONS_FOR_PEAK_HOUR:
        return None, 0.0

    averages = {hour: _average_score(group) for hour, group in group_by_local_hour(sessions).items()}
    peak_hour = min(averages, key=lambda hour: (-averages[hour], hour))
    return peak_hour, averages[peak_hour]


# =====================================================================
# ERRORS AND FATIGUE
# =====================================================================

def count_omission_errors_when_tired(
    sessions: Sequence[GameSession], ema_map: Mapping[str, EMA]
) -> int:
    return sum(s.omission_errors for s in sessions_where(sessions, ema_map, is_poor_sleep))


def count_commission_errors_when_stressed(
    sessions: Sequence[GameSession], ema_map: Mapping[str, EMA]
) -> int:
    return sum(s.commission_errors for s in sessions_where(sessions, ema_map, is_stressed_mood))


def is_high_variability(session: GameSession) -> bool:
    variability = session.reaction_time_variability
    return variability is not None and variability > HIGH_VARIABILITY_MS


def detect_fatigue(sessions: Sequence[GameSession]) -> Tuple[bool, float]:
    """
    Fatigue from reaction-time variability in the last 10 sessions.

    `sessions` is taken in the caller's order (normally chronological).
    Returns (fatigue_detected, percentage of high-variability sessions).
    """
    if len(sessions) < FATIGUE_WINDOW:
        return False, 0.0

    recent = list(sessions)[-FATIGUE_WINDOW:]
    high = sum(1 for session in recent if is_high_variability(session))
    percentage = high / len(recent) * 100
    return percentage > FATIGUE_PERCENT_THRESHOLD, percentage


# =====================================================================
# SUMMARY
# =====================================================================

def calculate_analytics(
    sessions: Sequence[GameSession], emas: Sequence[EMA]
) -> Optional[AnalyticsSummary]:
    """Full analytics summary, or None when there are no sessions at all."""
    if not sessions:
        return None

    ema_map = build_ema_map(emas)
    averages = average_score_per_game(sessions)
    peak_hour, peak_value = calculate_peak_performance(sessions)
    fatigue_detected, variability_percentage = detect_fatigue(sessions)

    return AnalyticsSummary(
        average_score_per_game=averages,
        best_game=best_game(averages),
        sleep_impact=calculate_sleep_impact(sessions, ema_map),
        peak_performance_hour=peak_hour,
        peak_performance_value=peak_value,
        baseline_vs_stressed=calculate_baseline_comparison(sessions, ema_map),
        total_sessions=len(sessions),
        omission_errors_when_tired=count_omission_errors_when_tired(sessions, ema_map),
        commission_errors_when_stressed=count_commission_errors_when_stressed(sessions, ema_map),
        fatigue_detected=fatigue_detected,
        recent_variability_percentage=variability_percentage,
    )
