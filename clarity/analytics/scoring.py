# analytics/scoring.py
import math
from typing import Sequence, Tuple

from clarity.analytics.engine import average
from clarity.core.clock import to_local
from clarity.schemas.records import GameSession
from clarity.schemas.report import PerformanceScoreBreakdown


MAX_ACCURACY_POINTS = 50
MAX_STREAK_POINTS = 20
MAX_VARIETY_POINTS = 10
MIN_SESSIONS_FOR_IMPROVEMENT = 4
POINTS_PER_GAME_TYPE = 2.5


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def split_improvement_percent(sessions: Sequence[GameSession]) -> float:
    """
    Score change from the first half to the second half, in percent.

    Sessions are ordered by timestamp and split at len // 2, so the first
    half never holds more than the second. Returns 0.0 when the first half
    is empty or averages zero.
    """
    ordered = sorted(sessions, key=lambda session: to_local(session.timestamp))
    half = len(ordered) // 2
    if half == 0:
        return 0.0

    first_avg = average(s.score for s in ordered[:half])
    second_avg = average(s.score for s in ordered[half:])
    if first_avg == 0:
        return 0.0
    return (second_avg - first_avg) / first_avg * 100


def calculate_improvement_percent(sessions: Sequence[GameSession]) -> float:
    if len(sessions) < MIN_SESSIONS_FOR_IMPROVEMENT:
        return 0.0
    return split_improvement_percent(sessions)


def streak_points(current_streak: int) -> int:
    """0 days -> 0, 7 days -> 10, 14+ days -> 20."""
    if current_streak >= 14:
        points = 20
    elif current_streak >= 7:
        points = 10 + (current_streak - 7) * 10 // 7
    else:
        points = current_streak * 10 // 7
    return clamp(points, 0, MAX_STREAK_POINTS)


def improvement_points(improvement_percent: float) -> int:
    if improvement_percent >= 10.0:
        return 20
    if improvement_percent >= 5.0:
        return 15
    if improvement_percent >= 0.0:
        return 10
    if improvement_percent >= -5.0:
        return 5
    return 0


def variety_points(distinct_games: int) -> int:
    """1 game -> 3 (2.5 rounded up), 2 -> 5, 3 -> 8, 4 -> 10."""
    return round_half_up(min(distinct_games * POINTS_PER_GAME_TYPE, float(MAX_VARIETY_POINTS)))


class PerformanceScoreCalculator:
    """
    Composite 0-100 performance score for a reporting period.

    Weights: accuracy 50, streak 20, improvement 20, game variety 10.
    """

    def calculate(
        self,
        sessions: Sequence[GameSession],
        current_streak: int,
    ) -> Tuple[int, PerformanceScoreBreakdown]:
        """
        Args:
            sessions: Game sessions inside the reporting period
            current_streak: Consecutive-day streak at report time

        Returns:
            (total score, breakdown); an empty period scores 0 everywhere
        """
        if not sessions:
            return 0, PerformanceScoreBreakdown()

        avg_accuracy = average(session.accuracy for session in sessions)
        accuracy_score = round_half_up(avg_accuracy * MAX_ACCURACY_POINTS)

        streak_score = streak_points(current_streak)

        improvement_percent = calculate_improvement_percent(sessions)
        improvement_score = improvement_points(improvement_percent)

        distinct_games = len({session.game_type for session in sessions})
        variety_score = variety_points(distinct_games)

        total = clamp(accuracy_score + streak_score + improvement_score + variety_score, 0, 100)

        return total, PerformanceScoreBreakdown(
            accuracy_score=accuracy_score,
            streak_score=streak_score,
            improvement_score=improvement_score,
            variety_score=variety_score,
            improvement_percent=improvement_percent,
            games_played=distinct_games,
        )


performance_score_calculator = PerformanceScoreCalculator()
