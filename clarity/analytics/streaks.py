# analytics/streaks.py
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from clarity.analytics.engine import average
from clarity.core.clock import local_today, to_local
from clarity.schemas.analytics import DailyActivity, ProfileStats
from clarity.schemas.records import EMA, GAME_TYPE_ORDER, GameSession


def session_dates(timestamps: Iterable[datetime]) -> List[date]:
    """Distinct local calendar dates, ascending."""
    return sorted({to_local(ts).date() for ts in timestamps})


def current_streak_from_dates(dates: Sequence[date], today: date) -> int:
    """
    Consecutive days ending at the most recent date.

    The streak is only alive when that date is today or yesterday;
    otherwise it is broken and counts 0.
    """
    if not dates:
        return 0
    if (today - dates[-1]).days not in (0, 1):
        return 0

    streak = 1
    for index in range(len(dates) - 1, 0, -1):
        if (dates[index] - dates[index - 1]).days == 1:
            streak += 1
        else:
            break
    return streak


def longest_streak_from_dates(dates: Sequence[date]) -> int:
    if not dates:
        return 0

    longest = run = 1
    for previous, current in zip(dates, dates[1:]):
        if (current - previous).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def calculate_streaks(
    timestamps: Iterable[datetime], today: Optional[date] = None
) -> Tuple[int, int]:
    """
    Returns:
        (current streak, longest streak) in days
    """
    dates = session_dates(timestamps)
    if not dates:
        return 0, 0
    today = today or local_today()
    return current_streak_from_dates(dates, today), longest_streak_from_dates(dates)


def calculate_profile_stats(
    sessions: Sequence[GameSession],
    emas: Sequence[EMA],
    today: Optional[date] = None,
) -> ProfileStats:
    """Totals, streaks, average score and favorite (most played) game."""
    if not sessions:
        return ProfileStats(total_emas=len(emas))

    counts = Counter(session.game_type for session in sessions)
    favorite = min(counts, key=lambda game_type: (-counts[game_type], GAME_TYPE_ORDER[game_type]))

    current, longest = calculate_streaks((s.timestamp for s in sessions), today=today)

    return ProfileStats(
        total_sessions=len(sessions),
        total_emas=len(emas),
        current_streak=current,
        longest_streak=longest,
        average_score=average(session.score for session in sessions),
        favorite_game=favorite,
        first_session_date=min((s.timestamp for s in sessions), key=to_local),
    )


def last_7_days_activity(
    sessions: Sequence[GameSession], today: Optional[date] = None
) -> List[DailyActivity]:
    """Sessions per day for the last week, oldest first ("MON" ... "Yest", "Today")."""
    today = today or local_today()
    per_day = Counter(to_local(session.timestamp).date() for session in sessions)

    activity = []
    for days_ago in range(6, -1, -1):
        day = today - timedelta(days=days_ago)
        if days_ago == 0:
            label = "Today"
        elif days_ago == 1:
            label = "Yest"
        else:
            label = day.strftime("%A")[:3].upper()
        activity.append(DailyActivity(label=label, session_count=per_day.get(day, 0)))
    return activity
