# analytics/coaching.py
from typing import List, Optional

from clarity.analytics.scoring import round_half_up
from clarity.schemas.report import CircadianProfile, ErrorAnalysis, MoodStats, SleepStats


MAX_COACH_INSIGHTS = 6

# Sleep
MIN_HEALTHY_SLEEP_HOURS = 6.0
GREAT_SLEEP_HOURS = 7.0
GREAT_SLEEP_QUALITY = 3.5
SLEEP_GAIN_PER_MISSING_HOUR = 3

# Mood
STRESS_MOOD_AVERAGE = 3.5

# Improvement
STRONG_IMPROVEMENT = 10.0
MODERATE_IMPROVEMENT = 5.0
DECLINE_WARNING = -5.0

# Errors
ERROR_PATTERN_MIN = 3


def format_hour(hour: int) -> str:
    """12-hour clock label, wrapping out-of-range hours: 0 -> "12 AM", 13 -> "1 PM"."""
    hour = hour % 24
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


class CoachInsightGenerator:
    """
    Rule table that turns report statistics into short coaching tips.

    Rules run in a fixed order (sleep, peak time, fatigue, stress,
    improvement, weakest game, error patterns) and the first six messages
    produced are kept, in that order.
    """

    def generate(
        self,
        sleep_stats: SleepStats,
        mood_stats: MoodStats,
        circadian_profile: CircadianProfile,
        error_analysis: ErrorAnalysis,
        improvement_percent: float,
        weakest_game: Optional[str],
        fatigue_detected: bool,
    ) -> List[str]:
        rules = [
            self._sleep_insight(sleep_stats),
            self._peak_time_insight(circadian_profile.peak_hour),
            self._fatigue_insight(fatigue_detected),
            self._stress_insight(mood_stats, sleep_stats),
            self._improvement_insight(improvement_percent),
            self._weakest_game_insight(weakest_game),
            self._omission_insight(error_analysis),
            self._commission_insight(error_analysis),
        ]
        return [message for message in rules if message is not None][:MAX_COACH_INSIGHTS]

    # =====================================================================
    # RULES
    # =====================================================================

    @staticmethod
    def _sleep_insight(sleep_stats: SleepStats) -> Optional[str]:
        if sleep_stats.avg_hours < MIN_HEALTHY_SLEEP_HOURS:
            potential = round_half_up((MIN_HEALTHY_SLEEP_HOURS - sleep_stats.avg_hours) * SLEEP_GAIN_PER_MISSING_HOUR)
            return f"💤 Sleep opportunity: Getting 7-8 hours could improve performance by ~{potential}%"
        if sleep_stats.avg_hours >= GREAT_SLEEP_HOURS and sleep_stats.avg_quality >= GREAT_SLEEP_QUALITY:
            return (
                f"✅ Great sleep habits! Your {round_half_up(sleep_stats.avg_hours)}h average "
                "supports optimal cognitive function"
            )
        return None

    @staticmethod
    def _peak_time_insight(peak_hour: int) -> str:
        if 6 <= peak_hour <= 11:
            return (
                "🌅 Morning person detected! Schedule important tasks between "
                f"{format_hour(peak_hour - 1)} - {format_hour(peak_hour + 2)}"
            )
        if 12 <= peak_hour <= 17:
            return (
                f"☀️ Afternoon peak: Your best performance is around {format_hour(peak_hour)}. "
                "Plan challenging work then"
            )
        return (
            f"🌙 Evening performer: You're sharpest around {format_hour(peak_hour)}. "
            "Consider evening training sessions"
        )

    @staticmethod
    def _fatigue_insight(fatigue_detected: bool) -> Optional[str]:
        if fatigue_detected:
            return "⚠️ Fatigue signals detected in recent sessions. Try 15-minute breaks between training"
        return None

    @staticmethod
    def _stress_insight(mood_stats: MoodStats, sleep_stats: SleepStats) -> Optional[str]:
        if mood_stats.avg_anxiety >= STRESS_MOOD_AVERAGE or mood_stats.avg_sadness >= STRESS_MOOD_AVERAGE:
            impact = round_half_up(abs(sleep_stats.impact_on_performance))
            return (
                f"🧘 Elevated stress detected ({impact}% performance impact). "
                "Deep breathing before sessions may help"
            )
        return None

    @staticmethod
    def _improvement_insight(improvement_percent: float) -> Optional[str]:
        if improvement_percent >= STRONG_IMPROVEMENT:
            return (
                f"🚀 Outstanding progress! {round_half_up(improvement_percent)}% improvement "
                "shows your training is working"
            )
        if improvement_percent >= MODERATE_IMPROVEMENT:
            return (
                f"📈 Great momentum! {round_half_up(improvement_percent)}% improvement. "
                "Keep up the consistent practice"
            )
        if improvement_percent < DECLINE_WARNING:
            return "💡 Recent dip in scores. Consider checking sleep quality or taking rest days"
        return None

    @staticmethod
    def _weakest_game_insight(weakest_game: Optional[str]) -> Optional[str]:
        if weakest_game is not None:
            return f"🎯 Growth opportunity: Focus on {weakest_game} to build a more balanced cognitive profile"
        return None

    @staticmethod
    def _omission_insight(error_analysis: ErrorAnalysis) -> Optional[str]:
        if error_analysis.omission_when_tired > ERROR_PATTERN_MIN:
            return "😴 Omission errors increase when tired. Ensure adequate rest before training"
        return None

    @staticmethod
    def _commission_insight(error_analysis: ErrorAnalysis) -> Optional[str]:
        if error_analysis.commission_when_stressed > ERROR_PATTERN_MIN:
            return "⚡ Impulsive errors rise with stress. Slow down and breathe during high-stakes moments"
        return None


coach_insight_generator = CoachInsightGenerator()
