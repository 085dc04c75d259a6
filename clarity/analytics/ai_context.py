# analytics/ai_context.py
from datetime import date
from typing import List, Optional, Sequence

from clarity.analytics.engine import average, build_ema_map, linked_ema
from clarity.analytics.streaks import calculate_streaks
from clarity.core.clock import to_local
from clarity.schemas.coach import AiCoachContext
from clarity.schemas.records import EMA, GameSession


RECENT_SESSIONS_FOR_CONTEXT = 20
RECENT_ACTIVITY_ITEMS = 5


def summarize_performance(sessions: Sequence[GameSession]) -> str:
    if not sessions:
        return "No recent games."
    avg_score = int(average(s.score for s in sessions))
    avg_accuracy = round(average(s.accuracy for s in sessions) * 100, 1)
    return f"Avg Score: {avg_score}, Avg Accuracy: {avg_accuracy}%"


def summarize_mood(emas: Sequence[EMA]) -> str:
    if not emas:
        return "No recent mood data."
    avg_happiness = round(average(e.happiness for e in emas), 1)
    stress_frequency = round(average(1.0 if e.recent_stressful_event else 0.0 for e in emas) * 100)
    return f"Avg Happiness: {avg_happiness}/5, Stress Freq: {stress_frequency}%"


def summarize_sleep(emas: Sequence[EMA]) -> str:
    if not emas:
        return "No recent sleep data."
    avg_sleep = round(average(e.sleep_hours for e in emas), 1)
    avg_quality = round(average(e.sleep_quality for e in emas), 1)
    return f"Avg Sleep: {avg_sleep}h, Quality: {avg_quality}/5"


def build_ai_context(
    sessions: Sequence[GameSession],
    emas: Sequence[EMA],
    user_name: str,
    today: Optional[date] = None,
) -> AiCoachContext:
    """Condense the 20 most recent sessions (and their check-ins) for the coach prompt."""
    ema_map = build_ema_map(emas)
    recent = sorted(sessions, key=lambda s: to_local(s.timestamp), reverse=True)[:RECENT_SESSIONS_FOR_CONTEXT]
    recent_emas = [ema for ema in (linked_ema(s, ema_map) for s in recent) if ema is not None]

    streak, _ = calculate_streaks((s.timestamp for s in sessions), today=today)

    return AiCoachContext(
        user_name=user_name,
        performance_summary=summarize_performance(recent),
        mood_summary=summarize_mood(recent_emas),
        sleep_summary=summarize_sleep(recent_emas),
        recent_activity=[
            f"{s.game_type.value}: {s.score} pts" for s in recent[:RECENT_ACTIVITY_ITEMS]
        ],
        streak=streak,
        total_sessions=len(sessions),
    )


# =====================================================================
# PROMPTS
# =====================================================================

COACH_PERSONA = (
    "You are Clarity Coach, an AI assistant specialized in cognitive performance\n"
    "and mental wellness. You analyze the user's cognitive training data and EMA\n"
    "(Ecological Momentary Assessment) responses to provide personalized insights."
)


def _context_block(context: AiCoachContext) -> str:
    lines: List[str] = [
        "USER CONTEXT:",
        f"- Name: {context.user_name}",
        f"- Recent Performance: {context.performance_summary}",
        f"- Mood Trends: {context.mood_summary}",
        f"- Sleep Patterns: {context.sleep_summary}",
        f"- Current Streak: {context.streak} days",
        f"- Total Sessions: {context.total_sessions}",
        f"- Recent Activity: {', '.join(context.recent_activity)}",
    ]
    return "\n".join(lines)


def build_chat_prompt(message: str, context: AiCoachContext) -> str:
    return (
        f"{COACH_PERSONA}\n\n"
        f"{_context_block(context)}\n\n"
        "Guidelines:\n"
        "- Be encouraging and supportive.\n"
        "- Answer the user's question directly.\n"
        "- Reference their actual data when relevant.\n"
        "- Keep responses concise (under 200 words).\n"
        "- Do not provide medical diagnoses.\n\n"
        f"USER MESSAGE: {message}"
    )


def build_daily_insight_prompt(context: AiCoachContext) -> str:
    return (
        f"{COACH_PERSONA}\n\n"
        f"{_context_block(context)}\n\n"
        "Write one short, actionable tip for today based on this data.\n"
        "- One or two sentences, under 40 words.\n"
        "- No greeting and no medical advice."
    )
