from datetime import date, datetime, timedelta

from clarity.analytics.ai_context import (
    build_ai_context,
    build_chat_prompt,
    build_daily_insight_prompt,
)
from clarity.schemas.records import GameType

from conftest import make_ema, make_session

TODAY = date(2026, 3, 10)
NOON = datetime(2026, 3, 10, 12)


def test_empty_context():
    context = build_ai_context([], [], "Sam", today=TODAY)

    assert context.performance_summary == "No recent games."
    assert context.mood_summary == "No recent mood data."
    assert context.sleep_summary == "No recent sleep data."
    assert context.recent_activity == []
    assert context.streak == 0
    assert context.total_sessions == 0


def test_context_summaries():
    stressed = make_ema(happiness=3, recent_stressful_event=True, sleep_hours=6.0, sleep_quality=3)
    calm = make_ema(happiness=4, sleep_hours=8.0, sleep_quality=4)
    sessions = [
        make_session(timestamp=NOON - timedelta(days=1), score=71, accuracy=0.75, ema_id=stressed.id),
        make_session(timestamp=NOON, score=80, accuracy=0.9, ema_id=calm.id,
                     game_type=GameType.VISUAL_SEARCH),
        make_session(timestamp=NOON - timedelta(hours=1), score=90, accuracy=0.6, ema_id="missing"),
    ]

    context = build_ai_context(sessions, [stressed, calm], "Sam", today=TODAY)

    assert context.user_name == "Sam"
    assert context.performance_summary == "Avg Score: 80, Avg Accuracy: 75.0%"
    assert context.mood_summary == "Avg Happiness: 3.5/5, Stress Freq: 50%"
    assert context.sleep_summary == "Avg Sleep: 7.0h, Quality: 3.5/5"
    assert context.recent_activity == ["VISUAL_SEARCH: 80 pts", "GO_NO_GO: 90 pts", "GO_NO_GO: 71 pts"]
    assert context.streak == 2
    assert context.total_sessions == 3


def test_context_uses_twenty_most_recent_sessions():
    sessions = [make_session(timestamp=NOON - timedelta(hours=i), score=100 if i < 20 else 0) for i in range(30)]
    context = build_ai_context(sessions, [], "Sam", today=TODAY)
    assert context.performance_summary.startswith("Avg Score: 100,")
    assert len(context.recent_activity) == 5
    assert context.total_sessions == 30


def test_prompts_include_context_and_message():
    context = build_ai_context([make_session(timestamp=NOON, score=64)], [], "Sam", today=TODAY)

    chat = build_chat_prompt("Why was today hard?", context)
    daily = build_daily_insight_prompt(context)

    for prompt in (chat, daily):
        assert "You are Clarity Coach" in prompt
        assert "- Name: Sam" in prompt
        assert "- Current Streak: 1 days" in prompt
        assert "- Recent Activity: GO_NO_GO: 64 pts" in prompt
    assert chat.endswith("USER MESSAGE: Why was today hard?")
    assert "USER MESSAGE" not in daily
