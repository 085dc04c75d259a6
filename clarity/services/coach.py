# services/coach.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from clarity.analytics.ai_context import (
    build_ai_context,
    build_chat_prompt,
    build_daily_insight_prompt,
)
from clarity.analytics.engine import calculate_analytics
from clarity.analytics.insights import (
    analyze_chronotype,
    analyze_paired_factors,
    analyze_sleep,
    analyze_stress,
)
from clarity.core.clock import from_utc_naive, local_now
from clarity.core.config import settings
from clarity.crud.chat_message import crud_chat_message
from clarity.data.record_store import RecordStore, pair_sessions_with_emas
from clarity.models.chat_message import ChatMessage
from clarity.schemas.analytics import Insight, InsightType
from clarity.schemas.coach import AiCoachContext, ChatHistory, ChatMessageRead
from clarity.schemas.records import EMA, GameSession
from clarity.services.ai_client import GeminiClient

logger = logging.getLogger(__name__)


CHAT_FALLBACK = "Sorry, I couldn't connect to the server. Please try again later."
DAILY_TIP_FALLBACK = "Consistency is key. Try to play at the same time each day."
GATHERING_DATA = "Play a few more games and log your sleep to unlock personalized insights."


class CoachService:
    """AI coach: insight cards and the chat conversation."""

    def __init__(
        self,
        db: Session,
        store: RecordStore,
        ai_client: GeminiClient,
        user_name: Optional[str] = None,
    ):
        self.db = db
        self.store = store
        self.ai = ai_client
        self.user_name = user_name or settings.USER_NAME
        self.chat_crud = crud_chat_message

    def _load_records(self) -> Tuple[List[GameSession], List[EMA]]:
        return self.store.all_sessions(), self.store.all_emas()

    def _context(self, sessions: List[GameSession], emas: List[EMA]) -> AiCoachContext:
        return build_ai_context(sessions, emas, self.user_name)

    @staticmethod
    def _to_read(row: ChatMessage) -> ChatMessageRead:
        return ChatMessageRead(
            id=row.id,
            content=row.content,
            timestamp=from_utc_naive(row.timestamp),
            is_user=row.is_user,
            is_error=row.is_error,
        )

    # =====================================================================
    # INSIGHTS
    # =====================================================================

    def _daily_card(self, context: AiCoachContext) -> Insight:
        result = self.ai.generate_text_or_fallback(build_daily_insight_prompt(context), DAILY_TIP_FALLBACK)
        if result.ok:
            return Insight(
                title="Daily Coach Wisdom",
                description=result.text,
                type=InsightType.AI_GENERATED,
                score=1.0,
            )
        return Insight(
            title="Daily Tip",
            description=result.text,
            type=InsightType.TIP,
            score=0.5,
        )

    def _pattern_insights(self, sessions: List[GameSession], emas: List[EMA]) -> List[Insight]:
        insights: List[Insight] = []

        summary = calculate_analytics(sessions, emas)
        if summary is not None:
            for insight in (
                analyze_sleep(summary.sleep_impact),
                analyze_chronotype(summary.peak_performance_hour),
                analyze_stress(summary.baseline_vs_stressed),
            ):
                if insight is not None:
                    insights.append(insight)

        pairs = [(session, ema) for session, ema in pair_sessions_with_emas(sessions, emas) if ema is not None]
        insights.extend(analyze_paired_factors(pairs))
        return insights

    def generate_insights(self) -> List[Insight]:
        """
        Daily card first (AI wisdom or the fixed tip), then local pattern
        insights, or a "Gathering Data" card when there are none yet.
        """
        sessions, emas = self._load_records()
        insights = [self._daily_card(self._context(sessions, emas))]

        patterns = self._pattern_insights(sessions, emas)
        if patterns:
            insights.extend(patterns)
        else:
            insights.append(Insight(
                title="Gathering Data",
                description=GATHERING_DATA,
                type=InsightType.NEUTRAL,
            ))
        return insights

    # =====================================================================
    # CHAT
    # =====================================================================

    def send_chat_message(self, content: str) -> ChatMessageRead:
        """
        Store the user's message, ask the coach and store its reply.

        Returns:
            The coach reply; `is_error` is set when the fallback text was used
        """
        self.chat_crud.create(self.db, content=content, is_user=True, timestamp=local_now())

        sessions, emas = self._load_records()
        prompt = build_chat_prompt(content, self._context(sessions, emas))
        result = self.ai.generate_text_or_fallback(prompt, CHAT_FALLBACK)

        reply = self.chat_crud.create(
            self.db,
            content=result.text,
            is_user=False,
            timestamp=local_now(),
            is_error=not result.ok,
        )
        logger.info("Stored coach reply %s (fallback=%s)", reply.id, not result.ok)
        return self._to_read(reply)

    def get_recent_messages(self, limit: int = 50) -> ChatHistory:
        rows = self.chat_crud.get_recent(self.db, limit=limit)
        return ChatHistory(
            messages=[self._to_read(row) for row in rows],
            total=self.chat_crud.count(self.db),
            limit=limit,
        )
