# services/analytics.py
import logging
import uuid
from datetime import date, datetime, timedelta
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from clarity.analytics.engine import calculate_analytics
from clarity.analytics.report import report_builder
from clarity.analytics.scoring import performance_score_calculator
from clarity.analytics.streaks import (
    calculate_profile_stats,
    calculate_streaks,
    last_7_days_activity,
)
from clarity.core.clock import local_now, local_today, to_local
from clarity.core.config import settings
from clarity.core.exceptions import ConflictError, DatabaseConflictError, NotFoundError, ValidationError
from clarity.data.record_store import RecordStore
from clarity.schemas.analytics import AnalyticsSummary, DailyActivity, ProfileStats
from clarity.schemas.export import DataExport, ImportResult, parse_export
from clarity.schemas.records import EMA, EMACreate, GameSession, GameSessionCreate, GameType
from clarity.schemas.report import PdfReportData, PerformanceScore, ReportPeriod

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Service layer for check-ins, game sessions and everything derived from them.

    Works against any `RecordStore`; the API wires in the SQL store per request.
    """

    def __init__(self, store: RecordStore, user_name: Optional[str] = None):
        self.store = store
        self.user_name = user_name or settings.USER_NAME

    # =====================================================================
    # CREATE OPERATIONS
    # =====================================================================

    def record_ema(self, ema_in: EMACreate, now: Optional[datetime] = None) -> EMA:
        """
        Store a check-in.

        Raises:
            ConflictError: If a record with the same id is already stored
        """
        ema = EMA(
            **ema_in.model_dump(exclude={"id", "timestamp"}),
            id=ema_in.id or str(uuid.uuid4()),
            timestamp=ema_in.timestamp or now or local_now(),
        )
        try:
            stored = self.store.append_ema(ema)
        except DatabaseConflictError as exc:
            raise ConflictError(f"EMA {ema.id} already exists") from exc

        logger.info("Recorded EMA %s (baseline=%s)", stored.id, stored.is_baseline)
        return stored

    def record_session(
        self, session_in: GameSessionCreate, now: Optional[datetime] = None
    ) -> GameSession:
        """
        Store a finished game.

        The baseline flag is a snapshot of the linked check-in at save time;
        an unlinked or dangling link stores False.

        Raises:
            ConflictError: If a record with the same id is already stored
        """
        ema = self.store.get_ema(session_in.ema_id) if session_in.ema_id else None
        if session_in.ema_id and ema is None:
            logger.debug("Session links to unknown EMA %s", session_in.ema_id)

        session = GameSession(
            **session_in.model_dump(exclude={"id", "timestamp"}),
            id=session_in.id or str(uuid.uuid4()),
            timestamp=session_in.timestamp or now or local_now(),
            is_baseline_session=ema.is_baseline if ema is not None else False,
        )
        try:
            stored = self.store.append_session(session)
        except DatabaseConflictError as exc:
            raise ConflictError(f"Game session {session.id} already exists") from exc

        logger.info(
            "Recorded %s session %s: score=%d accuracy=%.2f",
            stored.game_type.value, stored.id, stored.score, stored.accuracy,
        )
        return stored

    # =====================================================================
    # READ OPERATIONS
    # =====================================================================

    def list_emas(self) -> List[EMA]:
        return self.store.all_emas()

    def list_sessions(self, game_type: Optional[GameType] = None) -> List[GameSession]:
        sessions = self.store.all_sessions()
        if game_type is not None:
            sessions = [s for s in sessions if s.game_type == game_type]
        return sessions

    def get_latest_ema(self) -> EMA:
        """
        Raises:
            NotFoundError: If no check-in was recorded yet
        """
        ema = self.store.most_recent_ema()
        if ema is None:
            raise NotFoundError("No check-ins recorded yet")
        return ema

    def is_check_in_complete(self, today: Optional[date] = None) -> bool:
        """True when a check-in exists for today's local date."""
        today = today or local_today()
        return any(to_local(ema.timestamp).date() == today for ema in self.store.all_emas())

    # =====================================================================
    # ANALYTICS
    # =====================================================================

    def get_summary(self) -> Optional[AnalyticsSummary]:
        return calculate_analytics(self.store.all_sessions(), self.store.all_emas())

    def get_profile(self, today: Optional[date] = None) -> ProfileStats:
        return calculate_profile_stats(self.store.all_sessions(), self.store.all_emas(), today=today)

    def get_weekly_activity(self, today: Optional[date] = None) -> List[DailyActivity]:
        return last_7_days_activity(self.store.all_sessions(), today=today)

    def get_report(self, period: ReportPeriod, now: Optional[datetime] = None) -> PdfReportData:
        return report_builder.build(
            self.store.all_sessions(),
            self.store.all_emas(),
            period,
            now=now,
            user_name=self.user_name,
        )

    def get_performance_score(
        self, period: ReportPeriod, now: Optional[datetime] = None
    ) -> PerformanceScore:
        now = to_local(now) if now is not None else local_now()
        cutoff = now - timedelta(days=period.days)

        sessions = self.store.all_sessions()
        current_streak, _ = calculate_streaks((s.timestamp for s in sessions), today=local_today(now))
        in_period = [s for s in sessions if to_local(s.timestamp) >= cutoff]

        score, breakdown = performance_score_calculator.calculate(in_period, current_streak)
        return PerformanceScore(score=score, breakdown=breakdown)

    # =====================================================================
    # EXPORT / IMPORT
    # =====================================================================

    def export_data(self, now: Optional[datetime] = None) -> DataExport:
        export = DataExport(
            emas=self.store.all_emas(),
            sessions=self.store.all_sessions(),
            export_timestamp=now or local_now(),
        )
        logger.info("Exported %d EMAs and %d sessions", len(export.emas), len(export.sessions))
        return export

    def import_data(self, text: str) -> ImportResult:
        """
        Append records from an export file, skipping ids already stored.

        Raises:
            ValidationError: If the file is not a valid export
        """
        try:
            export = parse_export(text)
        except PydanticValidationError as exc:
            raise ValidationError(f"Malformed export file: {exc.error_count()} invalid field(s)") from exc

        known_emas = {ema.id for ema in self.store.all_emas()}
        known_sessions = {session.id for session in self.store.all_sessions()}

        emas_imported = emas_skipped = 0
        for ema in export.emas:
            if ema.id in known_emas:
                emas_skipped += 1
                continue
            self.store.append_ema(ema)
            known_emas.add(ema.id)
            emas_imported += 1

        sessions_imported = sessions_skipped = 0
        for session in export.sessions:
            if session.id in known_sessions:
                sessions_skipped += 1
                continue
            self.store.append_session(session)
            known_sessions.add(session.id)
            sessions_imported += 1

        logger.info(
            "Imported %d EMAs (%d skipped) and %d sessions (%d skipped)",
            emas_imported, emas_skipped, sessions_imported, sessions_skipped,
        )
        return ImportResult(
            emas_imported=emas_imported,
            sessions_imported=sessions_imported,
            emas_skipped=emas_skipped,
            sessions_skipped=sessions_skipped,
        )
