# clarity/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from clarity.core.config import get_db
from clarity.data.record_store import RecordStore, SqlRecordStore
from clarity.services.ai_client import GeminiClient, get_ai_client
from clarity.services.analytics import AnalyticsService
from clarity.services.coach import CoachService


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(db)


def get_analytics_service(store: RecordStore = Depends(get_record_store)) -> AnalyticsService:
    return AnalyticsService(store)


def get_coach_service(
    db: Session = Depends(get_db),
    store: RecordStore = Depends(get_record_store),
    ai_client: GeminiClient = Depends(get_ai_client),
) -> CoachService:
    return CoachService(db, store, ai_client)
