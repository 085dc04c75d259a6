# clarity/api/routers/sessions.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from clarity.api.deps import get_analytics_service
from clarity.schemas.records import GameSession, GameSessionCreate, GameType
from clarity.services.analytics import AnalyticsService

router = APIRouter(prefix="/sessions", tags=["Game Sessions"])


@router.post(
    "",
    response_model=GameSession,
    status_code=status.HTTP_201_CREATED,
    summary="Record a finished game"
)
def create_session(
    session_in: GameSessionCreate,
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Record a completed game session.

    **Baseline flag:** `isBaselineSession` is computed from the linked check-in
    at save time (no recent stress, 6h+ sleep, no alcohol). Sessions without
    a resolvable `emaId` are stored as non-baseline.
    """
    return service.record_session(session_in)


@router.get("", response_model=List[GameSession], summary="List game sessions")
def list_sessions(
    game_type: Optional[GameType] = Query(None, alias="gameType"),
    service: AnalyticsService = Depends(get_analytics_service)
):
    """All sessions oldest first, optionally for a single game."""
    return service.list_sessions(game_type=game_type)
