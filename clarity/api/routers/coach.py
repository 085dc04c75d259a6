# clarity/api/routers/coach.py
from typing import List
from fastapi import APIRouter, Depends, Query, status

from clarity.api.deps import get_coach_service
from clarity.schemas.analytics import Insight
from clarity.schemas.coach import ChatHistory, ChatMessageCreate, ChatMessageRead
from clarity.services.coach import CoachService

router = APIRouter(prefix="/coach", tags=["AI Coach"])


@router.get("/insights", response_model=List[Insight], summary="Insight cards")
def get_insights(service: CoachService = Depends(get_coach_service)):
    """
    Daily coach card followed by local pattern insights.

    The daily card falls back to a fixed tip when the AI service is not
    reachable, so this endpoint never fails because of it.
    """
    return service.generate_insights()


@router.post(
    "/chat",
    response_model=ChatMessageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message to the coach"
)
def send_chat_message(
    message: ChatMessageCreate,
    service: CoachService = Depends(get_coach_service)
):
    return service.send_chat_message(message.content)


@router.get("/messages", response_model=ChatHistory, summary="Recent chat messages")
def get_messages(
    limit: int = Query(50, ge=1, le=500),
    service: CoachService = Depends(get_coach_service)
):
    return service.get_recent_messages(limit=limit)
