# clarity/api/routers/emas.py
from typing import List
from fastapi import APIRouter, Depends, status

from clarity.api.deps import get_analytics_service
from clarity.core.clock import local_today
from clarity.schemas.records import EMA, EMACreate
from clarity.services.analytics import AnalyticsService

router = APIRouter(prefix="/emas", tags=["Check-ins"])


# =====================================================================
# CREATE
# =====================================================================

@router.post(
    "",
    response_model=EMA,
    status_code=status.HTTP_201_CREATED,
    summary="Record a check-in (EMA)"
)
def create_ema(
    ema_in: EMACreate,
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Record an Ecological Momentary Assessment taken before a session.

    `id` and `timestamp` are assigned when omitted. A duplicate id returns 409.
    """
    return service.record_ema(ema_in)


# =====================================================================
# READ
# =====================================================================

@router.get("", response_model=List[EMA], summary="List all check-ins")
def list_emas(service: AnalyticsService = Depends(get_analytics_service)):
    """All check-ins, oldest first."""
    return service.list_emas()


@router.get("/latest", response_model=EMA, summary="Most recent check-in")
def get_latest_ema(service: AnalyticsService = Depends(get_analytics_service)):
    return service.get_latest_ema()


@router.get("/check-in-status", summary="Has today's check-in been done?")
def get_check_in_status(service: AnalyticsService = Depends(get_analytics_service)):
    today = local_today()
    return {
        "date": today.isoformat(),
        "completed": service.is_check_in_complete(today),
    }
