# clarity/api/routers/analytics.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from clarity.api.deps import get_analytics_service
from clarity.schemas.analytics import AnalyticsSummary, DailyActivity, ProfileStats
from clarity.schemas.report import PdfReportData, PerformanceScore, ReportPeriod
from clarity.services.analytics import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get(
    "/summary",
    response_model=Optional[AnalyticsSummary],
    summary="Analytics over all sessions"
)
def get_summary(service: AnalyticsService = Depends(get_analytics_service)):
    """
    Per-game averages, sleep impact, peak hour, baseline vs stressed,
    error counts and fatigue. Returns `null` when no session exists.
    """
    return service.get_summary()


@router.get("/profile", response_model=ProfileStats, summary="Profile totals and streaks")
def get_profile(service: AnalyticsService = Depends(get_analytics_service)):
    return service.get_profile()


@router.get("/weekly", response_model=List[DailyActivity], summary="Sessions per day, last 7 days")
def get_weekly_activity(service: AnalyticsService = Depends(get_analytics_service)):
    return service.get_weekly_activity()


@router.get("/report", response_model=PdfReportData, summary="Report data for a period")
def get_report(
    period: ReportPeriod = Query(ReportPeriod.LAST_7_DAYS),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return service.get_report(period)


@router.get("/score", response_model=PerformanceScore, summary="Performance score for a period")
def get_performance_score(
    period: ReportPeriod = Query(ReportPeriod.LAST_7_DAYS),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return service.get_performance_score(period)
