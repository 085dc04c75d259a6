# clarity/api/routers/export.py
from fastapi import APIRouter, Depends, Request, Response

from clarity.api.deps import get_analytics_service
from clarity.schemas.export import ImportResult
from clarity.services.analytics import AnalyticsService

router = APIRouter(prefix="/export", tags=["Export"])


@router.get("", summary="Export all records as JSON")
def export_data(service: AnalyticsService = Depends(get_analytics_service)):
    """
    Pretty-printed JSON file: `{"emas": [...], "sessions": [...], "exportTimestamp": "..."}`.
    """
    export = service.export_data()
    filename = f"clarity_export_{export.export_timestamp:%Y%m%d_%H%M%S}.json"
    return Response(
        content=export.to_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResult, summary="Import an export file")
async def import_data(
    request: Request,
    service: AnalyticsService = Depends(get_analytics_service)
):
    """
    Append the records of an export file. Ids already stored are skipped.
    A malformed file returns 422.
    """
    body = await request.body()
    return service.import_data(body.decode("utf-8", errors="replace"))
