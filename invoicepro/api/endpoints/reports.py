import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from invoicepro.api.deps import get_report_service
from invoicepro.schemas.dashboard import ReportSummary
from invoicepro.services.report_service import PERIODS, ReportService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/summary", response_model=ReportSummary)
async def report_summary(
    period: str = Query("monthly", description=f"One of: {', '.join(PERIODS)}"),
    start: Optional[date] = Query(None, description="First day, for period=custom"),
    end: Optional[date] = Query(None, description="Last day (inclusive), for period=custom"),
    service: ReportService = Depends(get_report_service),
):
    if period not in PERIODS:
        raise HTTPException(status_code=400, detail=f"Invalid period '{period}'")
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    try:
        return service.summary(period, start, end)
    except Exception as exc:
        logger.error(f"Error building {period} report: {exc}")
        raise HTTPException(status_code=500, detail="Failed to generate report")


@router.get("/invoices.csv")
async def export_invoices_csv(service: ReportService = Depends(get_report_service)):
    try:
        content = service.invoices_csv()
    except Exception as exc:
        logger.error(f"Error exporting invoices: {exc}")
        raise HTTPException(status_code=500, detail="Failed to export invoices")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="invoices.csv"'},
    )
