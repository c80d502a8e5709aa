import logging

from fastapi import APIRouter, Depends, HTTPException

from invoicepro.api.deps import get_dashboard_service
from invoicepro.schemas.dashboard import DashboardMetrics
from invoicepro.services.dashboard_service import DashboardService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=DashboardMetrics)
async def get_dashboard(service: DashboardService = Depends(get_dashboard_service)):
    """Sales, pending payments, active products, recent invoices and top products, computed on demand."""
    try:
        return service.get_metrics()
    except Exception as exc:
        logger.error(f"Error computing dashboard metrics: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data")
