"""
Dashboard metrics endpoints
"""
from fastapi import APIRouter, Depends

from promosync.api.dependencies import get_clock, get_current_user_id, get_data_service, get_store
from promosync.schemas.metrics import MetricsPeriod, MetricsReport
from promosync.schemas.workspace import UserMetricsResponse
from promosync.services.data_service import DataService
from promosync.services.metrics_service import MetricsService
from promosync.services.persistence import Persistence

router = APIRouter()


@router.get("", response_model=MetricsReport)
async def get_metrics(
    period: MetricsPeriod = MetricsPeriod.THIRTY_DAYS,
    user_id: str = Depends(get_current_user_id),
    store: Persistence = Depends(get_store),
    clock=Depends(get_clock),
):
    """
    Get the period-scoped metrics summary

    - period: 7d, 30d, 90d, 1y or all
    - Never fails on storage errors; degraded=true marks a zeroed fallback
    """
    return await MetricsService.get_report(store, user_id, period, clock=clock)


@router.get("/totals", response_model=UserMetricsResponse)
async def get_totals(
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    """
    Get the all-time dashboard totals
    """
    return await data.get_user_metrics(user_id)
