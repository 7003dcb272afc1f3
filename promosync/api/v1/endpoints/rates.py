"""
Rate calculator endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from promosync.api.dependencies import get_data_service, get_entitlements
from promosync.schemas.workspace import RateCreate, RateResponse
from promosync.services.data_service import DataService
from promosync.services.entitlement_service import EntitlementEngine
from promosync.services.paywall_service import require_access

router = APIRouter()


@router.get("", response_model=List[RateResponse])
async def list_saved_rates(
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    List the most recent saved rates
    """
    require_access(engine, "rateCalculator", "save")
    return await data.get_saved_rates(engine.user_id)


@router.post("", response_model=RateResponse, status_code=201)
async def save_rate(
    rate: RateCreate,
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    Save a rate calculator result (Starter and Pro)
    """
    require_access(engine, "rateCalculator", "save")
    return await data.save_rate(engine.user_id, rate.model_dump())
