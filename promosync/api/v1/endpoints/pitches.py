"""
Pitch endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from promosync.api.dependencies import get_current_user_id, get_data_service, get_entitlements
from promosync.schemas.workspace import PitchCreate, PitchResponse
from promosync.services.data_service import DataService
from promosync.services.entitlement_service import EntitlementEngine
from promosync.services.paywall_service import run_gated

router = APIRouter()


@router.get("", response_model=List[PitchResponse])
async def list_pitches(
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    return await data.get_pitches(user_id)


@router.post("", response_model=PitchResponse, status_code=201)
async def create_pitch(
    pitch: PitchCreate,
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    Save a generated pitch; counts against the monthly pitch quota
    """
    return await run_gated(
        engine,
        "pitchGenerator",
        lambda: data.save_pitch(engine.user_id, pitch.model_dump()),
    )
