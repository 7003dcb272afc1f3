"""
Profile endpoints
"""
from fastapi import APIRouter, Depends

from promosync.api.dependencies import get_current_user_id, get_data_service
from promosync.schemas.workspace import ProfileResponse, ProfileUpdate
from promosync.services.data_service import DataService

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    """
    Get the subscriber's profile; missing profiles read as an empty Free profile
    """
    profile = await data.get_profile(user_id)
    return profile or ProfileResponse(id=user_id)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    update: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    return await data.create_or_update_profile(user_id, update.model_dump(exclude_unset=True))
