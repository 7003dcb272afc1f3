"""
Marketplace application endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from promosync.api.dependencies import get_current_user_id, get_data_service, get_entitlements
from promosync.schemas.workspace import ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate
from promosync.services.data_service import DataService
from promosync.services.entitlement_service import EntitlementEngine
from promosync.services.paywall_service import run_gated

router = APIRouter()


@router.get("", response_model=List[ApplicationResponse])
async def list_applications(
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    return await data.get_applications(user_id)


@router.post("", response_model=ApplicationResponse, status_code=201)
async def quick_apply(
    application: ApplicationCreate,
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    Quick apply to a brand campaign

    - Free plans have no quick applies
    - Counts against the monthly quick apply quota
    """
    return await run_gated(
        engine,
        "marketplace",
        lambda: data.create_application(engine.user_id, application.model_dump()),
    )


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    """
    Record the brand's answer to an application
    """
    applications = await data.get_applications(user_id)
    if not any(app["id"] == application_id for app in applications):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found"
        )
    return await data.update_application_status(application_id, update.status)
