"""
Media kit endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from promosync.api.dependencies import get_current_user_id, get_data_service, get_entitlements
from promosync.schemas.workspace import MediaKitCreate, MediaKitResponse
from promosync.services.data_service import DataService
from promosync.services.entitlement_service import EntitlementEngine
from promosync.core.exceptions import FeatureLocked
from promosync.services.paywall_service import run_gated, upgrade_message

router = APIRouter()

BASIC_TEMPLATES = {"modern", "minimal"}


def require_template(engine: EntitlementEngine, template: str) -> None:
    """
    Raises:
        FeatureLocked: If the template is premium and the plan only has basic ones
    """
    tier_templates = engine.current_tier().features["mediaKit"].options.get("templates")
    if template not in BASIC_TEMPLATES and tier_templates != "all":
        raise FeatureLocked("mediaKit", "templates", upgrade_message("mediaKit", "templates"))


async def get_owned_kit(kit_id: str, user_id: str, data: DataService):
    kits = await data.get_media_kits(user_id)
    for kit in kits:
        if kit["id"] == kit_id:
            return kit
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Media kit not found"
    )


@router.get("", response_model=List[MediaKitResponse])
async def list_media_kits(
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    return await data.get_media_kits(user_id)


@router.post("", response_model=MediaKitResponse, status_code=201)
async def create_media_kit(
    kit: MediaKitCreate,
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    Create a media kit

    - Premium templates need a plan with all templates
    - Counts against the monthly media kit quota
    """
    require_template(engine, kit.template)

    payload = {**kit.data, "name": kit.name, "template": kit.template}
    return await run_gated(engine, "mediaKit", lambda: data.save_media_kit(engine.user_id, payload))


@router.put("/{kit_id}", response_model=MediaKitResponse)
async def update_media_kit(
    kit_id: str,
    kit: MediaKitCreate,
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    Edit a media kit; does not count against the quota
    """
    await get_owned_kit(kit_id, engine.user_id, data)
    require_template(engine, kit.template)

    payload = {**kit.data, "name": kit.name, "template": kit.template}
    return await data.update_media_kit(kit_id, payload)


@router.delete("/{kit_id}", status_code=204)
async def delete_media_kit(
    kit_id: str,
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    await get_owned_kit(kit_id, user_id, data)
    await data.delete_media_kit(kit_id)
