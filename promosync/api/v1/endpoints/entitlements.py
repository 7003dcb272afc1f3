"""
Plan and usage endpoints
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from promosync.api.dependencies import get_entitlements
from promosync.schemas.tier import (
    AccessCheck,
    EntitlementStatus,
    LimitCheck,
    Tier,
    TierUpdate,
    UsageCounters,
)
from promosync.services.entitlement_service import EntitlementEngine
from promosync.services.paywall_service import upgrade_message
from promosync.services.tier_service import list_tiers

router = APIRouter()


@router.get("/tiers", response_model=List[Tier])
async def get_tiers():
    """
    List the plan catalog, lowest tier first
    """
    return list_tiers()


@router.get("/me", response_model=EntitlementStatus)
async def get_my_entitlements(
    engine: EntitlementEngine = Depends(get_entitlements),
):
    """
    Get the subscriber's plan, this month's usage and quota checks
    """
    return EntitlementStatus(
        tier=engine.current_tier(),
        usage=engine.usage(),
        limits=engine.limits(),
    )


@router.get("/access/{feature}", response_model=AccessCheck)
async def check_access(
    feature: str,
    sub: Optional[str] = None,
    engine: EntitlementEngine = Depends(get_entitlements),
):
    """
    Check a capability, e.g. /access/rateCalculator?sub=save

    - Unknown features are reported as not allowed
    - Denials include the upgrade message to show
    """
    allowed = engine.can_access(feature, sub)
    return AccessCheck(
        feature=feature,
        sub_feature=sub,
        allowed=allowed,
        message=None if allowed else upgrade_message(feature, sub),
    )


@router.get("/limits/{feature}", response_model=LimitCheck)
async def check_limit(
    feature: str,
    engine: EntitlementEngine = Depends(get_entitlements),
):
    """
    Check the monthly quota of a metered feature
    """
    return engine.check_limit(feature)


@router.post("/usage/{feature}", response_model=UsageCounters)
async def record_usage(
    feature: str,
    engine: EntitlementEngine = Depends(get_entitlements),
):
    """
    Count one use of a feature performed outside this API
    """
    return await engine.increment_usage(feature)


@router.put("/tier", response_model=Tier)
async def change_tier(
    update: TierUpdate,
    engine: EntitlementEngine = Depends(get_entitlements),
):
    """
    Switch the subscriber's plan

    - Usage for the current month is kept
    - Returns 400 for unknown plans
    """
    return await engine.set_tier(update.tier)
