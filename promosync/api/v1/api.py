"""
API v1 router aggregation
"""
from fastapi import APIRouter

from promosync.api.v1.endpoints import (
    entitlements,
    metrics,
    contracts,
    media_kits,
    pitches,
    applications,
    rates,
    profile,
)

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(entitlements.router, prefix="/entitlements", tags=["entitlements"])
api_router.include_router(metrics.router, prefix="/metrics", tags=["metrics"])
api_router.include_router(contracts.router, prefix="/contracts", tags=["contracts"])
api_router.include_router(media_kits.router, prefix="/media-kits", tags=["media kits"])
api_router.include_router(pitches.router, prefix="/pitches", tags=["pitches"])
api_router.include_router(applications.router, prefix="/applications", tags=["applications"])
api_router.include_router(rates.router, prefix="/rates", tags=["rates"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
