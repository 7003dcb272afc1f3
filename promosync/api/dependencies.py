"""
FastAPI dependencies for subscriber identity, persistence and entitlements
"""
from fastapi import Depends, HTTPException, status, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from promosync.core.clock import SystemClock
from promosync.db.session import get_db
from promosync.services.data_service import DataService
from promosync.services.entitlement_service import EntitlementEngine
from promosync.services.persistence import Persistence, SqlPersistence


def get_clock():
    return SystemClock()


async def get_current_user_id(
    request: Request,
    x_user_id: Optional[str] = Header(None),
) -> str:
    """
    Dependency to get the subscriber id forwarded by the auth gateway

    Raises:
        HTTPException: If no subscriber id is present
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authenticated subscriber"
        )
    request.state.user_id = x_user_id
    return x_user_id


async def get_store(db: AsyncSession = Depends(get_db)) -> Persistence:
    return SqlPersistence(db)


async def get_data_service(
    store: Persistence = Depends(get_store),
    clock=Depends(get_clock),
) -> DataService:
    return DataService(store, clock=clock)


async def get_entitlements(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    store: Persistence = Depends(get_store),
    clock=Depends(get_clock),
) -> EntitlementEngine:
    """
    Dependency to load the subscriber's entitlement engine for this request

    Raises:
        PersistenceUnavailable: If the tier or usage cannot be read
    """
    engine = await EntitlementEngine.load(user_id, store, clock=clock)
    request.state.user_tier = engine.tier_id
    return engine
