"""
Contract endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from promosync.api.dependencies import get_current_user_id, get_data_service, get_entitlements
from promosync.schemas.workspace import ContractCreate, ContractResponse, ContractStatusUpdate
from promosync.services.data_service import DataService
from promosync.services.entitlement_service import EntitlementEngine
from promosync.services.paywall_service import run_gated

router = APIRouter()


@router.get("", response_model=List[ContractResponse])
async def list_contracts(
    active_only: bool = False,
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    """
    List contracts, newest first
    """
    if active_only:
        return await data.get_active_contracts(user_id)
    return await data.get_contracts(user_id)


@router.post("", response_model=ContractResponse, status_code=201)
async def create_contract(
    contract: ContractCreate,
    engine: EntitlementEngine = Depends(get_entitlements),
    data: DataService = Depends(get_data_service),
):
    """
    Create a contract

    - Counts against the monthly contracts quota
    - Returns 403 once the quota is used up
    """
    return await run_gated(
        engine,
        "contracts",
        lambda: data.create_contract(engine.user_id, contract.model_dump()),
    )


@router.patch("/{contract_id}", response_model=ContractResponse)
async def update_contract_status(
    contract_id: str,
    update: ContractStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    data: DataService = Depends(get_data_service),
):
    """
    Move a contract to a new status
    """
    contract = await data.get_contract(contract_id)
    if contract is None or contract["user_id"] != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contract not found"
        )
    return await data.update_contract_status(contract_id, update.status)
