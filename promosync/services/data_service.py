"""
Workspace data operations: profiles, media kits, rates, pitches, contracts, applications
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid
import logging

from promosync.core.clock import SystemClock
from promosync.core.config import settings
from promosync.models.contract import ContractStatus
from promosync.models.application import ApplicationStatus
from promosync.services.persistence import Persistence, Record

logger = logging.getLogger(__name__)


class DataService:
    """Service for the creator's workspace records"""

    def __init__(self, store: Persistence, clock=None):
        self.store = store
        self.clock = clock or SystemClock()

    def _now(self) -> datetime:
        return self.clock.now()

    async def _insert(self, collection: str, user_id: str, values: Dict[str, Any]) -> Record:
        key = str(uuid.uuid4())
        now = self._now()
        record = {"id": key, "user_id": user_id, "created_at": now, "updated_at": now}
        record.update(values)
        return await self.store.put(collection, key, record)

    async def _update(self, collection: str, key: str, values: Dict[str, Any]) -> Optional[Record]:
        existing = await self.store.get(collection, key)
        if existing is None:
            return None
        return await self.store.put(collection, key, {**values, "updated_at": self._now()})

    # User metrics

    async def get_user_metrics(self, user_id: str) -> Record:
        metrics = await self.store.get("user_metrics", user_id)
        return metrics or {
            "user_id": user_id,
            "total_revenue": 0,
            "active_deals": 0,
            "brand_matches": 0,
            "avg_deal_value": 0,
        }

    async def update_user_metrics(self, user_id: str, metrics: Dict[str, Any]) -> Record:
        return await self.store.put("user_metrics", user_id, {"user_id": user_id, **metrics})

    async def recalculate_metrics(self, user_id: str) -> Record:
        """
        Recompute dashboard totals from the subscriber's contracts

        Revenue and average deal value only count completed contracts.
        """
        contracts = await self.get_contracts(user_id)

        active_deals = sum(1 for c in contracts if c["status"] == ContractStatus.ACTIVE.value)
        completed = [c for c in contracts if c["status"] == ContractStatus.COMPLETED.value]
        total_revenue = sum(float(c.get("deal_value") or 0) for c in completed)
        avg_deal_value = total_revenue / len(completed) if completed else 0

        return await self.update_user_metrics(user_id, {
            "total_revenue": total_revenue,
            "active_deals": active_deals,
            "avg_deal_value": avg_deal_value,
        })

    # Media kits

    async def get_media_kits(self, user_id: str) -> List[Record]:
        return await self.store.query("media_kits", {"user_id": user_id}, order_by="created_at")

    async def save_media_kit(self, user_id: str, kit_data: Dict[str, Any]) -> Record:
        return await self._insert("media_kits", user_id, {
            "name": kit_data["name"],
            "template": kit_data.get("template") or "modern",
            "data": kit_data,
        })

    async def update_media_kit(self, kit_id: str, kit_data: Dict[str, Any]) -> Optional[Record]:
        values = {"name": kit_data["name"], "data": kit_data}
        if kit_data.get("template"):
            values["template"] = kit_data["template"]
        return await self._update("media_kits", kit_id, values)

    async def delete_media_kit(self, kit_id: str) -> bool:
        return await self.store.delete("media_kits", kit_id)

    # Saved rates

    async def get_saved_rates(self, user_id: str) -> List[Record]:
        return await self.store.query(
            "saved_rates",
            {"user_id": user_id},
            order_by="created_at",
            limit=settings.SAVED_RATES_LIMIT,
        )

    async def save_rate(self, user_id: str, rate_data: Dict[str, Any]) -> Record:
        return await self._insert("saved_rates", user_id, {
            "followers": rate_data.get("followers", 0),
            "avg_viewers": rate_data.get("avg_viewers", 0),
            "engagement_rate": rate_data.get("engagement_rate", 0),
            "niche": rate_data.get("niche"),
            "platform": rate_data.get("platform"),
            "calculated_rate": rate_data["calculated_rate"],
        })

    # Pitches

    async def get_pitches(self, user_id: str) -> List[Record]:
        return await self.store.query("pitches", {"user_id": user_id}, order_by="created_at")

    async def save_pitch(self, user_id: str, pitch_data: Dict[str, Any]) -> Record:
        return await self._insert("pitches", user_id, {
            "brand_name": pitch_data["brand_name"],
            "template": pitch_data.get("template"),
            "pitch_text": pitch_data["pitch_text"],
        })

    # Contracts

    async def get_contracts(self, user_id: str) -> List[Record]:
        return await self.store.query("contracts", {"user_id": user_id}, order_by="created_at")

    async def get_contract(self, contract_id: str) -> Optional[Record]:
        return await self.store.get("contracts", contract_id)

    async def get_active_contracts(self, user_id: str) -> List[Record]:
        return await self.store.query(
            "contracts",
            {"user_id": user_id, "status": ContractStatus.ACTIVE.value},
            order_by="created_at",
        )

    async def create_contract(self, user_id: str, contract_data: Dict[str, Any]) -> Record:
        contract = await self._insert("contracts", user_id, {
            "brand_name": contract_data["brand_name"],
            "deal_value": contract_data.get("deal_value") or 0,
            "status": str(contract_data.get("status") or ContractStatus.PENDING),
            "start_date": contract_data.get("start_date"),
            "end_date": contract_data.get("end_date"),
        })
        await self.recalculate_metrics(user_id)
        return contract

    async def update_contract_status(self, contract_id: str, status: str) -> Optional[Record]:
        """
        Move a contract to a new status and refresh the owner's totals

        Completing a contract books its value as revenue.
        """
        existing = await self.store.get("contracts", contract_id)
        if existing is None:
            return None

        status = str(status)
        contract = await self._update("contracts", contract_id, {"status": status})
        if status == ContractStatus.COMPLETED.value and existing["status"] != status:
            await self._insert("revenue", contract["user_id"], {
                "contract_id": contract_id,
                "amount": float(contract.get("deal_value") or 0),
                "description": contract.get("brand_name"),
            })
            logger.info(f"Booked revenue for completed contract {contract_id}")

        await self.recalculate_metrics(contract["user_id"])
        return contract

    # Applications

    async def get_applications(self, user_id: str) -> List[Record]:
        return await self.store.query("applications", {"user_id": user_id}, order_by="created_at")

    async def create_application(self, user_id: str, application_data: Dict[str, Any]) -> Record:
        return await self._insert("applications", user_id, {
            "brand_name": application_data["brand_name"],
            "campaign": application_data.get("campaign"),
            "message": application_data.get("message"),
            "status": str(application_data.get("status") or ApplicationStatus.PENDING),
        })

    async def update_application_status(self, application_id: str, status: str) -> Optional[Record]:
        return await self._update("applications", application_id, {"status": str(status)})

    # Profiles

    async def get_profile(self, user_id: str) -> Optional[Record]:
        return await self.store.get("profiles", user_id)

    async def create_or_update_profile(self, user_id: str, profile_data: Dict[str, Any]) -> Record:
        # Plan changes go through the entitlement engine
        updates = {k: v for k, v in profile_data.items() if k not in ("id", "plan")}
        updates["updated_at"] = self._now()
        return await self.store.put("profiles", user_id, {"id": user_id, **updates})
