"""
Entitlement engine: plan capabilities and monthly usage quotas for one subscriber
"""
from typing import Dict, Optional
import asyncio
import logging
import weakref

from promosync.core.clock import SystemClock, month_key
from promosync.core.config import settings
from promosync.core.exceptions import UnknownTier
from promosync.schemas.tier import Tier, LimitCheck, LimitFeature, UsageCounters
from promosync.services.persistence import Persistence
from promosync.services.tier_service import (
    LIMIT_ALIASES,
    USAGE_KEYS,
    get_tier,
    is_known_tier,
    normalize_tier,
    resolve_limit,
)

logger = logging.getLogger(__name__)

PROFILES = "profiles"
USAGE = "usage"

# Shared by every engine of a subscriber in this process
_usage_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def fresh_usage(month: str) -> UsageCounters:
    """Zeroed counter set stamped with the given month"""
    return UsageCounters(month=month, counts={key: 0 for key in USAGE_KEYS})


def usage_lock(user_id: str) -> asyncio.Lock:
    """Lock serialising quota reads and writes for one subscriber"""
    lock = _usage_locks.get(user_id)
    if lock is None:
        lock = asyncio.Lock()
        _usage_locks[user_id] = lock
    return lock


def _usage_from_record(record) -> Optional[UsageCounters]:
    if not record:
        return None
    return UsageCounters(
        month=record.get("month") or "",
        counts=dict(record.get("counts") or {}),
    )


class EntitlementEngine:
    """
    Feature gating and quota enforcement over an in-memory snapshot

    Queries (current_tier, can_access, check_limit) are synchronous; commands
    (increment_usage, set_tier) persist through the store before returning.
    Usage counters roll over lazily: every read or write first compares the
    stored month with the clock's month and starts a zeroed set if they differ.
    """

    def __init__(
        self,
        user_id: str,
        store: Persistence,
        tier_id: Optional[str] = None,
        usage: Optional[UsageCounters] = None,
        clock=None,
    ):
        self.user_id = user_id
        self.store = store
        self.clock = clock or SystemClock()
        self.tier_id = normalize_tier(tier_id) or settings.DEFAULT_TIER
        self._usage = usage or fresh_usage(month_key(self.clock.now()))
        self._lock = usage_lock(user_id)

    @classmethod
    async def load(cls, user_id: str, store: Persistence, clock=None) -> "EntitlementEngine":
        """
        Build an engine from the subscriber's persisted tier and usage

        Missing records default to the lowest tier and zero usage. A usage set
        from a previous month is reset and written back once here.
        """
        profile = await store.get(PROFILES, user_id)
        usage = _usage_from_record(await store.get(USAGE, user_id))

        engine = cls(
            user_id=user_id,
            store=store,
            tier_id=(profile or {}).get("plan"),
            usage=usage,
            clock=clock,
        )
        if usage is not None and engine._rollover():
            await engine._save_usage()
        return engine

    # Queries

    def current_tier(self) -> Tier:
        return get_tier(self.tier_id)

    def usage(self) -> UsageCounters:
        self._rollover()
        return self._usage.model_copy(deep=True)

    def can_access(self, feature: str, sub_feature: Optional[str] = None) -> bool:
        """
        Check whether the current tier grants a capability

        Args:
            feature: Feature name, e.g. 'rateCalculator'
            sub_feature: Optional nested capability, e.g. 'save'

        Returns:
            False for features the tier does not define; otherwise the
            truthiness of the nested value when sub_feature is given
        """
        value = self.current_tier().features.get(feature)
        if value is None:
            return False
        if not sub_feature:
            return True

        if isinstance(value, LimitFeature) and sub_feature in LIMIT_ALIASES.get(feature, ()):
            # Unlimited quotas are granted, a zero quota is not
            return value.limit is None or value.limit > 0
        options = getattr(value, "options", {})
        if sub_feature not in options:
            return False
        # None marks an unbounded option, e.g. analytics history days
        return options[sub_feature] is None or bool(options[sub_feature])

    def check_limit(self, feature: str) -> LimitCheck:
        """
        Compare a feature's usage against the tier's monthly quota

        Unlimited quotas are always allowed and report the count without
        rolling it over. Features that are not metered count as a zero quota.
        """
        definition = self.current_tier().features.get(feature)
        limit = resolve_limit(definition)
        if limit is None:
            return LimitCheck(allowed=True, remaining=None, limit=None, used=self._peek(feature))

        self._rollover()
        used = self._usage.get(self._usage_key(feature))
        remaining = max(0, limit - used)
        return LimitCheck(
            allowed=remaining > 0,
            remaining=remaining,
            limit=limit,
            used=used,
        )

    def limits(self) -> Dict[str, LimitCheck]:
        """Quota checks for every metered feature of the current tier"""
        return {
            name: self.check_limit(name)
            for name, definition in self.current_tier().features.items()
            if isinstance(definition, LimitFeature)
        }

    # Commands
    #
    # Each command re-reads the stored counters under the subscriber's lock,
    # so engines built by concurrent requests never overwrite each other.

    async def increment_usage(self, feature: str) -> UsageCounters:
        """
        Count one use of a feature and persist the counter set

        Raises:
            PersistenceUnavailable: If the counters cannot be read or written
        """
        async with self._lock:
            await self._refresh_usage()
            self._add(feature, 1)
            await self._save_usage()
            return self._usage.model_copy(deep=True)

    async def reserve(self, feature: str) -> LimitCheck:
        """
        Check a quota and take one unit of it in a single step

        Nothing is counted when the check denies. Returns the check as it
        stood before the reservation.

        Raises:
            PersistenceUnavailable: If the counters cannot be read or written
        """
        async with self._lock:
            await self._refresh_usage()
            check = self.check_limit(feature)
            if check.allowed:
                self._add(feature, 1)
                await self._save_usage()
            return check

    async def release(self, feature: str) -> UsageCounters:
        """Give back a unit taken by reserve()"""
        async with self._lock:
            await self._refresh_usage()
            self._add(feature, -1)
            await self._save_usage()
            return self._usage.model_copy(deep=True)

    async def set_tier(self, tier_id: str) -> Tier:
        """
        Switch the subscriber to another plan; usage is kept as is

        Raises:
            UnknownTier: If tier_id is not in the catalog
            PersistenceUnavailable: If the profile cannot be written
        """
        if not is_known_tier(tier_id):
            raise UnknownTier(tier_id)

        tier_str = normalize_tier(tier_id)
        await self.store.put(PROFILES, self.user_id, {"plan": tier_str})
        previous, self.tier_id = self.tier_id, tier_str
        logger.info(f"User {self.user_id} moved from {previous} to {tier_str}")
        return self.current_tier()

    # Internals

    def _usage_key(self, feature: str) -> str:
        definition = self.current_tier().features.get(feature)
        if isinstance(definition, LimitFeature):
            return definition.usage_key
        return feature

    def _peek(self, feature: str) -> int:
        if self._usage.month != month_key(self.clock.now()):
            return 0
        return self._usage.get(self._usage_key(feature))

    def _add(self, feature: str, amount: int) -> None:
        self._rollover()
        key = self._usage_key(feature)
        counts = dict(self._usage.counts)
        counts[key] = max(0, counts.get(key, 0) + amount)
        self._usage = UsageCounters(month=self._usage.month, counts=counts)

    async def _refresh_usage(self) -> None:
        stored = _usage_from_record(await self.store.get(USAGE, self.user_id))
        if stored is not None:
            self._usage = stored
        self._rollover()

    def _rollover(self) -> bool:
        current = month_key(self.clock.now())
        if self._usage.month == current:
            return False
        logger.info(f"Resetting usage for user {self.user_id}: {self._usage.month} -> {current}")
        self._usage = fresh_usage(current)
        return True

    async def _save_usage(self) -> None:
        await self.store.put(
            USAGE,
            self.user_id,
            {"month": self._usage.month, "counts": dict(self._usage.counts)},
        )
