"""
Paywall helpers: upgrade copy and gated action execution
"""
from typing import Awaitable, Callable, Optional, TypeVar
import logging

from promosync.core.exceptions import FeatureLimitReached, FeatureLocked
from promosync.schemas.tier import LimitCheck
from promosync.services.entitlement_service import EntitlementEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_UPGRADE_MESSAGE = "Unlock premium features to grow your creator business faster."

UPGRADE_MESSAGES = {
    "rateCalculator:save": "Save and track your rates over time to optimize your pricing strategy.",
    "mediaKit:templates": "Access all premium templates and custom color options.",
    "marketplace:quickApply": "Apply to unlimited brand deals each month.",
    "analytics:export": "Export your analytics data in CSV and PDF formats.",
    "contracts:calendar": "View your contracts in a beautiful calendar timeline.",
    "pitchGenerator:limit": "Generate unlimited AI-powered pitches to close more deals.",
}


def upgrade_message(feature: Optional[str] = None, sub_feature: Optional[str] = None) -> str:
    key = f"{feature}:{sub_feature}" if sub_feature else feature
    return UPGRADE_MESSAGES.get(key, DEFAULT_UPGRADE_MESSAGE)


def limit_warning(feature: str, check: LimitCheck) -> str:
    """Usage notice shown when a metered feature is used"""
    if check.limit is None:
        return f"You have unlimited {feature} this month."
    message = f"You've used {check.used} of {check.limit} {feature} this month."
    if check.remaining == 0:
        message += " Upgrade to increase your limit!"
    return message


def require_access(engine: EntitlementEngine, feature: str, sub_feature: Optional[str] = None) -> None:
    """
    Raises:
        FeatureLocked: If the current tier does not grant the capability
    """
    if not engine.can_access(feature, sub_feature):
        raise FeatureLocked(feature, sub_feature, upgrade_message(feature, sub_feature))


async def run_gated(
    engine: EntitlementEngine,
    feature: str,
    action: Callable[[], Awaitable[T]],
) -> T:
    """
    Run an action that consumes one unit of a feature's monthly quota

    The unit is reserved before the action runs so concurrent requests cannot
    both take the last one. It is given back if the action fails.

    Raises:
        FeatureLimitReached: If the quota is used up; the action is not run
    """
    check = await engine.reserve(feature)
    if not check.allowed:
        logger.info(f"User {engine.user_id} hit the {feature} limit ({check.used}/{check.limit})")
        raise FeatureLimitReached(feature, check, f"{limit_warning(feature, check)} {upgrade_message(feature, 'limit')}")

    try:
        return await action()
    except Exception:
        await engine.release(feature)
        raise
