"""
Tier-related schemas
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Dict, Literal, Optional, Union

OptionValue = Union[bool, int, str, None]


class GroupFeature(BaseModel):
    """Bundle of on/off capabilities and small settings"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    options: Dict[str, OptionValue] = {}


class LevelFeature(BaseModel):
    """Single level drawn from an ordered scale"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["level"] = "level"
    level: str


class LimitFeature(BaseModel):
    """Monthly quota metered against a usage counter"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["limit"] = "limit"
    limit: int | None  # None means unlimited
    usage_key: str
    options: Dict[str, OptionValue] = {}


Feature = Annotated[
    Union[GroupFeature, LevelFeature, LimitFeature],
    Field(discriminator="kind"),
]


class Tier(BaseModel):
    """Subscription plan and its feature map"""
    model_config = ConfigDict(frozen=True)

    id: str  # 'free', 'starter' or 'pro'
    name: str
    price: float
    annual_price: float | None = None
    features: Dict[str, Feature]


class LimitCheck(BaseModel):
    """Result of a quota check; None means unlimited"""
    allowed: bool
    remaining: int | None
    limit: int | None
    used: int = 0


class UsageCounters(BaseModel):
    """Usage counts for one calendar month"""
    month: str  # e.g. '2024-1'
    counts: Dict[str, int] = {}

    def get(self, key: str) -> int:
        return self.counts.get(key, 0)


class EntitlementStatus(BaseModel):
    """Current plan and usage of a subscriber"""
    tier: Tier
    usage: UsageCounters
    limits: Dict[str, LimitCheck]


class TierUpdate(BaseModel):
    tier: str


class AccessCheck(BaseModel):
    feature: str
    sub_feature: Optional[str] = None
    allowed: bool
    message: Optional[str] = None
