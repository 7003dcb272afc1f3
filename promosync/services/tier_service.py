"""
Plan catalog and feature ranking
"""
from typing import Dict, List, Optional

from promosync.core.config import settings
from promosync.schemas.tier import (
    Tier,
    GroupFeature,
    LevelFeature,
    LimitFeature,
    OptionValue,
)


# Usage counter names
MEDIA_KITS = "mediaKits"
QUICK_APPLIES = "quickApplies"
PITCHES = "pitches"
CONTRACTS = "contracts"

USAGE_KEYS = (MEDIA_KITS, QUICK_APPLIES, PITCHES, CONTRACTS)

# Feature name -> variant, checked against every plan at import
FEATURE_KINDS = {
    "rateCalculator": GroupFeature,
    "mediaKit": LimitFeature,
    "marketplace": LimitFeature,
    "filters": LevelFeature,
    "analytics": GroupFeature,
    "contracts": LimitFeature,
    "pitchGenerator": LimitFeature,
    "notifications": LevelFeature,
    "exports": LevelFeature,
    "support": LevelFeature,
}

# Ordered scales for string-valued levels and options, weakest first
LEVEL_SCALES = {
    "filters": ("basic", "standard", "advanced"),
    "notifications": ("basic", "email", "both"),
    "exports": ("watermarked", "clean", "branded"),
    "support": ("community", "email", "priority"),
}

OPTION_SCALES = {
    "templates": ("basic", "all"),
    "export": (False, "csv", "both"),
    "reminders": (False, "email", "both"),
}

# Sub-feature names that read a limit feature's quota
LIMIT_ALIASES = {
    "mediaKit": ("limit",),
    "marketplace": ("limit", "quickApply"),
    "contracts": ("limit",),
    "pitchGenerator": ("limit",),
}


TIERS: Dict[str, Tier] = {
    "free": Tier(
        id="free",
        name="Free",
        price=0,
        features={
            "rateCalculator": GroupFeature(options={"save": False, "compare": False, "history": False}),
            "mediaKit": LimitFeature(
                limit=1,
                usage_key=MEDIA_KITS,
                options={"templates": "basic", "customColors": False, "dragReorder": False, "shareable": False},
            ),
            "marketplace": LimitFeature(
                limit=0,
                usage_key=QUICK_APPLIES,
                options={"saveFavorites": False, "priorityMatches": False},
            ),
            "filters": LevelFeature(level="basic"),
            "analytics": GroupFeature(options={"days": 30, "export": False, "roi": False}),
            "contracts": LimitFeature(
                limit=3,
                usage_key=CONTRACTS,
                options={"reminders": False, "autoMilestones": False, "calendar": False},
            ),
            "pitchGenerator": LimitFeature(
                limit=1,
                usage_key=PITCHES,
                options={"premiumTemplates": False, "autoAttach": False},
            ),
            "notifications": LevelFeature(level="basic"),
            "exports": LevelFeature(level="watermarked"),
            "support": LevelFeature(level="community"),
        },
    ),
    "starter": Tier(
        id="starter",
        name="Starter",
        price=4.99,
        annual_price=47.90,
        features={
            "rateCalculator": GroupFeature(options={"save": True, "compare": True, "history": False}),
            "mediaKit": LimitFeature(
                limit=5,
                usage_key=MEDIA_KITS,
                options={"templates": "all", "customColors": True, "dragReorder": False, "shareable": False},
            ),
            "marketplace": LimitFeature(
                limit=10,
                usage_key=QUICK_APPLIES,
                options={"saveFavorites": True, "priorityMatches": False},
            ),
            "filters": LevelFeature(level="standard"),
            "analytics": GroupFeature(options={"days": 90, "export": "csv", "roi": False}),
            "contracts": LimitFeature(
                limit=10,
                usage_key=CONTRACTS,
                options={"reminders": "email", "autoMilestones": False, "calendar": False},
            ),
            "pitchGenerator": LimitFeature(
                limit=10,
                usage_key=PITCHES,
                options={"premiumTemplates": False, "autoAttach": False},
            ),
            "notifications": LevelFeature(level="email"),
            "exports": LevelFeature(level="clean"),
            "support": LevelFeature(level="email"),
        },
    ),
    "pro": Tier(
        id="pro",
        name="Pro",
        price=9.99,
        annual_price=95.90,
        features={
            "rateCalculator": GroupFeature(options={"save": True, "compare": True, "history": True}),
            "mediaKit": LimitFeature(
                limit=None,
                usage_key=MEDIA_KITS,
                options={"templates": "all", "customColors": True, "dragReorder": True, "shareable": True},
            ),
            "marketplace": LimitFeature(
                limit=None,
                usage_key=QUICK_APPLIES,
                options={"saveFavorites": True, "priorityMatches": True},
            ),
            "filters": LevelFeature(level="advanced"),
            "analytics": GroupFeature(options={"days": None, "export": "both", "roi": True}),
            "contracts": LimitFeature(
                limit=None,
                usage_key=CONTRACTS,
                options={"reminders": "both", "autoMilestones": True, "calendar": True},
            ),
            "pitchGenerator": LimitFeature(
                limit=None,
                usage_key=PITCHES,
                options={"premiumTemplates": True, "autoAttach": True},
            ),
            "notifications": LevelFeature(level="both"),
            "exports": LevelFeature(level="branded"),
            "support": LevelFeature(level="priority"),
        },
    ),
}

# Capability order, lowest first
TIER_ORDER = ("free", "starter", "pro")


def normalize_tier(tier) -> str:
    """Convert tier to lowercase string regardless of whether it's an enum or string"""
    if tier is None:
        return ""
    if isinstance(tier, str):
        return tier.lower()
    elif hasattr(tier, 'value'):
        return tier.value.lower()
    else:
        return str(tier).lower()


def is_known_tier(tier) -> bool:
    return normalize_tier(tier) in TIERS


def get_tier(tier) -> Tier:
    """Get a plan by id, falling back to the default (lowest) plan if unknown"""
    tier_str = normalize_tier(tier)
    if tier_str not in TIERS:
        tier_str = settings.DEFAULT_TIER if settings.DEFAULT_TIER in TIERS else TIER_ORDER[0]
    return TIERS[tier_str]


def list_tiers() -> List[Tier]:
    return [TIERS[tier_id] for tier_id in TIER_ORDER]


def resolve_limit(feature) -> Optional[int]:
    """Quota of a feature; 0 for anything that is not metered"""
    if isinstance(feature, LimitFeature):
        return feature.limit
    return 0


def rank_value(name: str, value: OptionValue) -> float:
    """
    Map a feature value onto a number so plans can be compared

    None stands for unlimited and ranks above everything.
    """
    if value is None:
        return float("inf")
    scale = LEVEL_SCALES.get(name) or OPTION_SCALES.get(name)
    if scale is not None:
        return float(scale.index(value))
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int):
        return float(value)
    raise ValueError(f"No ordering for {name}={value!r}")


def feature_ranks(name: str, feature) -> Dict[str, float]:
    """Flatten a feature into comparable components"""
    if isinstance(feature, LevelFeature):
        return {name: rank_value(name, feature.level)}
    ranks = {f"{name}.{option}": rank_value(option, value) for option, value in feature.options.items()}
    if isinstance(feature, LimitFeature):
        ranks[f"{name}.limit"] = rank_value("limit", feature.limit)
    return ranks


def _validate_catalog() -> None:
    """
    Check every plan against FEATURE_KINDS and the upgrade ordering

    Raises:
        TypeError: If a feature has the wrong variant
        ValueError: If a higher plan offers less of something than a lower one
    """
    for tier in TIERS.values():
        for name, feature in tier.features.items():
            expected = FEATURE_KINDS.get(name)
            if expected is None or not isinstance(feature, expected):
                raise TypeError(f"Feature '{name}' of tier '{tier.id}' is not a {expected}")

    for lower_id, higher_id in zip(TIER_ORDER, TIER_ORDER[1:]):
        lower, higher = TIERS[lower_id], TIERS[higher_id]
        for name, feature in lower.features.items():
            higher_ranks = feature_ranks(name, higher.features[name])
            for component, rank in feature_ranks(name, feature).items():
                if higher_ranks.get(component, float("-inf")) < rank:
                    raise ValueError(f"{higher_id}.{component} is weaker than {lower_id}.{component}")


_validate_catalog()
