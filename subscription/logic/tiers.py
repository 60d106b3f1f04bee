"""
Subscription Tier Registry

Immutable plan configuration built once at import time.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .constants import FeatureKey, TIER_DEFINITIONS, UNLIMITED
from .errors import UnknownTier


class SubscriptionTier(BaseModel):
    """A plan and its per-feature monthly limits (-1 = unlimited)."""
    id: str
    name: str
    price: int = 0
    currency: str = "INR"
    billing_period_days: Optional[int] = None
    limits: Dict[FeatureKey, int] = Field(default_factory=dict)

    class Config:
        frozen = True

    def limit_for(self, feature: FeatureKey) -> int:
        # features a plan does not list are not available on it
        return self.limits.get(FeatureKey(feature), 0)

    def is_unlimited(self, feature: FeatureKey) -> bool:
        return self.limit_for(feature) == UNLIMITED


TIER_REGISTRY: Dict[str, SubscriptionTier] = {
    tier_id: SubscriptionTier(id=tier_id, **definition)
    for tier_id, definition in TIER_DEFINITIONS.items()
}


def get_tier(tier_id: str) -> SubscriptionTier:
    """
    Raises:
        UnknownTier: if tier_id is not a registered plan
    """
    try:
        return TIER_REGISTRY[tier_id]
    except (KeyError, TypeError):
        raise UnknownTier(tier_id)


def get_limits(tier_id: str) -> Dict[FeatureKey, int]:
    """Copy of the plan's limits; callers may not mutate the registry."""
    return dict(get_tier(tier_id).limits)


def list_tiers() -> List[SubscriptionTier]:
    return list(TIER_REGISTRY.values())
