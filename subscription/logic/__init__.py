"""
Subscription Logic Module

Tier registry, usage ledger transitions and the quota enforcement service.
"""

from .constants import FeatureKey, LedgerStatus, UNLIMITED
from .contracts import (
    LedgerState,
    QuotaDecision,
    PaymentConfirmation,
    UsageSummary,
    TransactionOut,
    SubscriptionAnalytics,
)
from .errors import UnknownTier, LedgerNotFound, LedgerWriteConflict
from .tiers import SubscriptionTier, get_tier, get_limits, list_tiers
from .transitions import reconcile
from .quota_service import QuotaService

__all__ = [
    # Service
    "QuotaService",
    "reconcile",

    # Tier registry
    "SubscriptionTier",
    "get_tier",
    "get_limits",
    "list_tiers",

    # Contracts
    "LedgerState",
    "QuotaDecision",
    "PaymentConfirmation",
    "UsageSummary",
    "TransactionOut",
    "SubscriptionAnalytics",

    # Enums / sentinels
    "FeatureKey",
    "LedgerStatus",
    "UNLIMITED",

    # Errors
    "UnknownTier",
    "LedgerNotFound",
    "LedgerWriteConflict",
]
