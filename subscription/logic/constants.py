"""
Subscription Constants

Feature keys, plan tables and ledger policy values.
The tier table here is the single source of truth for plan limits.
"""

from enum import Enum
from typing import Dict, Any


class FeatureKey(str, Enum):
    """Metered features, one usage counter each."""
    PATHWAYS_PER_MONTH = "pathways_per_month"
    COMPARISONS = "comparisons"
    PDF_EXPORTS = "pdf_exports"
    UNI_GUIDE_PRO = "uni_guide_pro"
    MY_STUDY_PATH = "my_study_path"


class LedgerStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


# Sentinel for "no limit" everywhere in the system; never means "no access"
UNLIMITED = -1

FREE_TIER_ID = "free"

# =============================================================================
# TIERS
# =============================================================================

TIER_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "free": {
        "name": "Free",
        "price": 0,
        "currency": "INR",
        "billing_period_days": None,  # never expires
        "limits": {
            FeatureKey.PATHWAYS_PER_MONTH: 1,
            FeatureKey.COMPARISONS: 3,
            FeatureKey.PDF_EXPORTS: 0,
            FeatureKey.UNI_GUIDE_PRO: 3,
            FeatureKey.MY_STUDY_PATH: 0,
        },
    },
    "premium": {
        "name": "Premium",
        "price": 999,
        "currency": "INR",
        "billing_period_days": 30,
        "limits": {
            FeatureKey.PATHWAYS_PER_MONTH: UNLIMITED,
            FeatureKey.COMPARISONS: 10,
            FeatureKey.PDF_EXPORTS: UNLIMITED,
            FeatureKey.UNI_GUIDE_PRO: UNLIMITED,
            FeatureKey.MY_STUDY_PATH: UNLIMITED,
        },
    },
    "pro": {
        "name": "Professional",
        "price": 1999,
        "currency": "INR",
        "billing_period_days": 30,
        "limits": {
            FeatureKey.PATHWAYS_PER_MONTH: UNLIMITED,
            FeatureKey.COMPARISONS: UNLIMITED,
            FeatureKey.PDF_EXPORTS: UNLIMITED,
            FeatureKey.UNI_GUIDE_PRO: UNLIMITED,
            FeatureKey.MY_STUDY_PATH: UNLIMITED,
        },
    },
}

# =============================================================================
# LEDGER POLICY
# =============================================================================

# Attempts at a conditional ledger write before giving up
MAX_LEDGER_WRITE_RETRIES = 3

# Human readable names used in quota messages
FEATURE_LABELS: Dict[FeatureKey, str] = {
    FeatureKey.PATHWAYS_PER_MONTH: "pathway generation",
    FeatureKey.COMPARISONS: "university comparison",
    FeatureKey.PDF_EXPORTS: "PDF export",
    FeatureKey.UNI_GUIDE_PRO: "UniGuide Pro",
    FeatureKey.MY_STUDY_PATH: "My Study Path",
}
