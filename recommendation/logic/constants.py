"""
Matching Engine Constants

Weights, ratio bands and category thresholds used by the matching engine.
All values are deterministic with no AI/ML components.
"""

from enum import Enum
from typing import Dict, List, Tuple

# =============================================================================
# DIMENSION WEIGHTS
# =============================================================================

# Maximum points each dimension can contribute (sum to 100)
DIMENSION_WEIGHTS: Dict[str, int] = {
    "cgpa": 40,
    "english": 30,
    "budget": 20,
    "gre": 10,
}

# =============================================================================
# RATIO BANDS
# =============================================================================

# (minimum ratio, points) pairs, checked top-down. Below the last band = 0.
CGPA_BANDS: List[Tuple[float, int]] = [
    (1.0, 40),   # Meets or exceeds requirement
    (0.9, 30),   # Within 10%
    (0.8, 20),   # Within 20%
]

ENGLISH_BANDS: List[Tuple[float, int]] = [
    (1.0, 30),
    (0.9, 20),
    (0.8, 10),
]

GRE_BANDS: List[Tuple[float, int]] = [
    (1.0, 10),
    (0.9, 5),
]

BUDGET_FULLY_AFFORDABLE = 20
BUDGET_PARTIALLY_AFFORDABLE = 10

# =============================================================================
# CLASSIFICATION THRESHOLDS
# =============================================================================

class MatchCategory(str, Enum):
    """Admission fit categories."""
    SAFETY = "safety"          # Comfortably meets requirements
    TARGET = "target"          # Realistic match
    AMBITIOUS = "ambitious"    # Reach school


# Minimum score for each category, checked highest first
CATEGORY_THRESHOLDS: List[Tuple[int, MatchCategory]] = [
    (80, MatchCategory.SAFETY),
    (60, MatchCategory.TARGET),
]

# =============================================================================
# NATURAL BOUNDS
# =============================================================================

CGPA_MAX = 4.0
IELTS_MAX = 9.0
TOEFL_MAX = 120
GRE_MAX = 340

# =============================================================================
# CATALOG DEFAULTS
# =============================================================================

DEFAULT_CATALOG_LIMIT = 100
MAX_CATALOG_LIMIT = 500
