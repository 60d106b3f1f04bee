"""
Classifier

Classifies a match score into a fit category:
- Safety (comfortably meets requirements)
- Target (realistic match)
- Ambitious (reach school)
"""

from typing import Dict, List
from .contracts import RankedUniversity
from .constants import MatchCategory, CATEGORY_THRESHOLDS


def classify_score(score: int) -> MatchCategory:
    """
    Classify a 0-100 match score.

    Args:
        score: Aggregated match score

    Returns:
        MatchCategory enum value
    """
    for minimum, category in CATEGORY_THRESHOLDS:
        if score >= minimum:
            return category
    return MatchCategory.AMBITIOUS


def group_by_category(
    ranked: List[RankedUniversity]
) -> Dict[str, List[RankedUniversity]]:
    """
    Split a ranked list into categories, keeping rank order inside each.
    """
    grouped: Dict[str, List[RankedUniversity]] = {cat.value: [] for cat in MatchCategory}
    for university in ranked:
        grouped[university.match.category].append(university)
    return grouped


def get_category_counts(ranked: List[RankedUniversity]) -> Dict[str, int]:
    """
    Count universities in each category.
    """
    return {cat: len(items) for cat, items in group_by_category(ranked).items()}
