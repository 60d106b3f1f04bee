"""
Score Aggregator

Combines the evaluated dimension scores into a 0-100 match score.
Dimensions that could not be evaluated count toward neither the earned
points nor the possible points, so missing data never penalizes.
"""

import math
from typing import Dict, List, Optional
from .contracts import (
    AcademicProfile,
    UniversityRecord,
    DimensionScore,
    MatchDetails,
    MatchResult,
)
from .dimension_scorers import (
    score_cgpa,
    score_english,
    score_budget,
    score_gre,
    meets,
    english_requirement_met,
    budget_requirement_met,
)
from .classifier import classify_score


SCORERS = [
    score_cgpa,
    score_english,
    score_budget,
    score_gre,
]


def evaluate_dimensions(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Dict[str, DimensionScore]:
    """Run every scorer and keep the dimensions that could be evaluated."""
    evaluated: Dict[str, DimensionScore] = {}
    for scorer in SCORERS:
        result: Optional[DimensionScore] = scorer(profile, university)
        if result is not None:
            evaluated[result.dimension] = result
    return evaluated


def aggregate_score(dimension_scores: List[DimensionScore]) -> int:
    """
    Percentage of possible points earned, rounded half up.

    Returns 0 when nothing could be evaluated.
    """
    earned = sum(d.earned for d in dimension_scores)
    possible = sum(d.possible for d in dimension_scores)
    if possible == 0:
        return 0
    return int(math.floor(100 * earned / possible + 0.5))


def calculate_match(
    profile: AcademicProfile,
    university: UniversityRecord
) -> MatchResult:
    """
    Compute the compatibility of one profile with one university.

    Pure function: the same inputs always give the same result.

    Args:
        profile: Student's academic profile
        university: University to evaluate

    Returns:
        MatchResult with score, category and requirement checks
    """
    dimensions = evaluate_dimensions(profile, university)
    score = aggregate_score(list(dimensions.values()))

    details = MatchDetails(
        cgpa_match=meets(profile.cgpa, university.cgpa_requirement),
        english_match=english_requirement_met(profile, university),
        budget_match=budget_requirement_met(profile, university),
        gre_match=meets(profile.gre_score, university.gre_requirement),
    )

    return MatchResult(
        score=score,
        category=classify_score(score),
        details=details,
    )
