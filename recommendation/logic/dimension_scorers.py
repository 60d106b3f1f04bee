"""
Dimension Scorers

Individual scoring functions for each evaluation dimension.
Each scorer returns a DimensionScore, or None when the dimension cannot be
evaluated because either side does not expose the attribute.
All logic is deterministic - no AI/ML components.
"""

from typing import List, Optional, Tuple
from .contracts import AcademicProfile, UniversityRecord, DimensionScore
from .constants import (
    CGPA_BANDS,
    ENGLISH_BANDS,
    GRE_BANDS,
    BUDGET_FULLY_AFFORDABLE,
    BUDGET_PARTIALLY_AFFORDABLE,
    DIMENSION_WEIGHTS,
)


def score_cgpa(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Optional[DimensionScore]:
    """Score CGPA against the university's minimum."""
    if profile.cgpa is None or university.cgpa_requirement is None:
        return None

    ratio = _ratio(profile.cgpa, university.cgpa_requirement)
    return DimensionScore(
        dimension="cgpa",
        earned=_band_points(ratio, CGPA_BANDS),
        possible=DIMENSION_WEIGHTS["cgpa"],
    )


def score_english(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Optional[DimensionScore]:
    """
    Score English proficiency.

    IELTS and TOEFL are evaluated independently and the better one counts,
    since an applicant only needs one test to qualify.
    """
    evaluated: List[int] = []

    if profile.ielts_score is not None and university.ielts_requirement is not None:
        ratio = _ratio(profile.ielts_score, university.ielts_requirement)
        evaluated.append(_band_points(ratio, ENGLISH_BANDS))

    if profile.toefl_score is not None and university.toefl_requirement is not None:
        ratio = _ratio(profile.toefl_score, university.toefl_requirement)
        evaluated.append(_band_points(ratio, ENGLISH_BANDS))

    if not evaluated:
        return None

    return DimensionScore(
        dimension="english",
        earned=max(evaluated),
        possible=DIMENSION_WEIGHTS["english"],
    )


def score_budget(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Optional[DimensionScore]:
    """
    Score affordability.

    Full points when the budget covers the top of the tuition range,
    half when it only reaches the bottom of it.
    """
    bounds = _tuition_bounds(university)
    if profile.budget_max is None or bounds is None:
        return None

    lower, upper = bounds
    if profile.budget_max >= upper:
        earned = BUDGET_FULLY_AFFORDABLE
    elif profile.budget_max >= lower:
        earned = BUDGET_PARTIALLY_AFFORDABLE
    else:
        earned = 0

    return DimensionScore(
        dimension="budget",
        earned=earned,
        possible=DIMENSION_WEIGHTS["budget"],
    )


def score_gre(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Optional[DimensionScore]:
    """Score GRE against the university's minimum."""
    if profile.gre_score is None or university.gre_requirement is None:
        return None

    ratio = _ratio(profile.gre_score, university.gre_requirement)
    return DimensionScore(
        dimension="gre",
        earned=_band_points(ratio, GRE_BANDS),
        possible=DIMENSION_WEIGHTS["gre"],
    )


# =============================================================================
# DETAIL CHECKS
# =============================================================================

def meets(actual, requirement) -> Optional[bool]:
    """Plain `actual >= requirement`, None when either side is missing."""
    if actual is None or requirement is None:
        return None
    return actual >= requirement


def english_requirement_met(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Optional[bool]:
    ielts = meets(profile.ielts_score, university.ielts_requirement)
    toefl = meets(profile.toefl_score, university.toefl_requirement)
    if ielts is None and toefl is None:
        return None
    return bool(ielts) or bool(toefl)


def budget_requirement_met(
    profile: AcademicProfile,
    university: UniversityRecord
) -> Optional[bool]:
    bounds = _tuition_bounds(university)
    if bounds is None:
        return None
    return meets(profile.budget_max, bounds[0])


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _ratio(actual: float, requirement: float) -> float:
    # a zero requirement is met by any score
    if requirement == 0:
        return float("inf")
    return actual / requirement


def _band_points(ratio: float, bands: List[Tuple[float, int]]) -> int:
    for minimum, points in bands:
        if ratio >= minimum:
            return points
    return 0


def _tuition_bounds(university: UniversityRecord) -> Optional[Tuple[int, int]]:
    """(lower, upper) tuition, falling back to whichever bound is known."""
    lower = university.tuition_min
    upper = university.tuition_max
    if lower is None and upper is None:
        return None
    if lower is None:
        lower = upper
    if upper is None:
        upper = lower
    return lower, upper
