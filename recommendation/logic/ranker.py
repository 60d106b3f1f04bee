"""
Ranker

Applies hard preference filters, scores the surviving candidates and
sorts them into a fully deterministic order.
"""

import logging
from typing import Any, Iterable, List, Optional, Tuple
from pydantic import ValidationError

from .contracts import AcademicProfile, UniversityRecord, RankedUniversity
from .aggregator import calculate_match
from .errors import InvalidInput

logger = logging.getLogger(__name__)


def coerce_candidate(candidate: Any) -> UniversityRecord:
    """
    Accept a UniversityRecord or a mapping of its fields.

    Raises:
        InvalidInput: if the candidate cannot be read as a valid record
    """
    if isinstance(candidate, UniversityRecord):
        # re-run validators, records can be built with model_construct
        data = candidate.model_dump()
    elif isinstance(candidate, dict):
        data = candidate
    else:
        raise InvalidInput(f"Unsupported candidate type: {type(candidate).__name__}")

    try:
        return UniversityRecord.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(f"Invalid university record {data.get('id')!r}: {e}") from e


def passes_country_filter(profile: AcademicProfile, university: UniversityRecord) -> bool:
    if not profile.preferred_countries:
        return True
    return university.country in profile.preferred_countries


def passes_field_filter(profile: AcademicProfile, university: UniversityRecord) -> bool:
    """At least one program contains, or is contained by, a preferred field."""
    if not profile.preferred_fields:
        return True
    fields = [f.lower() for f in profile.preferred_fields]
    for program in university.programs_offered:
        name = program.lower()
        if any(field in name or name in field for field in fields):
            return True
    return False


def sort_key(ranked: RankedUniversity) -> Tuple[int, int, int, str]:
    """Score desc, ranking asc with unranked last, then name."""
    has_rank = ranked.ranking_overall is not None
    return (
        -ranked.match.score,
        0 if has_rank else 1,
        ranked.ranking_overall if has_rank else 0,
        ranked.name,
    )


def rank_universities(
    profile: Optional[AcademicProfile],
    candidates: Iterable[Any]
) -> List[RankedUniversity]:
    """
    Filter, score and sort a candidate set for a student.

    Malformed candidates are rejected one at a time; the rest of the
    batch is still ranked.

    Args:
        profile: Student's academic profile
        candidates: UniversityRecord objects (or dicts of their fields)

    Returns:
        Ranked list of universities with their match attached

    Raises:
        InvalidInput: if profile is missing
    """
    if profile is None:
        raise InvalidInput("profile is required")

    ranked: List[RankedUniversity] = []
    rejected = 0

    for candidate in candidates:
        try:
            university = coerce_candidate(candidate)
        except InvalidInput as e:
            rejected += 1
            logger.warning(f"Skipping candidate: {e}")
            continue

        if not passes_country_filter(profile, university):
            continue
        if not passes_field_filter(profile, university):
            continue

        match = calculate_match(profile, university)
        ranked.append(RankedUniversity(**university.model_dump(), match=match))

    ranked.sort(key=sort_key)

    logger.info(
        f"Ranked {len(ranked)} universities for student "
        f"{profile.student_id or 'anonymous'} ({rejected} rejected)"
    )
    return ranked


def score_single(
    profile: Optional[AcademicProfile],
    candidate: Any
) -> RankedUniversity:
    """
    Score one university without applying preference filters.

    Raises:
        InvalidInput: if profile is missing or the candidate is malformed
    """
    if profile is None:
        raise InvalidInput("profile is required")
    university = coerce_candidate(candidate)
    return RankedUniversity(**university.model_dump(), match=calculate_match(profile, university))
