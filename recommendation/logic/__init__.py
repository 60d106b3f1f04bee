"""
Matching Logic Module

Provides the deterministic compatibility scoring engine for universities.
"""

from .contracts import (
    AcademicProfile,
    UniversityRecord,
    MatchResult,
    MatchDetails,
    RankedUniversity,
    CatalogFilters,
    InstitutionType,
)
from .aggregator import calculate_match
from .ranker import rank_universities
from .engine import MatchingEngine, get_matches
from .constants import MatchCategory
from .errors import InvalidInput, UniversityNotFound

__all__ = [
    # Main engine
    "MatchingEngine",
    "get_matches",
    "calculate_match",
    "rank_universities",

    # Contracts
    "AcademicProfile",
    "UniversityRecord",
    "MatchResult",
    "MatchDetails",
    "RankedUniversity",
    "CatalogFilters",
    "InstitutionType",

    # Enums
    "MatchCategory",

    # Errors
    "InvalidInput",
    "UniversityNotFound",
]
