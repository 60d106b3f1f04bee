"""
Matching Engine

Main orchestrator that combines catalog lookup and ranking into a single pipeline.
This is the primary entry point for matching a student against universities.
"""

import logging
import time
from typing import Any, Iterable, List, Optional
from sqlalchemy.orm import Session

from .contracts import AcademicProfile, CatalogFilters, RankedUniversity
from .candidate_generator import build_catalog_filters, list_universities, generate_mock_universities
from .ranker import rank_universities, score_single
from .constants import DEFAULT_CATALOG_LIMIT
from .errors import InvalidInput

logger = logging.getLogger(__name__)


class MatchingEngine:
    """
    Matching engine that orchestrates the ranking pipeline.

    Pipeline flow:
    1. Candidate Generation - Read universities from the catalog (or use given ones)
    2. Hard Filters - Preferred countries and fields of study
    3. Scoring - Weighted CGPA / English / Budget / GRE sub-scores
    4. Classification - Safety / Target / Ambitious
    5. Ranking - Score, then overall ranking, then name
    """

    def __init__(self, db: Optional[Session] = None):
        """
        Args:
            db: Optional database session. If None, catalog reads use mock data.
        """
        self.db = db
        self.version = "1.0.0"

    def rank(
        self,
        profile: Optional[AcademicProfile],
        candidates: Iterable[Any]
    ) -> List[RankedUniversity]:
        """Rank an explicit candidate set."""
        return rank_universities(profile, candidates)

    def rank_catalog(
        self,
        profile: Optional[AcademicProfile],
        filters: Optional[CatalogFilters] = None,
        limit: int = DEFAULT_CATALOG_LIMIT,
        use_mock: bool = False
    ) -> List[RankedUniversity]:
        """
        Rank catalog universities for a student.

        Args:
            profile: Student's academic profile
            filters: Extra broad filters from the caller
            limit: Maximum catalog rows to evaluate
            use_mock: If True, use mock data instead of DB

        Returns:
            Ranked list of matched universities
        """
        if profile is None:
            raise InvalidInput("profile is required")

        start_time = time.perf_counter()

        if use_mock or self.db is None:
            candidates = generate_mock_universities()
        else:
            catalog_filters = build_catalog_filters(profile, filters)
            candidates = list_universities(self.db, catalog_filters, limit)

        if not candidates:
            logger.warning("No universities found matching catalog filters")
            return []

        ranked = rank_universities(profile, candidates)

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Catalog matching complete: {len(candidates)} evaluated, "
            f"{len(ranked)} matched ({processing_time:.2f}ms)"
        )
        return ranked

    def rank_from_dict(
        self,
        profile_data: dict,
        candidates: Iterable[Any]
    ) -> List[RankedUniversity]:
        """
        Convenience method for API integration.

        Raises:
            InvalidInput: if profile_data is not a valid AcademicProfile
        """
        try:
            profile = AcademicProfile(**profile_data)
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid academic profile: {e}") from e
        return self.rank(profile, candidates)

    def score_single_university(
        self,
        profile: Optional[AcademicProfile],
        candidate: Any
    ) -> RankedUniversity:
        """
        Score a single university for a student, ignoring preference filters.

        Useful for a detail view of a university the student is looking at.
        """
        return score_single(profile, candidate)


# Convenience function for simple usage
def get_matches(
    profile: AcademicProfile,
    db: Optional[Session] = None,
    filters: Optional[CatalogFilters] = None,
    limit: int = DEFAULT_CATALOG_LIMIT,
    use_mock: bool = False
) -> List[RankedUniversity]:
    engine = MatchingEngine(db)
    return engine.rank_catalog(profile, filters=filters, limit=limit, use_mock=use_mock)
