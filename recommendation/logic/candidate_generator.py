"""
Candidate Generator

Fetches candidate universities from the catalog using broad filters.
Applies cheap SQL-level filtering to reduce the pool before scoring;
the exact preference filters run later in the ranker.
"""

from typing import List, Optional
from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from .contracts import AcademicProfile, CatalogFilters, UniversityRecord
from .constants import DEFAULT_CATALOG_LIMIT, MAX_CATALOG_LIMIT
from .adapter import transform_rows, to_university_record
from .errors import UniversityNotFound
from ..models import CatalogUniversity


def build_catalog_filters(
    profile: AcademicProfile,
    filters: Optional[CatalogFilters] = None
) -> CatalogFilters:
    """
    Derive broad catalog filters from the student's profile.

    - A single preferred country narrows the query to that country
    - budget_max excludes universities whose cheapest tuition is above it

    Filters passed explicitly by the caller win over derived ones.
    """
    merged = filters.model_copy() if filters else CatalogFilters()

    if merged.country is None and len(profile.preferred_countries) == 1:
        merged.country = next(iter(profile.preferred_countries))

    if merged.tuition_max is None and profile.budget_max is not None:
        merged.tuition_max = profile.budget_max

    return merged


def list_universities(
    db: Session,
    filters: Optional[CatalogFilters] = None,
    limit: int = DEFAULT_CATALOG_LIMIT
) -> List[UniversityRecord]:
    """
    Read universities from the catalog.

    Args:
        db: Database session
        filters: Broad filters (country, type, tuition range, approval)
        limit: Maximum number of rows to read

    Returns:
        List of UniversityRecord ordered by overall ranking (unranked last)
    """
    filters = filters or CatalogFilters()
    query = select(CatalogUniversity)

    if filters.admin_approved is not None:
        query = query.where(CatalogUniversity.admin_approved == filters.admin_approved)

    if filters.country:
        query = query.where(CatalogUniversity.country == filters.country)

    if filters.type:
        query = query.where(CatalogUniversity.type == filters.type)

    # Tuition range overlap; rows without the bound are kept
    if filters.tuition_min is not None:
        query = query.where(or_(
            CatalogUniversity.tuition_max.is_(None),
            CatalogUniversity.tuition_max >= filters.tuition_min,
        ))
    if filters.tuition_max is not None:
        query = query.where(or_(
            CatalogUniversity.tuition_min.is_(None),
            CatalogUniversity.tuition_min <= filters.tuition_max,
        ))

    query = query.order_by(
        CatalogUniversity.ranking_overall.is_(None),
        CatalogUniversity.ranking_overall.asc(),
        CatalogUniversity.name.asc(),
    ).limit(limit)

    rows = db.execute(query).scalars().all()
    return transform_rows(rows)


def get_university(db: Session, university_id: str) -> UniversityRecord:
    """
    Read one catalog university by id, approved or not.

    Raises:
        UniversityNotFound: if no row has this id
        InvalidInput: if the stored row violates the record invariants
    """
    row = db.get(CatalogUniversity, str(university_id))
    if row is None:
        raise UniversityNotFound(university_id)
    return to_university_record(row)


def search_universities(
    db: Session,
    term: str,
    filters: Optional[CatalogFilters] = None,
    limit: int = DEFAULT_CATALOG_LIMIT
) -> List[UniversityRecord]:
    """
    Case-insensitive text search over university names and programs.

    Broad filters narrow the catalog first; an empty term returns the
    filtered catalog unchanged. Results keep the catalog order.
    """
    candidates = list_universities(db, filters, MAX_CATALOG_LIMIT)
    needle = (term or "").strip().lower()
    if not needle:
        return candidates[:limit]

    matches = [
        u for u in candidates
        if needle in u.name.lower()
        or any(needle in program.lower() for program in u.programs_offered)
    ]
    return matches[:limit]


def generate_mock_universities(count: int = 10) -> List[UniversityRecord]:
    """
    Generate mock universities for testing without database.

    Args:
        count: Number of mock universities to generate

    Returns:
        List of mock UniversityRecord objects
    """
    mock_data = [
        ("MIT", "USA", "private", 3.8, 7.0, 100, 320, 55000, 60000, ["Computer Science", "Electrical Engineering"], 1),
        ("Stanford", "USA", "private", 3.8, 7.0, 100, 320, 56000, 62000, ["Computer Science", "Data Science"], 3),
        ("UC Berkeley", "USA", "public", 3.5, 7.0, 90, 310, 30000, 45000, ["Software Engineering", "Data Science"], 10),
        ("Georgia Tech", "USA", "public", 3.3, 6.5, 90, 310, 28000, 40000, ["Machine Learning", "Computer Science"], 36),
        ("University of Toronto", "Canada", "public", 3.3, 6.5, 93, None, 25000, 45000, ["Artificial Intelligence", "Business"], 21),
        ("University of British Columbia", "Canada", "public", 3.0, 6.5, 90, None, 22000, 40000, ["Computer Science", "Forestry"], 34),
        ("TU Munich", "Germany", "public", 2.8, 6.5, 88, None, 0, 3000, ["Informatics", "Mechanical Engineering"], 28),
        ("ETH Zurich", "Switzerland", "public", 3.5, 7.0, 100, None, 1500, 2000, ["Computer Science", "Physics"], 7),
        ("Imperial College", "UK", "public", 3.5, 7.0, 100, None, 38000, 45000, ["Computing", "Bioengineering"], 6),
        ("University of Melbourne", "Australia", "public", 3.0, 6.5, 79, None, 30000, 42000, ["Information Technology", "Business"], 14),
    ]

    universities = []
    for i, (name, country, kind, cgpa, ielts, toefl, gre, t_min, t_max, programs, rank) in enumerate(mock_data[:count]):
        universities.append(UniversityRecord(
            id=f"mock-{i + 1}",
            name=name,
            country=country,
            type=kind,
            cgpa_requirement=cgpa,
            ielts_requirement=ielts,
            toefl_requirement=toefl,
            gre_requirement=gre,
            tuition_min=t_min,
            tuition_max=t_max,
            programs_offered=programs,
            ranking_overall=rank,
        ))

    return universities
