"""
Matching API Routes

Exposes the matching engine via REST API.
"""

from typing import Optional, List, Dict, Any
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from db import get_db
from profile_routes import get_profile
from utils.auth_utils import auth_user, CurrentUser
from .logic.contracts import (
    AcademicProfile,
    CatalogFilters,
    InstitutionType,
    RankedUniversity,
    SavedUniversity,
    UniversityRecord,
)
from .logic.candidate_generator import get_university, search_universities
from .logic import saved_universities
from .logic.constants import DEFAULT_CATALOG_LIMIT, MAX_CATALOG_LIMIT
from .logic.classifier import get_category_counts
from .logic.engine import MatchingEngine
from .logic.errors import InvalidInput, UniversityNotFound


router = APIRouter(prefix="/matching", tags=["matching"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class RankRequest(BaseModel):
    """Rank an explicit list of universities."""
    profile: AcademicProfile
    candidates: List[Dict[str, Any]] = Field(default_factory=list)


class CatalogRequest(BaseModel):
    """Rank universities from the catalog."""
    profile: AcademicProfile = Field(
        ...,
        description="Academic profile with preferences",
        examples=[{
            "cgpa": 3.6,
            "ielts_score": 7.0,
            "budget_max": 40000,
            "preferred_countries": ["Canada"],
            "preferred_fields": ["Computer Science"],
        }],
    )
    filters: Optional[CatalogFilters] = None
    limit: int = Field(default=DEFAULT_CATALOG_LIMIT, ge=1, le=MAX_CATALOG_LIMIT)


class ScoreRequest(BaseModel):
    profile: AcademicProfile
    university: Dict[str, Any]


class MatchResponse(BaseModel):
    count: int
    categories: Dict[str, int]
    universities: List[RankedUniversity]


def _response(ranked: List[RankedUniversity]) -> MatchResponse:
    return MatchResponse(
        count=len(ranked),
        categories=get_category_counts(ranked),
        universities=ranked,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/rank", response_model=MatchResponse, summary="Rank given universities")
def rank(request: RankRequest):
    """
    Score and sort the given candidates for the profile.
    Malformed candidates are skipped, not fatal.
    """
    engine = MatchingEngine()
    return _response(engine.rank(request.profile, request.candidates))


@router.post("/catalog", response_model=MatchResponse, summary="Rank catalog universities")
def rank_catalog(request: CatalogRequest, db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        engine = MatchingEngine(db)
        ranked = engine.rank_catalog(request.profile, request.filters, request.limit)
        return _response(ranked)


def _rank_stored_profile(db_session, profile: AcademicProfile, limit: int) -> MatchResponse:
    db: Session
    with db_session as db:
        engine = MatchingEngine(db)
        return _response(engine.rank_catalog(profile, limit=limit))


@router.get("/me", response_model=MatchResponse, summary="Rank catalog for my stored profile")
async def rank_for_me(
    limit: int = Query(DEFAULT_CATALOG_LIMIT, ge=1, le=MAX_CATALOG_LIMIT),
    current: CurrentUser = Depends(auth_user),
    db_session=Depends(get_db),
):
    try:
        profile = await get_profile(current.id)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Stored profile is invalid: {str(e)}")
    if profile is None:
        raise HTTPException(status_code=404, detail="Complete your academic profile first")

    # catalog reads are blocking SQLAlchemy calls
    return await run_in_threadpool(_rank_stored_profile, db_session, profile, limit)


@router.post("/score", response_model=RankedUniversity, summary="Score one university")
def score(request: ScoreRequest):
    try:
        return MatchingEngine().score_single_university(request.profile, request.university)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))


# =============================================================================
# CATALOG
# =============================================================================

@router.get("/universities", response_model=List[UniversityRecord], summary="Search catalog universities")
def search_catalog(
    q: str = "",
    country: Optional[str] = None,
    type: Optional[InstitutionType] = None,
    limit: int = Query(DEFAULT_CATALOG_LIMIT, ge=1, le=MAX_CATALOG_LIMIT),
    db_session=Depends(get_db),
):
    """Approved universities whose name or a program contains `q`."""
    filters = CatalogFilters(country=country, type=type)
    db: Session
    with db_session as db:
        return search_universities(db, q, filters, limit)


@router.get("/universities/{university_id}", response_model=UniversityRecord, summary="Fetch one university")
def read_university(university_id: str, db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        try:
            return get_university(db, university_id)
        except UniversityNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidInput as e:
            raise HTTPException(status_code=422, detail=str(e))


# =============================================================================
# SAVED UNIVERSITIES
# =============================================================================

@router.get("/saved", response_model=List[SavedUniversity], summary="My saved universities")
def list_saved(current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        return saved_universities.get_saved_universities(db, current.id)


@router.get("/saved/{university_id}", summary="Is this university saved")
def check_saved(university_id: str, current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        return {"university_id": university_id,
                "saved": saved_universities.is_university_saved(db, current.id, university_id)}


@router.post("/saved/{university_id}", response_model=SavedUniversity, summary="Save a university")
def save(university_id: str, current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        try:
            return saved_universities.save_university(db, current.id, university_id)
        except UniversityNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidInput as e:
            raise HTTPException(status_code=422, detail=str(e))


@router.delete("/saved/{university_id}", summary="Remove a saved university")
def unsave(university_id: str, current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        removed = saved_universities.remove_saved_university(db, current.id, university_id)
    if not removed:
        raise HTTPException(status_code=404, detail="University is not on your saved list")
    return {"status": "ok", "university_id": university_id}


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Matching engine health check")
def health_check():
    """Check if matching engine is operational."""
    return {"status": "ok", "engine": "matching", "version": MatchingEngine().version}
