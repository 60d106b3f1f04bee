"""
Data Contracts for the Matching Engine

Defines Pydantic models for AcademicProfile and UniversityRecord (inputs)
and MatchResult / RankedUniversity (outputs).
These contracts are the API boundary for the matching engine.
"""

from datetime import datetime
from typing import List, Optional, Set
from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum

from .constants import CGPA_MAX, IELTS_MAX, TOEFL_MAX, GRE_MAX, MatchCategory


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class InstitutionType(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class AcademicProfile(BaseModel):
    """
    Input contract for the matching engine.
    Represents a student's academic attributes and hard preferences.
    Every numeric field is optional; absent means "not provided".
    """
    # Identity (optional, for tracking)
    student_id: Optional[str] = None

    # Academic scores
    cgpa: Optional[float] = Field(default=None, ge=0.0, le=CGPA_MAX)
    ielts_score: Optional[float] = Field(default=None, ge=0.0, le=IELTS_MAX)
    toefl_score: Optional[int] = Field(default=None, ge=0, le=TOEFL_MAX)
    gre_score: Optional[int] = Field(default=None, ge=0, le=GRE_MAX)

    # Budget (yearly tuition, same currency as the catalog)
    budget_min: Optional[int] = Field(default=None, ge=0)
    budget_max: Optional[int] = Field(default=None, ge=0)

    # Preferences
    preferred_countries: Set[str] = Field(default_factory=set)
    preferred_fields: Set[str] = Field(default_factory=set)

    @model_validator(mode="after")
    def _check_budget_bounds(self):
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_min > self.budget_max
        ):
            raise ValueError("budget_min must not exceed budget_max")
        return self


class UniversityRecord(BaseModel):
    """
    Canonical shape of an institution's requirements and costs.
    A requirement left as None is not evaluated; zero is a real requirement.
    """
    id: str
    name: str
    country: str
    type: InstitutionType = InstitutionType.PUBLIC
    city: Optional[str] = None
    website: Optional[str] = None

    # Admission requirements
    cgpa_requirement: Optional[float] = Field(default=None, ge=0.0, le=CGPA_MAX)
    ielts_requirement: Optional[float] = Field(default=None, ge=0.0, le=IELTS_MAX)
    toefl_requirement: Optional[int] = Field(default=None, ge=0, le=TOEFL_MAX)
    gre_requirement: Optional[int] = Field(default=None, ge=0, le=GRE_MAX)

    # Costs
    tuition_min: Optional[int] = Field(default=None, ge=0)
    tuition_max: Optional[int] = Field(default=None, ge=0)

    programs_offered: List[str] = Field(default_factory=list)
    ranking_overall: Optional[int] = Field(default=None, ge=1)
    admin_approved: bool = True

    class Config:
        use_enum_values = True

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        # catalog ids arrive as numbers from JSON clients and CSV imports
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_tuition_bounds(self):
        if (
            self.tuition_min is not None
            and self.tuition_max is not None
            and self.tuition_min > self.tuition_max
        ):
            raise ValueError("tuition_min must not exceed tuition_max")
        return self


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class MatchDetails(BaseModel):
    """Plain requirement checks for display. None means not comparable."""
    cgpa_match: Optional[bool] = None
    english_match: Optional[bool] = None
    budget_match: Optional[bool] = None
    gre_match: Optional[bool] = None


class MatchResult(BaseModel):
    """Compatibility of one profile with one university."""
    score: int = Field(ge=0, le=100)
    category: MatchCategory
    details: MatchDetails = Field(default_factory=MatchDetails)

    class Config:
        use_enum_values = True


class RankedUniversity(UniversityRecord):
    """A university record carrying its computed match."""
    match: MatchResult


class SavedUniversity(UniversityRecord):
    """A catalog university on a student's saved list."""
    saved_at: datetime


# =============================================================================
# INTERMEDIATE DATA STRUCTURES
# =============================================================================

class DimensionScore(BaseModel):
    """Points earned on one evaluated dimension."""
    dimension: str
    earned: int = Field(ge=0)
    possible: int = Field(gt=0)


class CatalogFilters(BaseModel):
    """Broad catalog filters applied before scoring."""
    country: Optional[str] = None
    type: Optional[InstitutionType] = None
    tuition_min: Optional[int] = Field(default=None, ge=0)
    tuition_max: Optional[int] = Field(default=None, ge=0)
    admin_approved: Optional[bool] = True

    class Config:
        use_enum_values = True
