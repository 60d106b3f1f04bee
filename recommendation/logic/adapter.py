"""
Data Adapter for the Matching Engine

Reads catalog rows and transforms them into UniversityRecord contracts.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO ranking/classification
- NO DB writes
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..models import CatalogUniversity
from .contracts import UniversityRecord
from .errors import InvalidInput

logger = logging.getLogger(__name__)


def normalize_programs(raw: Any) -> List[str]:
    """
    Catalog rows store programs as a JSON list, but older imports wrote a
    comma separated string. Always return a clean list.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        return [p.strip() for p in raw.split(",") if p.strip()]
    return [str(p).strip() for p in raw if p and str(p).strip()]


def normalize_type(raw: Optional[str]) -> str:
    if raw and raw.strip().lower() == "private":
        return "private"
    return "public"


def row_to_dict(row: CatalogUniversity) -> Dict[str, Any]:
    return {
        "id": str(row.id),
        "name": row.name,
        "country": row.country,
        "type": normalize_type(row.type),
        "city": row.city,
        "website": row.website,
        "cgpa_requirement": row.cgpa_requirement,
        "ielts_requirement": row.ielts_requirement,
        "toefl_requirement": row.toefl_requirement,
        "gre_requirement": row.gre_requirement,
        "tuition_min": row.tuition_min,
        "tuition_max": row.tuition_max,
        "programs_offered": normalize_programs(row.programs_offered),
        "ranking_overall": row.ranking_overall,
        "admin_approved": bool(row.admin_approved),
    }


def to_university_record(row: CatalogUniversity) -> UniversityRecord:
    """
    Raises:
        InvalidInput: if the row violates the record invariants
    """
    data = row_to_dict(row)
    try:
        return UniversityRecord.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(f"Catalog row {data['id']!r} is invalid: {e}") from e


def transform_rows(rows: List[CatalogUniversity]) -> List[UniversityRecord]:
    """Convert rows, skipping the ones that fail validation."""
    records: List[UniversityRecord] = []
    for row in rows:
        try:
            records.append(to_university_record(row))
        except InvalidInput as e:
            logger.warning(f"Skipping catalog row: {e}")
    return records
