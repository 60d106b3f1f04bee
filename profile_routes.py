"""
Profile API Routes

Endpoints to save/update and fetch academic profiles from MongoDB.
Collection: profiles (in the unimatch database)
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from typing import Dict, Any, Optional

from db_mongo import profiles_collection
from recommendation.logic.contracts import AcademicProfile

router = APIRouter(prefix="/api/profile", tags=["profile"])

PROFILE_FIELDS = (
    "cgpa", "ielts_score", "toefl_score", "gre_score",
    "budget_min", "budget_max", "preferred_countries", "preferred_fields",
)


async def get_profile(user_id: str) -> Optional[AcademicProfile]:
    """Read a stored profile as the matching engine's input contract."""
    document = await profiles_collection.find_one({"user_id": user_id}, {"_id": 0})
    if not document:
        return None
    data = {k: document.get(k) for k in PROFILE_FIELDS if document.get(k) is not None}
    return AcademicProfile(student_id=user_id, **data)


# ─────────────────────────────────────────────
# GET /api/profile/{user_id}
# ─────────────────────────────────────────────
@router.get("/{user_id}", summary="Fetch academic profile")
async def read_profile(user_id: str):
    """
    Return profile for the given user_id.
    Returns empty object with status 200 if not found.
    """
    try:
        profile = await profiles_collection.find_one(
            {"user_id": user_id},
            {"_id": 0}  # exclude Mongo ObjectId
        )
        return profile if profile else {}

    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": f"Database error: {str(e)}"},
        )


# ─────────────────────────────────────────────
# POST /api/profile
# ─────────────────────────────────────────────
@router.post("", summary="Create or update academic profile")
async def save_profile(payload: Dict[str, Any] = Body(...)):
    """
    Create or update a profile document.
    Uses user_id as the unique key with upsert.
    """
    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id is required")

    # Remove None values so partial updates don't overwrite with null
    fields = {k: payload[k] for k in PROFILE_FIELDS if payload.get(k) is not None}

    try:
        validated = AcademicProfile(**fields)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid academic profile: {str(e)}")

    profile_data = validated.model_dump(include=set(fields))
    for key in ("preferred_countries", "preferred_fields"):
        if key in profile_data:
            profile_data[key] = sorted(profile_data[key])
    profile_data["user_id"] = user_id
    profile_data["updated_at"] = datetime.now(timezone.utc)

    try:
        await profiles_collection.update_one(
            {"user_id": user_id},
            {"$set": profile_data},
            upsert=True,
        )
        return {"status": "ok", "message": "Profile saved"}

    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "message": f"Database error: {str(e)}"},
        )
