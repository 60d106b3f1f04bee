"""
Saved Universities

A student's shortlist of catalog universities, newest first.
Saving the same university again refreshes its saved_at.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import CatalogUniversity, SavedUniversity
from .adapter import to_university_record
from .contracts import SavedUniversity as SavedUniversityOut
from .errors import InvalidInput, UniversityNotFound

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def save_university(
    db: Session,
    user_id: str,
    university_id: str,
    now: Optional[datetime] = None
) -> SavedUniversityOut:
    """
    Add a catalog university to the user's saved list.

    Raises:
        UniversityNotFound: if the university is not in the catalog
    """
    university_id = str(university_id)
    row = db.get(CatalogUniversity, university_id)
    if row is None:
        raise UniversityNotFound(university_id)

    saved_at = now or _utcnow()
    entry = db.get(SavedUniversity, (user_id, university_id))
    if entry:
        entry.saved_at = saved_at
    else:
        db.add(SavedUniversity(user_id=user_id, university_id=university_id, saved_at=saved_at))
    db.flush()

    logger.info(f"User {user_id} saved university {university_id}")
    return SavedUniversityOut(**to_university_record(row).model_dump(), saved_at=saved_at)


def remove_saved_university(db: Session, user_id: str, university_id: str) -> bool:
    """Returns False if the university was not on the list."""
    entry = db.get(SavedUniversity, (user_id, str(university_id)))
    if entry is None:
        return False
    db.delete(entry)
    db.flush()
    logger.info(f"User {user_id} removed saved university {university_id}")
    return True


def is_university_saved(db: Session, user_id: str, university_id: str) -> bool:
    return db.get(SavedUniversity, (user_id, str(university_id))) is not None


def get_saved_universities(db: Session, user_id: str) -> List[SavedUniversityOut]:
    """
    Saved universities with full catalog details, newest first.
    Entries whose catalog row is gone or invalid are skipped.
    """
    rows = db.execute(
        select(SavedUniversity, CatalogUniversity)
        .outerjoin(CatalogUniversity, CatalogUniversity.id == SavedUniversity.university_id)
        .where(SavedUniversity.user_id == user_id)
        .order_by(SavedUniversity.saved_at.desc(), SavedUniversity.university_id.asc())
    ).all()

    saved: List[SavedUniversityOut] = []
    for entry, university in rows:
        if university is None:
            logger.warning(f"Saved university {entry.university_id} no longer in catalog, skipping")
            continue
        try:
            record = to_university_record(university)
        except InvalidInput as e:
            logger.warning(f"Skipping saved university: {e}")
            continue
        saved.append(SavedUniversityOut(**record.model_dump(), saved_at=entry.saved_at))
    return saved
