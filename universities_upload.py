import os
import csv
import json
import logging
import argparse
from typing import Any, Dict, Iterable, List

from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.orm import Session

from db import get_db, init_db
from recommendation.logic.contracts import UniversityRecord
from recommendation.models import CatalogUniversity

load_dotenv()

logger = logging.getLogger(__name__)

INT_FIELDS = ("toefl_requirement", "gre_requirement", "tuition_min", "tuition_max", "ranking_overall")
FLOAT_FIELDS = ("cgpa_requirement", "ielts_requirement")
DEFAULT_DATA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data/universities.json")


def _clean_number(value, cast):
    if value is None or value == "":
        return None
    return cast(value)


def normalize_entry(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce a CSV/JSON row into catalog column types."""
    entry = {k: (v.strip() if isinstance(v, str) else v) for k, v in raw.items()}
    for field in INT_FIELDS:
        if field in entry:
            entry[field] = _clean_number(entry[field], lambda v: int(float(v)))
    for field in FLOAT_FIELDS:
        if field in entry:
            entry[field] = _clean_number(entry[field], float)
    programs = entry.get("programs_offered")
    if isinstance(programs, str):
        entry["programs_offered"] = [p.strip() for p in programs.split(";") if p.strip()]
    if isinstance(entry.get("admin_approved"), str):
        entry["admin_approved"] = entry["admin_approved"].lower() in ("1", "true", "yes")
    if isinstance(entry.get("type"), str):
        entry["type"] = entry["type"].lower() or "public"
    if entry.get("id") is not None:
        entry["id"] = str(entry["id"])
    return entry


def load_entries(path: str) -> List[Dict[str, Any]]:
    if path.endswith(".csv"):
        with open(path, newline="", encoding="utf-8") as f:
            return list(csv.DictReader(f))
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def upsert_universities(db: Session, entries: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """
    Validate and upsert catalog rows. Invalid rows are skipped and logged.
    """
    stats = {"upserted": 0, "skipped": 0}
    for raw in entries:
        try:
            entry = normalize_entry(raw)
            UniversityRecord.model_validate(entry)
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning(f"Skipping university {raw.get('id') or raw.get('name')!r}: {e}")
            stats["skipped"] += 1
            continue
        CatalogUniversity.upsert(db, entry)
        stats["upserted"] += 1
    db.flush()
    return stats


def import_data(path: str = DEFAULT_DATA_PATH) -> Dict[str, int]:
    init_db()
    entries = load_entries(path)
    with get_db() as db:
        stats = upsert_universities(db, entries)
    logger.info(f"Imported universities from {path}: {stats}")
    return stats


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Load universities into the catalog")
    parser.add_argument("path", nargs="?", default=DEFAULT_DATA_PATH, help="JSON or CSV file")
    args = parser.parse_args()
    print(import_data(args.path))
