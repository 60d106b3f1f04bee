from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, JSON
from sqlalchemy.orm import Session

from .base import Base


class CatalogUniversity(Base):
    __tablename__ = "universities"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    country = Column(String, nullable=False, index=True)
    city = Column(String)
    website = Column(String)
    type = Column(String, nullable=False, default="public")

    cgpa_requirement = Column(Float)
    ielts_requirement = Column(Float)
    toefl_requirement = Column(Integer)
    gre_requirement = Column(Integer)

    tuition_min = Column(Integer)
    tuition_max = Column(Integer)

    programs_offered = Column(JSON)
    ranking_overall = Column(Integer, index=True)
    admin_approved = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    EDITABLE_FIELDS = (
        "name", "country", "city", "website", "type",
        "cgpa_requirement", "ielts_requirement", "toefl_requirement", "gre_requirement",
        "tuition_min", "tuition_max", "programs_offered", "ranking_overall", "admin_approved",
    )

    @classmethod
    def upsert(cls, db: Session, entry: dict):
        obj = db.get(cls, entry["id"])
        if obj:
            for field in cls.EDITABLE_FIELDS:
                if field in entry:
                    setattr(obj, field, entry[field])
        else:
            obj = cls(id=entry["id"], **{f: entry[f] for f in cls.EDITABLE_FIELDS if f in entry})
            db.add(obj)
        return obj
