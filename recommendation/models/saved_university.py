from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey

from .base import Base


class SavedUniversity(Base):
    """One catalog university on one student's saved list."""
    __tablename__ = "saved_universities"

    user_id = Column(String, primary_key=True)
    university_id = Column(
        String,
        ForeignKey("universities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    saved_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
