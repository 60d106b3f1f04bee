from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, JSON

from .base import Base


class UsageLedger(Base):
    __tablename__ = "usage_ledgers"

    user_id = Column(String(128), primary_key=True)
    plan_id = Column(String(32), nullable=False, default="free")
    status = Column(String(16), nullable=False, default="active")
    expires_at = Column(DateTime(timezone=False), nullable=True)
    usage = Column(JSON, nullable=False, default=dict)
    usage_reset_at = Column(DateTime(timezone=False), nullable=False)
    cancelled_at = Column(DateTime(timezone=False), nullable=True)

    # bumped on every write; conditional updates compare against it
    version = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
