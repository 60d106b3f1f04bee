from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime

from .base import Base


class SubscriptionTransaction(Base):
    __tablename__ = "subscription_transactions"

    transaction_id = Column(String(128), primary_key=True)
    user_id = Column(String(128), nullable=False, index=True)
    plan_id = Column(String(32), nullable=False)
    amount = Column(Integer, nullable=False, default=0)
    currency = Column(String(8), nullable=False, default="INR")
    status = Column(String(16), nullable=False, default="completed")
    payment_method = Column(String(64))
    gateway_order_id = Column(String(128))
    gateway_payment_id = Column(String(128))
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
