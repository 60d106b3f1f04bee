"""
Data Contracts for the Quota Enforcement Service

LedgerState is the in-memory shape of one user's usage ledger; the
service works on it and writes it back with a compare-and-set.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator

from .constants import FeatureKey, LedgerStatus, FREE_TIER_ID


class LedgerState(BaseModel):
    user_id: str
    plan_id: str = FREE_TIER_ID
    status: LedgerStatus = LedgerStatus.ACTIVE
    expires_at: Optional[datetime] = None
    usage: Dict[str, int] = Field(default_factory=dict)
    usage_reset_at: datetime
    cancelled_at: Optional[datetime] = None
    version: int = 0

    class Config:
        from_attributes = True
        use_enum_values = True

    @field_validator("usage", mode="before")
    @classmethod
    def _clean_usage(cls, value):
        # stored as JSON; treat a missing column as no usage yet
        if not value:
            return {}
        return {str(FeatureKey(k).value): int(v) for k, v in value.items()}

    @field_validator("usage")
    @classmethod
    def _non_negative(cls, value):
        for key, count in value.items():
            if count < 0:
                raise ValueError(f"usage[{key}] must be >= 0")
        return value

    def used(self, feature: FeatureKey) -> int:
        return self.usage.get(FeatureKey(feature).value, 0)


class QuotaDecision(BaseModel):
    """Answer to "may this user use this feature now"."""
    allowed: bool
    remaining: Union[int, Literal["unlimited"]]
    feature: FeatureKey
    plan_id: str
    limit: int
    used: int
    reason: Optional[str] = None

    class Config:
        use_enum_values = True


class PaymentConfirmation(BaseModel):
    """
    Payment reference already verified by the payment gateway collaborator.
    This service never checks signatures itself.
    """
    transaction_id: str = Field(..., min_length=1)
    payment_method: Optional[str] = None
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None


class FeatureUsage(BaseModel):
    feature: FeatureKey
    used: int
    limit: int
    remaining: Union[int, Literal["unlimited"]]

    class Config:
        use_enum_values = True


class UsageSummary(BaseModel):
    """Read-only view of a user's plan for dashboards."""
    user_id: str
    plan_id: str
    plan_name: str
    status: LedgerStatus
    expires_at: Optional[datetime] = None
    usage_reset_at: datetime
    features: List[FeatureUsage] = Field(default_factory=list)

    class Config:
        use_enum_values = True


class TransactionOut(BaseModel):
    transaction_id: str
    user_id: str
    plan_id: str
    amount: int
    currency: str
    status: str
    payment_method: Optional[str] = None
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SubscriptionAnalytics(BaseModel):
    total_subscriptions: int = 0
    active_subscriptions: int = 0
    plan_distribution: Dict[str, int] = Field(default_factory=dict)
    monthly_revenue: int = 0
