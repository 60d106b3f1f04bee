"""
Subscription API Routes

Quota checks, usage recording and plan changes for the signed-in user.
Payment confirmations arrive here already verified by the gateway.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from db import get_db
from utils.auth_utils import auth_user, require_admin, CurrentUser
from .logic.constants import FeatureKey
from .logic.contracts import (
    LedgerState,
    QuotaDecision,
    PaymentConfirmation,
    UsageSummary,
    TransactionOut,
    SubscriptionAnalytics,
)
from .logic.errors import UnknownTier, LedgerNotFound, LedgerWriteConflict
from .logic.quota_service import QuotaService
from .logic.tiers import SubscriptionTier, list_tiers


router = APIRouter(prefix="/subscription", tags=["subscription"])


class UpgradeRequest(BaseModel):
    plan_id: str
    payment: PaymentConfirmation


def _raise_http(e: Exception):
    if isinstance(e, UnknownTier):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, LedgerNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, LedgerWriteConflict):
        raise HTTPException(status_code=409, detail="Subscription is being updated, please retry")
    raise e


@router.get("/plans", response_model=List[SubscriptionTier], summary="List subscription plans")
def plans():
    return list_tiers()


@router.get("/me", response_model=UsageSummary, summary="My plan and usage")
def my_subscription(current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        try:
            return QuotaService(db).get_usage_summary(current.id)
        except UnknownTier as e:
            _raise_http(e)


@router.post("/quota/{feature}", response_model=QuotaDecision, summary="Check quota for a feature")
def check_quota(
    feature: FeatureKey,
    current: CurrentUser = Depends(auth_user),
    db_session=Depends(get_db),
):
    db: Session
    with db_session as db:
        try:
            return QuotaService(db).check_quota(current.id, feature)
        except (UnknownTier, LedgerWriteConflict) as e:
            _raise_http(e)


@router.post("/usage/{feature}", response_model=LedgerState, summary="Record one use of a feature")
def record_usage(
    feature: FeatureKey,
    current: CurrentUser = Depends(auth_user),
    db_session=Depends(get_db),
):
    db: Session
    with db_session as db:
        try:
            return QuotaService(db).record_usage(current.id, feature)
        except (LedgerNotFound, LedgerWriteConflict) as e:
            _raise_http(e)


@router.post("/upgrade", response_model=LedgerState, summary="Activate a paid plan")
def upgrade(
    request: UpgradeRequest,
    current: CurrentUser = Depends(auth_user),
    db_session=Depends(get_db),
):
    db: Session
    with db_session as db:
        try:
            return QuotaService(db).upgrade(current.id, request.plan_id, request.payment)
        except (UnknownTier, LedgerWriteConflict) as e:
            _raise_http(e)


@router.post("/cancel", response_model=LedgerState, summary="Cancel at period end")
def cancel(current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        try:
            return QuotaService(db).cancel(current.id)
        except (LedgerNotFound, LedgerWriteConflict) as e:
            _raise_http(e)


@router.get("/transactions", response_model=List[TransactionOut], summary="My payment history")
def transactions(current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    db: Session
    with db_session as db:
        return QuotaService(db).get_user_transactions(current.id)


@router.get("/analytics", response_model=SubscriptionAnalytics, summary="Subscription analytics (admin)")
def analytics(current: CurrentUser = Depends(auth_user), db_session=Depends(get_db)):
    require_admin(current)
    db: Session
    with db_session as db:
        return QuotaService(db).subscription_analytics()
