"""
Ledger State Transitions

Pure functions from (LedgerState, now) to a new LedgerState.
Nothing here touches the database; the service persists whatever these
return with a single conditional write.

`reconcile` is the lazy expiry/monthly-reset step that runs before every
quota decision. It is idempotent: reconciling an already reconciled state
at the same instant returns an equal state.
"""

import calendar
from datetime import datetime, timedelta, timezone

from .constants import FeatureKey, LedgerStatus, FREE_TIER_ID
from .contracts import LedgerState
from .tiers import SubscriptionTier


def utcnow() -> datetime:
    """Naive UTC, matching how the ledger columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def add_one_month(moment: datetime) -> datetime:
    if moment.month == 12:
        year, month = moment.year + 1, 1
    else:
        year, month = moment.year, moment.month + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def new_ledger(user_id: str, now: datetime) -> LedgerState:
    """Fresh free-tier ledger with an empty current window."""
    return LedgerState(
        user_id=user_id,
        plan_id=FREE_TIER_ID,
        status=LedgerStatus.ACTIVE,
        usage={},
        usage_reset_at=month_start(now),
    )


def downgrade_if_expired(state: LedgerState, now: datetime) -> LedgerState:
    """
    Drop a lapsed paid plan back to free.

    Applies to active and cancelled ledgers alike; a cancelled plan keeps
    its benefits until expires_at and is downgraded here afterwards.
    """
    if state.expires_at is None or now <= state.expires_at:
        return state
    return state.model_copy(update={
        "plan_id": FREE_TIER_ID,
        "status": LedgerStatus.ACTIVE.value,
        "expires_at": None,
        "cancelled_at": None,
        "usage": {},
        "usage_reset_at": month_start(now),
    })


def reset_usage_if_due(state: LedgerState, now: datetime) -> LedgerState:
    """Zero the counters once the monthly window has passed."""
    if now <= add_one_month(state.usage_reset_at):
        return state
    return state.model_copy(update={
        "usage": {},
        "usage_reset_at": month_start(now),
    })


def reconcile(state: LedgerState, now: datetime) -> LedgerState:
    return reset_usage_if_due(downgrade_if_expired(state, now), now)


def increment(state: LedgerState, feature: FeatureKey) -> LedgerState:
    key = FeatureKey(feature).value
    usage = dict(state.usage)
    usage[key] = usage.get(key, 0) + 1
    return state.model_copy(update={"usage": usage})


def apply_upgrade(state: LedgerState, tier: SubscriptionTier, now: datetime) -> LedgerState:
    """New paid period from now, with fresh counters."""
    expires_at = None
    if tier.billing_period_days:
        expires_at = now + timedelta(days=tier.billing_period_days)
    return state.model_copy(update={
        "plan_id": tier.id,
        "status": LedgerStatus.ACTIVE.value,
        "expires_at": expires_at,
        "cancelled_at": None,
        "usage": {},
        "usage_reset_at": month_start(now),
    })


def apply_cancel(state: LedgerState, now: datetime) -> LedgerState:
    """
    Mark the plan cancelled. Plan and usage stay until expires_at passes.
    A plan without an expiry (free) has nothing to cancel.
    """
    if state.expires_at is None or state.status == LedgerStatus.CANCELLED:
        return state
    return state.model_copy(update={
        "status": LedgerStatus.CANCELLED.value,
        "cancelled_at": now,
    })
