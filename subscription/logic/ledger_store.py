"""
Ledger Store

Row-level persistence for usage ledgers. Every write is a conditional
UPDATE keyed on (user_id, version), so a writer that read a stale row
affects zero rows instead of overwriting someone else's increment.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import UsageLedger, SubscriptionTransaction
from .contracts import LedgerState


def load_ledger(db: Session, user_id: str) -> Optional[LedgerState]:
    # always read committed state, never a cached identity-map copy
    row = db.execute(
        select(UsageLedger).where(UsageLedger.user_id == user_id)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if row is None:
        return None
    return LedgerState.model_validate(row)


def insert_ledger(db: Session, state: LedgerState, now: datetime) -> bool:
    """
    Insert a brand new ledger. Returns False if another request created
    the same user's ledger first.
    """
    db.add(UsageLedger(
        user_id=state.user_id,
        plan_id=state.plan_id,
        status=state.status,
        expires_at=state.expires_at,
        usage=dict(state.usage),
        usage_reset_at=state.usage_reset_at,
        cancelled_at=state.cancelled_at,
        version=0,
        created_at=now,
        updated_at=now,
    ))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    return True


def compare_and_set(
    db: Session,
    expected_version: int,
    state: LedgerState,
    now: datetime,
    transaction: Optional[SubscriptionTransaction] = None
) -> bool:
    """
    Write `state` only if the stored row is still at `expected_version`.

    An optional transaction row is committed together with the ledger
    update so an upgrade and its payment record land atomically.

    Returns:
        True if the row was updated, False on a version mismatch
    """
    result = db.execute(
        update(UsageLedger)
        .where(
            UsageLedger.user_id == state.user_id,
            UsageLedger.version == expected_version,
        )
        .values(
            plan_id=state.plan_id,
            status=state.status,
            expires_at=state.expires_at,
            usage=dict(state.usage),
            usage_reset_at=state.usage_reset_at,
            cancelled_at=state.cancelled_at,
            version=UsageLedger.version + 1,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        return False

    if transaction is not None:
        db.add(transaction)
        try:
            db.flush()
        except IntegrityError:
            # same payment reference recorded concurrently
            db.rollback()
            return False

    db.commit()
    return True


def transaction_exists(db: Session, transaction_id: str) -> bool:
    return db.get(SubscriptionTransaction, transaction_id) is not None


def list_transactions(db: Session, user_id: str) -> List[SubscriptionTransaction]:
    return list(db.execute(
        select(SubscriptionTransaction)
        .where(SubscriptionTransaction.user_id == user_id)
        .order_by(SubscriptionTransaction.created_at.desc())
    ).scalars().all())


def count_by_plan_and_status(db: Session):
    """Rows of (plan_id, status, count) across all ledgers."""
    return db.execute(
        select(UsageLedger.plan_id, UsageLedger.status, func.count())
        .group_by(UsageLedger.plan_id, UsageLedger.status)
    ).all()
