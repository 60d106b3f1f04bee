"""
Quota Enforcement Service

Composes the tier registry and the usage ledger to answer "may user U
use feature X now", and records consumption. This is the only code path
that increments a ledger's usage counters.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..models import SubscriptionTransaction
from .constants import (
    FeatureKey,
    LedgerStatus,
    UNLIMITED,
    FREE_TIER_ID,
    FEATURE_LABELS,
    MAX_LEDGER_WRITE_RETRIES,
)
from .contracts import (
    LedgerState,
    QuotaDecision,
    PaymentConfirmation,
    FeatureUsage,
    UsageSummary,
    TransactionOut,
    SubscriptionAnalytics,
)
from .errors import LedgerNotFound, LedgerWriteConflict
from .tiers import get_tier, list_tiers
from .transitions import (
    utcnow,
    new_ledger,
    reconcile,
    downgrade_if_expired,
    increment,
    apply_upgrade,
    apply_cancel,
)
from . import ledger_store

logger = logging.getLogger(__name__)


def remaining_for(limit: int, used: int):
    if limit == UNLIMITED:
        return "unlimited"
    return max(0, limit - used)


class QuotaService:
    """
    Quota enforcement bound to one database session.

    Every mutation follows the same loop: load the ledger, compute the
    new state with a pure transition, write it back conditionally on the
    version that was read, and retry from a fresh read on conflict.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    # -------------------------------------------------------------------------
    # Core operations
    # -------------------------------------------------------------------------

    def check_quota(self, user_id: str, feature: FeatureKey) -> QuotaDecision:
        """
        Decide whether the user may use `feature` now.

        Creates a free ledger for unknown users and persists any pending
        expiry downgrade or monthly reset as part of the check.
        """
        feature = FeatureKey(feature)
        state = self._mutate(user_id, lambda s, now: s, create=True)

        tier = get_tier(state.plan_id)
        limit = tier.limit_for(feature)
        used = state.used(feature)

        if limit == UNLIMITED:
            allowed = True
            reason = None
        else:
            allowed = used < limit
            reason = None if allowed else self._denial_reason(feature, limit)

        return QuotaDecision(
            allowed=allowed,
            remaining=remaining_for(limit, used),
            feature=feature,
            plan_id=state.plan_id,
            limit=limit,
            used=used,
            reason=reason,
        )

    def record_usage(self, user_id: str, feature: FeatureKey) -> LedgerState:
        """
        Consume exactly one unit of `feature`.

        Does not re-check the quota; call it once per actual consumption,
        after check_quota allowed the action.
        """
        feature = FeatureKey(feature)
        state = self._mutate(user_id, lambda s, now: increment(s, feature))
        logger.info(f"Recorded {feature.value} for user {user_id} (now {state.used(feature)})")
        return state

    def upgrade(
        self,
        user_id: str,
        plan_id: str,
        payment: PaymentConfirmation
    ) -> LedgerState:
        """
        Activate `plan_id` for one billing period from now and clear usage.

        Raises:
            UnknownTier: if plan_id is not a registered plan
        """
        tier = get_tier(plan_id)

        if ledger_store.transaction_exists(self.db, payment.transaction_id):
            logger.info(f"Payment {payment.transaction_id} already applied; skipping upgrade")
            return self._mutate(user_id, lambda s, now: s, create=True)

        def build_transaction(now: datetime) -> SubscriptionTransaction:
            return SubscriptionTransaction(
                transaction_id=payment.transaction_id,
                user_id=user_id,
                plan_id=tier.id,
                amount=tier.price,
                currency=tier.currency,
                status="completed",
                payment_method=payment.payment_method,
                gateway_order_id=payment.gateway_order_id,
                gateway_payment_id=payment.gateway_payment_id,
                created_at=now,
            )

        try:
            state = self._mutate(
                user_id,
                lambda s, now: apply_upgrade(s, tier, now),
                create=True,
                transaction_factory=build_transaction,
            )
        except LedgerWriteConflict:
            # a concurrent request applied this same payment
            if ledger_store.transaction_exists(self.db, payment.transaction_id):
                return self._mutate(user_id, lambda s, now: s)
            raise
        logger.info(f"User {user_id} upgraded to {tier.id} until {state.expires_at}")
        return state

    def cancel(self, user_id: str) -> LedgerState:
        """
        Cancel at period end. The plan stays usable until expires_at.

        Raises:
            LedgerNotFound: if the user has no ledger
        """
        state = self._mutate(user_id, lambda s, now: apply_cancel(s, now))
        logger.info(f"User {user_id} cancelled plan {state.plan_id} (expires {state.expires_at})")
        return state

    def downgrade_if_expired(self, user_id: str) -> LedgerState:
        """
        Apply a pending expiry downgrade on its own.

        Raises:
            LedgerNotFound: if the user has no ledger
        """
        return self._mutate(user_id, lambda s, now: downgrade_if_expired(s, now))

    # -------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------

    def get_usage_summary(self, user_id: str) -> UsageSummary:
        """
        Reconciled view for display. Writes nothing; a user without a
        ledger sees what a fresh free ledger would show.
        """
        now = self.clock()
        state = ledger_store.load_ledger(self.db, user_id) or new_ledger(user_id, now)
        state = reconcile(state, now)
        tier = get_tier(state.plan_id)

        features: List[FeatureUsage] = []
        for feature in FeatureKey:
            limit = tier.limit_for(feature)
            used = state.used(feature)
            features.append(FeatureUsage(
                feature=feature,
                used=used,
                limit=limit,
                remaining=remaining_for(limit, used),
            ))

        return UsageSummary(
            user_id=user_id,
            plan_id=tier.id,
            plan_name=tier.name,
            status=state.status,
            expires_at=state.expires_at,
            usage_reset_at=state.usage_reset_at,
            features=features,
        )

    def get_user_transactions(self, user_id: str) -> List[TransactionOut]:
        return [
            TransactionOut.model_validate(row)
            for row in ledger_store.list_transactions(self.db, user_id)
        ]

    def subscription_analytics(self) -> SubscriptionAnalytics:
        """Plan distribution and monthly revenue of active ledgers."""
        prices = {tier.id: tier.price for tier in list_tiers()}
        analytics = SubscriptionAnalytics(
            plan_distribution={tier.id: 0 for tier in list_tiers()},
        )

        for plan_id, status, count in ledger_store.count_by_plan_and_status(self.db):
            analytics.total_subscriptions += count
            if status != LedgerStatus.ACTIVE.value:
                continue
            analytics.active_subscriptions += count
            analytics.plan_distribution[plan_id] = analytics.plan_distribution.get(plan_id, 0) + count
            if plan_id != FREE_TIER_ID:
                analytics.monthly_revenue += prices.get(plan_id, 0) * count

        return analytics

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _mutate(
        self,
        user_id: str,
        transition: Callable[[LedgerState, datetime], LedgerState],
        create: bool = False,
        transaction_factory: Optional[Callable[[datetime], SubscriptionTransaction]] = None
    ) -> LedgerState:
        """
        Read-modify-write one ledger with compare-and-set.

        `transition` always runs on top of `reconcile`, so every write also
        carries any pending expiry downgrade or monthly reset.

        Raises:
            LedgerNotFound: if the ledger is missing and create is False
            LedgerWriteConflict: after MAX_LEDGER_WRITE_RETRIES lost races
        """
        for attempt in range(1, MAX_LEDGER_WRITE_RETRIES + 1):
            now = self.clock()
            current = ledger_store.load_ledger(self.db, user_id)

            if current is None:
                if not create:
                    raise LedgerNotFound(user_id)
                if not ledger_store.insert_ledger(self.db, new_ledger(user_id, now), now):
                    logger.warning(f"Ledger for {user_id} created concurrently (attempt {attempt})")
                    continue
                logger.info(f"Created free ledger for user {user_id}")
                current = ledger_store.load_ledger(self.db, user_id)
                if current is None:
                    continue

            target = transition(reconcile(current, now), now)
            transaction = transaction_factory(now) if transaction_factory else None

            if target == current and transaction is None:
                return current

            self._log_lifecycle(current, target)

            if ledger_store.compare_and_set(self.db, current.version, target, now, transaction):
                return target.model_copy(update={"version": current.version + 1})

            logger.warning(f"Ledger write conflict for {user_id} (attempt {attempt})")

        raise LedgerWriteConflict(user_id, MAX_LEDGER_WRITE_RETRIES)

    @staticmethod
    def _log_lifecycle(before: LedgerState, after: LedgerState) -> None:
        if before.plan_id != FREE_TIER_ID and after.plan_id == FREE_TIER_ID:
            logger.info(f"Plan {before.plan_id} expired for user {before.user_id}; downgraded to free")
        elif after.usage_reset_at > before.usage_reset_at and before.usage:
            logger.info(f"Monthly usage reset for user {before.user_id}")

    @staticmethod
    def _denial_reason(feature: FeatureKey, limit: int) -> str:
        label = FEATURE_LABELS.get(feature, feature.value)
        if limit == 0:
            return f"{label} is not available on your current plan. Upgrade to Premium or Pro."
        return f"Monthly {label} limit ({limit}) reached. Upgrade to continue."
