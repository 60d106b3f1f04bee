# Export all subscription models for easy imports
from .base import Base
from .ledger import UsageLedger
from .transaction import SubscriptionTransaction

__all__ = [
    "Base",
    "UsageLedger",
    "SubscriptionTransaction",
]
