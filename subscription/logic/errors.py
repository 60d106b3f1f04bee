class UnknownTier(LookupError):
    """Plan id not present in the tier registry."""

    def __init__(self, tier_id):
        super().__init__(f"Unknown subscription tier: {tier_id!r}")
        self.tier_id = tier_id


class LedgerNotFound(LookupError):
    def __init__(self, user_id):
        super().__init__(f"No usage ledger for user {user_id!r}")
        self.user_id = user_id


class LedgerWriteConflict(RuntimeError):
    """Conditional ledger write kept losing to concurrent writers."""

    def __init__(self, user_id, attempts):
        super().__init__(f"Ledger for user {user_id!r} changed concurrently {attempts} times; giving up")
        self.user_id = user_id
        self.attempts = attempts
