# Ledger and transaction tables share the declarative Base from db.py
from db import Base

__all__ = ["Base"]
