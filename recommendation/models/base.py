# Catalog tables register on the shared declarative Base from db.py,
# so init_db() creates them alongside the subscription tables
from db import Base

__all__ = ["Base"]
