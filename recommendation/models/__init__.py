# Export all recommendation models for easy imports
from .base import Base
from .university import CatalogUniversity
from .saved_university import SavedUniversity

__all__ = [
    "Base",
    "CatalogUniversity",
    "SavedUniversity",
]
