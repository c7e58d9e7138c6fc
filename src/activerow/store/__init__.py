"""Store handles the engine issues statements against."""

from activerow.store.base import StoreHandle
from activerow.store.database import DatabaseStore

__all__ = ["StoreHandle", "DatabaseStore"]
