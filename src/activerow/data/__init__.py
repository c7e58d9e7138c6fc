"""Loading and persisting records."""

from activerow.data.loader import RecordLoader
from activerow.data.persistence import PersistenceEngine

__all__ = ["RecordLoader", "PersistenceEngine"]
