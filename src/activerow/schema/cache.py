"""Process-wide table schema cache."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from activerow.core.types import TableSchema
    from activerow.schema.introspector import SchemaIntrospector

logger = logging.getLogger(__name__)


class SchemaCache:
    """Maps table name to TableSchema, introspecting each table once.

    Entries are never invalidated. Concurrent misses for the same table wait
    on a per-table lock, so only the first caller hits the store.
    """

    def __init__(self, introspector: SchemaIntrospector) -> None:
        """Initialize the cache.

        Args:
            introspector: Used to describe tables on a miss
        """
        self._introspector = introspector
        self._schemas: dict[str, TableSchema] = {}
        self._table_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def _lock_for(self, table_name: str) -> threading.Lock:
        with self._guard:
            lock = self._table_locks.get(table_name)
            if lock is None:
                lock = threading.Lock()
                self._table_locks[table_name] = lock
            return lock

    def get(self, table_name: str) -> TableSchema:
        """Get a table's schema, introspecting it on first use.

        Args:
            table_name: Table name

        Returns:
            The cached TableSchema

        Raises:
            SchemaError: If introspection fails (nothing is cached then)
        """
        schema = self._schemas.get(table_name)
        if schema is not None:
            logger.debug(f"Getting table structure for {table_name} from cache")
            return schema

        with self._lock_for(table_name):
            schema = self._schemas.get(table_name)
            if schema is None:
                schema = self._introspector.introspect(table_name)
                self._schemas[table_name] = schema
            return schema

    def populate(self, table_name: str, schema: TableSchema) -> None:
        """Seed the cache with a known schema.

        An existing entry wins; the cache never replaces a schema.
        """
        with self._lock_for(table_name):
            self._schemas.setdefault(table_name, schema)
