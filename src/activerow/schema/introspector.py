"""Schema introspection: turns a store's column description into a TableSchema."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from activerow.core.types import ColumnDescriptor, TableSchema
from activerow.exceptions import SchemaError, StoreError

if TYPE_CHECKING:
    from activerow.store.base import StoreHandle

logger = logging.getLogger(__name__)


def column_from_row(row: dict[str, Any]) -> ColumnDescriptor:
    """Map one ``DESCRIBE`` row to a ColumnDescriptor."""
    extra = row.get("Extra") or ""
    return ColumnDescriptor(
        name=row["Field"],
        default_value=row.get("Default"),
        is_primary_key=row.get("Key") == "PRI",
        is_auto_generated="auto_increment" in extra.lower(),
    )


class SchemaIntrospector:
    """Reads table structure from the store."""

    def __init__(self, store: StoreHandle) -> None:
        self._store = store

    def introspect(self, table_name: str) -> TableSchema:
        """Describe ``table_name`` and build its schema.

        Args:
            table_name: Table to describe

        Returns:
            TableSchema with columns in declaration order

        Raises:
            SchemaError: If the table is missing or cannot be described
        """
        logger.debug(f"Getting table structure for {table_name} from server")
        try:
            rows = self._store.describe(table_name)
        except StoreError as e:
            raise SchemaError(table_name, e.message) from e

        if not rows:
            raise SchemaError(table_name, "table has no columns")

        try:
            columns = tuple(column_from_row(row) for row in rows)
        except KeyError as e:
            raise SchemaError(table_name, f"describe row is missing {e}") from e

        return TableSchema(table_name=table_name, columns=columns)
