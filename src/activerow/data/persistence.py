"""INSERT, UPDATE and DELETE synthesis.

Statements are built from introspected column names, which are interpolated
directly; every value goes through a ``?`` placeholder. Auto-generated columns
never appear in INSERT or UPDATE value lists.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from activerow.core.types import Selection, SelectionMode, SelectionState
from activerow.exceptions import InvalidSelectionError, PersistenceError, StoreError
from activerow.selection.resolver import primary_key_selection

if TYPE_CHECKING:
    from activerow.core.types import ExecutionResult, TableSchema
    from activerow.store.base import StoreHandle

logger = logging.getLogger(__name__)

# Dialects without DELETE ... LIMIT, and the row locator each one offers
_ROW_LOCATORS = {
    "sqlite": "rowid",
    "postgresql": "ctid",
}


def is_empty(value: Any) -> bool:
    """A key value that cannot identify a row."""
    return value is None or value == ""


def build_insert(schema: TableSchema, fields: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Build an INSERT of every writable column, in schema order."""
    columns = schema.writable_columns
    values = [fields.get(name) for name in columns]
    placeholders = ", ".join("?" for _ in columns)
    sql = f"INSERT INTO {schema.table_name} ({', '.join(columns)}) VALUES ({placeholders})"
    return sql, values


def build_update(
    schema: TableSchema,
    fields: Mapping[str, Any],
    predicate: str,
    bound_values: Sequence[Any],
) -> tuple[str, list[Any]]:
    """Build an UPDATE of every writable column.

    The values that located the row follow the SET values so they bind to
    the WHERE placeholders.
    """
    columns = schema.writable_columns
    assignments = ", ".join(f"{name} = ?" for name in columns)
    values = [fields.get(name) for name in columns]
    values.extend(bound_values)
    sql = f"UPDATE {schema.table_name} SET {assignments} WHERE {predicate}"
    return sql, values


def build_delete(table_name: str, predicate: str, dialect: str, unique: bool = False) -> str:
    """Build a DELETE that removes at most one row.

    SQLite and PostgreSQL have no DELETE ... LIMIT, so the row is picked by
    ``rowid``/``ctid`` in a sub-select. Pass ``unique=True`` when the predicate
    already matches at most one row (a single-column primary key); the
    statement then filters on the predicate alone. SQLite ``WITHOUT ROWID``
    tables have no ``rowid``, so they can only be deleted from that way.
    """
    locator = _ROW_LOCATORS.get(dialect)
    if locator is None:
        return f"DELETE FROM {table_name} WHERE {predicate} LIMIT 1"
    if unique:
        return f"DELETE FROM {table_name} WHERE {predicate}"
    return (
        f"DELETE FROM {table_name} WHERE {locator} IN "
        f"(SELECT {locator} FROM {table_name} WHERE {predicate} LIMIT 1)"
    )


class PersistenceEngine:
    """Writes entity field bags back to the store."""

    def __init__(self, store: StoreHandle) -> None:
        self._store = store

    def _run(self, operation: str, table_name: str, sql: str, values: list[Any]) -> ExecutionResult:
        logger.debug(sql)
        logger.debug(values)
        try:
            return self._store.execute(sql, values)
        except StoreError as e:
            raise PersistenceError(operation, table_name, sql, e.message) from e

    def insert(self, schema: TableSchema, fields: Mapping[str, Any]) -> Selection | None:
        """Insert the field bag as a new row.

        Args:
            schema: Table schema
            fields: Current field values

        An auto-generated key is never written, so it is always taken from
        the store's last row id and any value in ``fields`` is ignored. Any
        other key is the value that was written.

        Returns:
            A primary key selection for the new row, or None when the key
            cannot be determined

        Raises:
            PersistenceError: If the store rejects the insert
        """
        sql, values = build_insert(schema, fields)
        result = self._run("inserting", schema.table_name, sql, values)
        logger.debug("Record inserted")

        primary_key = schema.primary_key
        if primary_key is None:
            logger.warning(f"{schema.table_name} has no primary key; inserted row stays unbound")
            return None

        column = schema.column(primary_key)
        if column is not None and column.is_auto_generated:
            key = result.last_row_id
        else:
            key = fields.get(primary_key)
        if is_empty(key):
            logger.warning(f"Store did not report the new {schema.table_name}.{primary_key}")
            return None
        return primary_key_selection(schema, key)

    def update(
        self, schema: TableSchema, fields: Mapping[str, Any], state: SelectionState
    ) -> int:
        """Update the row located by ``state``.

        Returns:
            Number of rows the store reports as affected

        Raises:
            PersistenceError: If the store rejects the update
        """
        sql, values = build_update(schema, fields, state.resolved_predicate, state.bound_values)
        result = self._run("updating", schema.table_name, sql, values)
        logger.debug("Record updated")
        return result.row_count

    def delete_selection(
        self, schema: TableSchema, fields: Mapping[str, Any], state: SelectionState
    ) -> Selection:
        """Pick the selection a delete should use.

        The primary key wins when it is set; otherwise the predicate that
        located the row is reused.

        Raises:
            InvalidSelectionError: If nothing identifies a row
        """
        primary_key = schema.primary_key
        if primary_key is not None and not is_empty(fields.get(primary_key)):
            return primary_key_selection(schema, fields[primary_key])
        if state.is_bound:
            return Selection(
                mode=state.mode,
                predicate=state.resolved_predicate,
                bound_values=tuple(state.bound_values),
            )
        raise InvalidSelectionError(
            schema.table_name, "record has no primary key value and was never loaded"
        )

    def delete(self, schema: TableSchema, selection: Selection) -> int:
        """Delete at most one row matching ``selection``.

        Returns:
            Number of rows the store reports as deleted

        Raises:
            PersistenceError: If the store rejects the delete
        """
        unique = selection.mode == SelectionMode.BY_PRIMARY_KEY and schema.has_single_key
        sql = build_delete(schema.table_name, selection.predicate, self._store.dialect, unique)
        result = self._run("deleting", schema.table_name, sql, list(selection.bound_values))
        logger.debug("Record deleted")
        return result.row_count
