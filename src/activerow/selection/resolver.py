"""Selection criterion resolution.

A criterion is what the caller hands an entity to say which row it is:

- a mapping of column to value, matched with ``col = ? AND ...``
- a hand-written predicate string such as ``"age > ?"`` plus a value list
- any other scalar, looked up against the primary key

Telling a predicate string from a key value is a syntactic guess: a string
holding a space, ``=``, ``>`` or ``<`` is taken as a predicate. A key value
that itself contains one of those needs an explicit ``mode``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from activerow.core.types import Selection, SelectionMode, TableSchema
from activerow.exceptions import InvalidSelectionError

logger = logging.getLogger(__name__)

PREDICATE_TOKENS = (" ", "=", ">", "<")

WHERE_PREFIX = "WHERE "


def classify(criterion: Any) -> SelectionMode:
    """Guess the selection mode from the criterion's shape."""
    if isinstance(criterion, Mapping):
        return SelectionMode.BY_FIELD_MAP
    if isinstance(criterion, str) and any(token in criterion for token in PREDICATE_TOKENS):
        return SelectionMode.BY_CUSTOM_PREDICATE
    return SelectionMode.BY_PRIMARY_KEY


def strip_where(predicate: str) -> str:
    """Drop a leading ``WHERE `` so the predicate can follow our own."""
    if predicate.startswith(WHERE_PREFIX):
        return predicate[len(WHERE_PREFIX) :]
    return predicate


def primary_key_selection(schema: TableSchema, value: Any) -> Selection:
    """Selection of a single row by primary key value."""
    primary_key = schema.primary_key
    if primary_key is None:
        raise InvalidSelectionError(schema.table_name, "table has no primary key")
    return Selection(
        mode=SelectionMode.BY_PRIMARY_KEY,
        predicate=f"{primary_key} = ?",
        bound_values=(value,),
    )


class SelectionResolver:
    """Builds the WHERE clause and bound values for a criterion."""

    def __init__(self, schema: TableSchema) -> None:
        self._schema = schema

    def resolve(
        self,
        criterion: Any,
        values: Sequence[Any] | None = None,
        mode: SelectionMode | str | None = None,
    ) -> Selection:
        """Resolve a criterion against this table.

        Args:
            criterion: Key value, column mapping or predicate string
            values: Values for a custom predicate's placeholders
            mode: Explicit mode; skips the shape guess when given

        Returns:
            The resolved Selection

        Raises:
            InvalidSelectionError: If the criterion cannot be turned into a
                WHERE clause for this table
        """
        if mode is None:
            mode = classify(criterion)
        else:
            try:
                mode = SelectionMode(mode)
            except ValueError as e:
                raise InvalidSelectionError(
                    self._schema.table_name,
                    f"unknown mode '{mode}'. Valid modes: {', '.join(SelectionMode.values()[1:])}",
                ) from e

        if mode == SelectionMode.BY_FIELD_MAP:
            return self._field_map(criterion)
        if mode == SelectionMode.BY_CUSTOM_PREDICATE:
            return self._custom(criterion, values)
        if mode == SelectionMode.BY_PRIMARY_KEY:
            return primary_key_selection(self._schema, criterion)
        raise InvalidSelectionError(self._schema.table_name, f"cannot select with mode '{mode}'")

    def _field_map(self, criterion: Any) -> Selection:
        table_name = self._schema.table_name
        if not isinstance(criterion, Mapping):
            raise InvalidSelectionError(table_name, "field map selection needs a mapping")
        if not criterion:
            raise InvalidSelectionError(table_name, "field map is empty")

        unknown = [name for name in criterion if not self._schema.has_column(name)]
        if unknown:
            raise InvalidSelectionError(
                table_name,
                f"unknown columns {', '.join(map(str, unknown))}. "
                f"Available columns: {', '.join(self._schema.column_names)}",
            )

        predicate = " AND ".join(f"{name} = ?" for name in criterion)
        logger.debug(f"Searching for {table_name} record by field map: {predicate}")
        return Selection(
            mode=SelectionMode.BY_FIELD_MAP,
            predicate=predicate,
            bound_values=tuple(criterion.values()),
        )

    def _custom(self, criterion: Any, values: Sequence[Any] | None) -> Selection:
        table_name = self._schema.table_name
        if not isinstance(criterion, str) or not criterion.strip():
            raise InvalidSelectionError(table_name, "custom predicate must be a non-empty string")
        if values is None:
            raise InvalidSelectionError(
                table_name, "you must supply a list of values for the where clause"
            )
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise InvalidSelectionError(table_name, "predicate values must be a list")

        logger.debug(f"Searching for {table_name} record using a custom predicate")
        return Selection(
            mode=SelectionMode.BY_CUSTOM_PREDICATE,
            predicate=strip_where(criterion),
            bound_values=tuple(values),
        )
