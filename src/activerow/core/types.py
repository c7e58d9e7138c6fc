"""Core types for activerow.

Column metadata and selection state are pydantic models so they can be
dumped to JSON by the CLI without extra glue.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Values a field bag may hold. Drivers hand back Decimal and datetime as well.
Scalar = bool | int | float | str | bytes | Decimal | date | datetime | None


class SelectionMode(StrEnum):
    """How an entity's row was (or will be) located."""

    UNSELECTED = "unselected"
    BY_PRIMARY_KEY = "by_primary_key"
    BY_FIELD_MAP = "by_field_map"
    BY_CUSTOM_PREDICATE = "by_custom_predicate"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid selection mode values."""
        return [m.value for m in cls]


class ColumnDescriptor(BaseModel):
    """One column of an introspected table."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    default_value: Any = Field(default=None, description="Declared default, verbatim")
    is_primary_key: bool = Field(default=False, description="Column is (part of) the key")
    is_auto_generated: bool = Field(default=False, description="Store assigns the value")


class TableSchema(BaseModel):
    """Ordered column metadata for one table."""

    model_config = ConfigDict(frozen=True)

    table_name: str
    columns: tuple[ColumnDescriptor, ...]

    @property
    def primary_key(self) -> str | None:
        """Name of the first primary key column, if the table has one."""
        for column in self.columns:
            if column.is_primary_key:
                return column.name
        return None

    @property
    def column_names(self) -> list[str]:
        """Column names in schema order."""
        return [c.name for c in self.columns]

    @property
    def writable_columns(self) -> list[str]:
        """Columns that go into INSERT and UPDATE value lists."""
        return [c.name for c in self.columns if not c.is_auto_generated]

    @property
    def has_single_key(self) -> bool:
        """True when exactly one column makes up the primary key."""
        return sum(1 for c in self.columns if c.is_primary_key) == 1

    def column(self, name: str) -> ColumnDescriptor | None:
        """Look up a column descriptor by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def has_column(self, name: str) -> bool:
        """Check whether ``name`` is a column of this table."""
        return any(c.name == name for c in self.columns)

    def defaults(self) -> dict[str, Any]:
        """Map every column to its declared default."""
        return {c.name: c.default_value for c in self.columns}


class Selection(BaseModel):
    """A resolved WHERE clause and the values bound to its placeholders."""

    model_config = ConfigDict(frozen=True)

    mode: SelectionMode
    predicate: str
    bound_values: tuple[Any, ...] = ()


class SelectionState(BaseModel):
    """The selection that located an entity's current row.

    An empty ``resolved_predicate`` means the entity has no backing row yet.
    """

    mode: SelectionMode = SelectionMode.UNSELECTED
    resolved_predicate: str = ""
    bound_values: list[Any] = Field(default_factory=list)

    @property
    def is_bound(self) -> bool:
        """True when a row backs the entity."""
        return self.resolved_predicate != ""

    def bind(self, selection: Selection) -> None:
        """Record the selection that located the row."""
        self.mode = selection.mode
        self.resolved_predicate = selection.predicate
        self.bound_values = list(selection.bound_values)

    def unbind(self) -> None:
        """Forget the row but keep the mode that was attempted."""
        self.resolved_predicate = ""
        self.bound_values = []

    def reset(self) -> None:
        """Return to the state of a freshly built entity."""
        self.mode = SelectionMode.UNSELECTED
        self.unbind()


class ExecutionResult(BaseModel):
    """Outcome of one statement run through a store handle."""

    row_count: int = 0
    rows: list[dict[str, Any]] | None = None
    last_row_id: Any = None

    def first(self) -> dict[str, Any] | None:
        """First returned row, or None when nothing matched."""
        if not self.rows:
            return None
        return self.rows[0]
