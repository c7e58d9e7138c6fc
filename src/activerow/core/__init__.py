"""Core components for activerow."""

from activerow.core.connection import DatabaseConnection
from activerow.core.types import (
    ColumnDescriptor,
    ExecutionResult,
    Scalar,
    Selection,
    SelectionMode,
    SelectionState,
    TableSchema,
)

__all__ = [
    "DatabaseConnection",
    "ColumnDescriptor",
    "ExecutionResult",
    "Scalar",
    "Selection",
    "SelectionMode",
    "SelectionState",
    "TableSchema",
]
