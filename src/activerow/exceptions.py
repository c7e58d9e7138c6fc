"""Custom exceptions for activerow.

Every failure that reaches a caller is one of these:
- The message says what went wrong and on which table
- ``context`` carries the structured details (table, statement, values)
"""

from __future__ import annotations

from typing import Any


class ActiveRowError(Exception):
    """Base exception for all activerow errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConnectionError(ActiveRowError):
    """Failed to connect to the database."""

    pass


class StoreError(ActiveRowError):
    """The store handle failed to run a statement or describe a table."""

    def __init__(self, message: str, sql: str | None = None) -> None:
        super().__init__(message, {"sql": sql} if sql else None)
        self.sql = sql


class SchemaError(ActiveRowError):
    """Table is missing or its structure could not be described."""

    def __init__(self, table_name: str, reason: str) -> None:
        message = f"Failed to load structure for '{table_name}' table: {reason}"
        super().__init__(message, {"table_name": table_name, "reason": reason})
        self.table_name = table_name
        self.reason = reason


class InvalidSelectionError(ActiveRowError):
    """The selection criterion cannot locate a row."""

    def __init__(self, table_name: str, reason: str) -> None:
        message = f"Invalid selection for '{table_name}': {reason}"
        super().__init__(message, {"table_name": table_name, "reason": reason})
        self.table_name = table_name
        self.reason = reason


class QueryError(ActiveRowError):
    """A SELECT against the store failed."""

    def __init__(self, table_name: str, sql: str, reason: str) -> None:
        message = f"Failed to fetch '{table_name}' record: {reason}"
        super().__init__(message, {"table_name": table_name, "sql": sql})
        self.table_name = table_name
        self.sql = sql


class PersistenceError(ActiveRowError):
    """An INSERT, UPDATE or DELETE failed."""

    def __init__(self, operation: str, table_name: str, sql: str, reason: str) -> None:
        message = f"Error {operation} '{table_name}' record: {reason}"
        super().__init__(
            message,
            {"operation": operation, "table_name": table_name, "sql": sql},
        )
        self.operation = operation
        self.table_name = table_name
        self.sql = sql
