"""Store handle contract.

The engine never opens connections itself. It talks to whatever object
satisfies :class:`StoreHandle`, issuing ``?``-placeholder statements only.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from activerow.core.types import ExecutionResult


@runtime_checkable
class StoreHandle(Protocol):
    """Synchronous parameterized-statement executor."""

    @property
    def dialect(self) -> str:
        """Backend name ("sqlite", "mysql", "postgresql", ...)."""
        ...

    def describe(self, table_name: str) -> list[dict[str, Any]]:
        """Return one row per column, shaped like MySQL's ``DESCRIBE``.

        Keys: ``Field``, ``Type``, ``Null``, ``Key``, ``Default``, ``Extra``.

        Raises:
            StoreError: If the table does not exist or cannot be described
        """
        ...

    def execute(self, sql: str, values: Sequence[Any] = ()) -> ExecutionResult:
        """Run one statement with positional ``?`` placeholders.

        Raises:
            StoreError: If the driver rejects the statement
        """
        ...
