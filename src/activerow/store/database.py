"""SQLAlchemy-backed store handle.

Runs raw ``?``-placeholder statements through ``exec_driver_sql`` after
rewriting the placeholders into the driver's own paramstyle, and describes
tables with the SQLAlchemy inspector.
"""

from __future__ import annotations

import contextlib
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from activerow.core.types import ExecutionResult
from activerow.exceptions import StoreError

if TYPE_CHECKING:
    from sqlalchemy import Engine

# 'text' or 'text'::cast as reflected by SQLite, MySQL and PostgreSQL
_QUOTED_DEFAULT = re.compile(r"'((?:[^']|'')*)'(?:::[\w ]+)?")

_QUOTES = ("'", '"', "`")


def to_paramstyle(
    sql: str, values: Sequence[Any], paramstyle: str
) -> tuple[str, tuple[Any, ...] | dict[str, Any]]:
    """Rewrite ``?`` placeholders for a DB-API paramstyle.

    Placeholders inside quoted literals are left alone. For the ``format``
    and ``pyformat`` styles literal percent signs are doubled.

    Args:
        sql: Statement using ``?`` placeholders
        values: Positional values, one per placeholder
        paramstyle: DB-API 2 paramstyle of the target driver

    Returns:
        Tuple of (statement, parameters) ready for ``exec_driver_sql``
    """
    if paramstyle == "qmark":
        return sql, tuple(values)

    escape_percent = paramstyle in ("format", "pyformat")
    out: list[str] = []
    quote: str | None = None
    index = 0
    for char in sql:
        if escape_percent and char == "%":
            out.append("%%")
            continue
        if quote is not None:
            if char == quote:
                quote = None
            out.append(char)
            continue
        if char in _QUOTES:
            quote = char
            out.append(char)
            continue
        if char != "?":
            out.append(char)
            continue

        index += 1
        if paramstyle == "format":
            out.append("%s")
        elif paramstyle == "pyformat":
            out.append(f"%(p{index})s")
        elif paramstyle == "numeric":
            out.append(f":{index}")
        elif paramstyle == "numeric_dollar":
            out.append(f"${index}")
        elif paramstyle == "named":
            out.append(f":p{index}")
        else:
            raise StoreError(f"Unsupported paramstyle: {paramstyle}", sql)

    if index != len(values):
        raise StoreError(
            f"Statement has {index} placeholders but {len(values)} values were bound", sql
        )

    statement = "".join(out)
    if paramstyle in ("pyformat", "named"):
        return statement, {f"p{i}": v for i, v in enumerate(values, 1)}
    return statement, tuple(values)


def normalize_default(value: Any) -> Any:
    """Strip the SQL quoting reflection leaves around string defaults."""
    if not isinstance(value, str):
        return value
    match = _QUOTED_DEFAULT.fullmatch(value.strip())
    if match:
        return match.group(1).replace("''", "'")
    return value


class DatabaseStore:
    """Store handle running statements on a SQLAlchemy engine.

    Each statement runs in its own ``engine.begin()`` block, so writes are
    committed as soon as they succeed.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize the store.

        Args:
            engine: SQLAlchemy engine to run statements on
        """
        self._engine = engine

    @property
    def dialect(self) -> str:
        """Backend name reported by SQLAlchemy."""
        return self._engine.dialect.name

    @property
    def paramstyle(self) -> str:
        """DB-API paramstyle of the underlying driver."""
        return self._engine.dialect.paramstyle

    def describe(self, table_name: str) -> list[dict[str, Any]]:
        """Describe a table in MySQL ``DESCRIBE`` shape.

        Args:
            table_name: Table to describe

        Returns:
            One dict per column

        Raises:
            StoreError: If the table does not exist or reflection fails
        """
        try:
            inspector = inspect(self._engine)
            columns = inspector.get_columns(table_name)
            pk_columns = inspector.get_pk_constraint(table_name).get("constrained_columns") or []
        except NoSuchTableError as e:
            raise StoreError(f"Table '{table_name}' does not exist") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to describe '{table_name}': {e}") from e

        rows = []
        for column in columns:
            is_auto = self._is_auto_generated(column, pk_columns)
            rows.append(
                {
                    "Field": column["name"],
                    "Type": str(column["type"]),
                    "Null": "YES" if column.get("nullable", True) else "NO",
                    "Key": "PRI" if column["name"] in pk_columns else "",
                    "Default": None if is_auto else normalize_default(column.get("default")),
                    "Extra": "auto_increment" if is_auto else "",
                }
            )
        return rows

    def _is_auto_generated(self, column: dict[str, Any], pk_columns: list[str]) -> bool:
        """Decide whether the store assigns this column's value."""
        if column.get("identity"):
            return True
        if column["name"] not in pk_columns:
            return False
        if column.get("autoincrement") is True:
            return True
        # SQLite aliases a lone INTEGER PRIMARY KEY to the rowid
        return (
            self.dialect == "sqlite"
            and len(pk_columns) == 1
            and str(column["type"]).upper() == "INTEGER"
        )

    def execute(self, sql: str, values: Sequence[Any] = ()) -> ExecutionResult:
        """Run one statement and collect its rows.

        Args:
            sql: Statement with ``?`` placeholders
            values: Values bound to the placeholders, in order

        Returns:
            ExecutionResult with rows for queries, row count for writes

        Raises:
            StoreError: If the driver rejects the statement
        """
        statement, params = to_paramstyle(sql, values, self.paramstyle)
        try:
            with self._engine.begin() as conn:
                result = conn.exec_driver_sql(statement, params)
                if result.returns_rows:
                    rows = [dict(row) for row in result.mappings()]
                    return ExecutionResult(row_count=len(rows), rows=rows)

                last_row_id = None
                with contextlib.suppress(AttributeError, SQLAlchemyError):
                    last_row_id = result.lastrowid
                return ExecutionResult(row_count=result.rowcount, last_row_id=last_row_id)
        except SQLAlchemyError as e:
            raise StoreError(str(e), sql) from e
