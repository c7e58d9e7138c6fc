"""Shared test fixtures for activerow."""

from collections.abc import Generator, Sequence
from typing import Any

import pytest

from activerow import ActiveRow, ExecutionResult
from activerow.exceptions import StoreError

WIDGET_DDL = (
    "CREATE TABLE Widget ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "name VARCHAR(50), "
    "price REAL DEFAULT 0)"
)

# DESCRIBE rows as MySQL reports them for Widget
WIDGET_DESCRIBE = [
    {"Field": "id", "Type": "int", "Null": "NO", "Key": "PRI", "Default": None,
     "Extra": "auto_increment"},
    {"Field": "name", "Type": "varchar(50)", "Null": "YES", "Key": "", "Default": None,
     "Extra": ""},
    {"Field": "price", "Type": "decimal(10,2)", "Null": "YES", "Key": "", "Default": 0,
     "Extra": ""},
]


class RecordingStore:
    """In-memory store handle that records every statement.

    Queue results with ``respond()``; unqueued SELECTs return no rows and
    unqueued writes report one affected row.
    """

    def __init__(self, dialect: str = "mysql") -> None:
        self._dialect = dialect
        self.tables: dict[str, list[dict[str, Any]]] = {"Widget": WIDGET_DESCRIBE}
        self.statements: list[tuple[str, list[Any]]] = []
        self.describe_calls: list[str] = []
        self._responses: list[ExecutionResult | Exception] = []

    @property
    def dialect(self) -> str:
        return self._dialect

    def respond(self, result: ExecutionResult | Exception) -> None:
        self._responses.append(result)

    def respond_row(self, row: dict[str, Any]) -> None:
        self.respond(ExecutionResult(row_count=1, rows=[row]))

    def describe(self, table_name: str) -> list[dict[str, Any]]:
        self.describe_calls.append(table_name)
        if table_name not in self.tables:
            raise StoreError(f"Table '{table_name}' does not exist")
        return self.tables[table_name]

    def execute(self, sql: str, values: Sequence[Any] = ()) -> ExecutionResult:
        self.statements.append((sql, list(values)))
        if self._responses:
            response = self._responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        if sql.startswith("SELECT"):
            return ExecutionResult(row_count=0, rows=[])
        return ExecutionResult(row_count=1)

    @property
    def last(self) -> tuple[str, list[Any]]:
        return self.statements[-1]


@pytest.fixture
def store() -> RecordingStore:
    """Recording store with the Widget table."""
    return RecordingStore()


@pytest.fixture
def fake_db(store: RecordingStore) -> ActiveRow:
    """ActiveRow over the recording store."""
    return ActiveRow(store=store)


@pytest.fixture
def memory_db() -> Generator[ActiveRow, None, None]:
    """ActiveRow over SQLite in-memory with an empty Widget table."""
    database = ActiveRow("sqlite:///:memory:")
    database.store.execute(WIDGET_DDL)
    yield database
    database.close()


@pytest.fixture
def seeded_db(memory_db: ActiveRow) -> ActiveRow:
    """In-memory database with three widgets (ids 1-3)."""
    for name, price in [("Bolt", 0.5), ("Nut", 0.25), ("Washer", 0.1)]:
        memory_db.store.execute("INSERT INTO Widget (name, price) VALUES (?, ?)", [name, price])
    return memory_db


@pytest.fixture
def make_store() -> type[RecordingStore]:
    """The RecordingStore class, for tests that need another dialect."""
    return RecordingStore
