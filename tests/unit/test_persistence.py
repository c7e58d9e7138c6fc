"""Tests for statement synthesis and the persistence engine."""

import pytest

from activerow.core.types import (
    ColumnDescriptor,
    ExecutionResult,
    SelectionMode,
    SelectionState,
    TableSchema,
)
from activerow.data.loader import RecordLoader
from activerow.data.persistence import (
    PersistenceEngine,
    build_delete,
    build_insert,
    build_update,
)
from activerow.exceptions import InvalidSelectionError, PersistenceError, QueryError, StoreError
from activerow.selection.resolver import SelectionResolver


@pytest.fixture
def schema() -> TableSchema:
    return TableSchema(
        table_name="Widget",
        columns=(
            ColumnDescriptor(name="id", is_primary_key=True, is_auto_generated=True),
            ColumnDescriptor(name="name"),
            ColumnDescriptor(name="price", default_value=0),
        ),
    )


class TestStatements:
    """Tests for the pure statement builders."""

    def test_insert_skips_auto_generated(self, schema: TableSchema):
        sql, values = build_insert(schema, {"id": None, "name": "Bolt", "price": 3})
        assert sql == "INSERT INTO Widget (name, price) VALUES (?, ?)"
        assert values == ["Bolt", 3]

    def test_insert_missing_field_binds_null(self, schema: TableSchema):
        _, values = build_insert(schema, {"name": "Bolt"})
        assert values == ["Bolt", None]

    def test_update_appends_locating_values(self, schema: TableSchema):
        sql, values = build_update(
            schema, {"id": 4, "name": "Bolt", "price": 9}, "name = ?", ["Bolt"]
        )
        assert sql == "UPDATE Widget SET name = ?, price = ? WHERE name = ?"
        assert values == ["Bolt", 9, "Bolt"]

    def test_delete_with_limit(self):
        assert build_delete("Widget", "id = ?", "mysql") == "DELETE FROM Widget WHERE id = ? LIMIT 1"

    def test_delete_sqlite(self):
        assert build_delete("Widget", "id = ?", "sqlite") == (
            "DELETE FROM Widget WHERE rowid IN (SELECT rowid FROM Widget WHERE id = ? LIMIT 1)"
        )

    def test_delete_postgresql(self):
        assert build_delete("Widget", "id = ?", "postgresql") == (
            "DELETE FROM Widget WHERE ctid IN (SELECT ctid FROM Widget WHERE id = ? LIMIT 1)"
        )

    @pytest.mark.parametrize("dialect", ["sqlite", "postgresql"])
    def test_delete_unique_predicate_skips_row_locator(self, dialect):
        assert build_delete("Widget", "id = ?", dialect, unique=True) == (
            "DELETE FROM Widget WHERE id = ?"
        )

    def test_delete_unique_keeps_limit(self):
        assert build_delete("Widget", "id = ?", "mysql", unique=True) == (
            "DELETE FROM Widget WHERE id = ? LIMIT 1"
        )


class TestPersistenceEngine:
    """Tests for PersistenceEngine against the recording store."""

    def test_insert_binds_reported_key(self, store, schema: TableSchema):
        store.respond(ExecutionResult(row_count=1, last_row_id=12))
        selection = PersistenceEngine(store).insert(schema, {"name": "Bolt", "price": 1})
        assert selection is not None
        assert selection.mode == SelectionMode.BY_PRIMARY_KEY
        assert selection.predicate == "id = ?"
        assert selection.bound_values == (12,)

    def test_insert_prefers_explicit_key(self, store):
        schema = TableSchema(
            table_name="Country",
            columns=(ColumnDescriptor(name="code", is_primary_key=True), ColumnDescriptor(name="name")),
        )
        store.respond(ExecutionResult(row_count=1, last_row_id=99))
        selection = PersistenceEngine(store).insert(schema, {"code": "NZ", "name": "New Zealand"})
        assert store.last == ("INSERT INTO Country (code, name) VALUES (?, ?)", ["NZ", "New Zealand"])
        assert selection.bound_values == ("NZ",)

    def test_insert_without_reported_key(self, store, schema: TableSchema):
        assert PersistenceEngine(store).insert(schema, {"name": "Bolt"}) is None

    def test_insert_ignores_unwritten_auto_key(self, store, schema: TableSchema):
        store.respond(ExecutionResult(row_count=1, last_row_id=12))
        selection = PersistenceEngine(store).insert(schema, {"id": 2, "name": "Bolt"})
        assert selection.bound_values == (12,)

    def test_insert_auto_key_not_reported(self, store, schema: TableSchema):
        selection = PersistenceEngine(store).insert(schema, {"id": 2, "name": "Bolt"})
        assert selection is None

    def test_insert_plain_key_ignores_last_row_id(self, store):
        schema = TableSchema(
            table_name="Tag",
            columns=(ColumnDescriptor(name="code", is_primary_key=True), ColumnDescriptor(name="label")),
        )
        store.respond(ExecutionResult(row_count=1, last_row_id=1))
        assert PersistenceEngine(store).insert(schema, {"code": None, "label": "sale"}) is None

    def test_insert_failure(self, store, schema: TableSchema):
        store.respond(StoreError("duplicate entry"))
        with pytest.raises(PersistenceError) as exc_info:
            PersistenceEngine(store).insert(schema, {"name": "Bolt"})
        assert exc_info.value.operation == "inserting"
        assert exc_info.value.sql.startswith("INSERT INTO Widget")
        assert "duplicate entry" in str(exc_info.value)

    def test_update_failure(self, store, schema: TableSchema):
        store.respond(StoreError("lock wait timeout"))
        state = SelectionState(
            mode=SelectionMode.BY_PRIMARY_KEY, resolved_predicate="id = ?", bound_values=[1]
        )
        with pytest.raises(PersistenceError):
            PersistenceEngine(store).update(schema, {"name": "x"}, state)

    def test_delete_selection_prefers_primary_key(self, store, schema: TableSchema):
        state = SelectionState(
            mode=SelectionMode.BY_FIELD_MAP, resolved_predicate="name = ?", bound_values=["Bolt"]
        )
        selection = PersistenceEngine(store).delete_selection(schema, {"id": 3}, state)
        assert selection.predicate == "id = ?"
        assert selection.bound_values == (3,)

    @pytest.mark.parametrize("key", [None, ""])
    def test_delete_selection_falls_back_to_state(self, store, schema: TableSchema, key):
        state = SelectionState(
            mode=SelectionMode.BY_FIELD_MAP, resolved_predicate="name = ?", bound_values=["Bolt"]
        )
        selection = PersistenceEngine(store).delete_selection(schema, {"id": key}, state)
        assert selection.predicate == "name = ?"
        assert selection.bound_values == ("Bolt",)

    def test_delete_selection_without_anything(self, store, schema: TableSchema):
        with pytest.raises(InvalidSelectionError):
            PersistenceEngine(store).delete_selection(schema, {"id": None}, SelectionState())

    def test_delete_by_key_filters_on_key(self, make_store, schema: TableSchema):
        store = make_store(dialect="sqlite")
        selection = SelectionResolver(schema).resolve(3)
        PersistenceEngine(store).delete(schema, selection)
        assert store.last == ("DELETE FROM Widget WHERE id = ?", [3])

    def test_delete_by_field_map_uses_store_dialect(self, make_store, schema: TableSchema):
        store = make_store(dialect="sqlite")
        selection = SelectionResolver(schema).resolve({"name": "Bolt"})
        PersistenceEngine(store).delete(schema, selection)
        assert store.last == (
            "DELETE FROM Widget WHERE rowid IN (SELECT rowid FROM Widget WHERE name = ? LIMIT 1)",
            ["Bolt"],
        )

    def test_delete_composite_key_uses_row_locator(self, make_store):
        schema = TableSchema(
            table_name="Stock",
            columns=(
                ColumnDescriptor(name="widget_id", is_primary_key=True),
                ColumnDescriptor(name="bin", is_primary_key=True),
            ),
        )
        store = make_store(dialect="sqlite")
        PersistenceEngine(store).delete(schema, SelectionResolver(schema).resolve(3))
        assert store.last == (
            "DELETE FROM Stock WHERE rowid IN (SELECT rowid FROM Stock WHERE widget_id = ? LIMIT 1)",
            [3],
        )


class TestRecordLoader:
    """Tests for RecordLoader."""

    def test_returns_first_row(self, store, schema: TableSchema):
        store.respond(ExecutionResult(row_count=2, rows=[{"id": 1}, {"id": 2}]))
        row = RecordLoader(store).load("Widget", SelectionResolver(schema).resolve(1))
        assert row == {"id": 1}
        assert store.last == ("SELECT * FROM Widget WHERE id = ?", [1])

    def test_no_rows(self, store, schema: TableSchema):
        row = RecordLoader(store).load("Widget", SelectionResolver(schema).resolve(1))
        assert row is None

    def test_failure(self, store, schema: TableSchema):
        store.respond(StoreError("no such column: colour"))
        with pytest.raises(QueryError) as exc_info:
            RecordLoader(store).load("Widget", SelectionResolver(schema).resolve("colour = ?", ["red"]))
        assert exc_info.value.sql == "SELECT * FROM Widget WHERE colour = ?"
