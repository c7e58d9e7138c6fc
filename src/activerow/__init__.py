"""activerow - schema-introspecting active record layer.

Entities are declared by name only. The columns come from the live table,
the row comes from a selection criterion, and ``update()``/``delete()`` write
changes back with parameterized SQL.

Example:
    from activerow import ActiveRow, Entity

    db = ActiveRow("sqlite:///shop.db")

    class WidgetModel(Entity):
        pass

    # New record with the table's declared defaults
    widget = WidgetModel(db)
    widget.name = "Bolt"
    widget.update()                      # INSERT

    # Locate by primary key, column map or predicate
    widget = WidgetModel(db, 5)
    widget = WidgetModel(db, {"name": "Bolt"})
    widget = WidgetModel(db, "price > ?", [10])

    widget.price = 12
    widget.update()                      # UPDATE ... WHERE <how it was found>
    widget.delete()                      # DELETE ... LIMIT 1
"""

from activerow.core.engine import ActiveRow
from activerow.core.entity import Entity
from activerow.core.types import (
    ColumnDescriptor,
    ExecutionResult,
    Selection,
    SelectionMode,
    SelectionState,
    TableSchema,
)
from activerow.exceptions import (
    ActiveRowError,
    ConnectionError,
    InvalidSelectionError,
    PersistenceError,
    QueryError,
    SchemaError,
    StoreError,
)
from activerow.store import DatabaseStore, StoreHandle

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "ActiveRow",
    "Entity",
    # Types
    "ColumnDescriptor",
    "TableSchema",
    "SelectionMode",
    "Selection",
    "SelectionState",
    "ExecutionResult",
    # Stores
    "StoreHandle",
    "DatabaseStore",
    # Exceptions
    "ActiveRowError",
    "ConnectionError",
    "StoreError",
    "SchemaError",
    "InvalidSelectionError",
    "QueryError",
    "PersistenceError",
]
