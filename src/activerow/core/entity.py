"""Entity base class.

Subclass :class:`Entity` once per table. The table name comes from the class
name with any trailing ``Model`` dropped (``WidgetModel`` maps to ``Widget``),
or from ``__tablename__`` when set::

    class WidgetModel(Entity):
        def validate(self) -> bool:
            return self.price is not None

    widget = WidgetModel(db, 5)          # by primary key
    widget = WidgetModel(db, {"name": "Bolt"})
    widget = WidgetModel(db, "price > ?", [10])
    widget.price = 12
    widget.update()

Columns are reachable as attributes and as items. A column whose name clashes
with an Entity method is only reachable as an item.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from activerow.core.types import SelectionMode, SelectionState
from activerow.selection.resolver import SelectionResolver

if TYPE_CHECKING:
    from activerow.core.engine import ActiveRow
    from activerow.core.types import Scalar, TableSchema

logger = logging.getLogger(__name__)

MODEL_SUFFIX = "Model"


class Entity:
    """A row of one table, loaded by criterion and written back on update().

    Hooks a subclass may override:

    - ``validate()``: return False to veto ``update()``
    - ``use_defaults``: set False to skip default population when no row
      matches; ``blank_record()`` runs instead, on a bag of ``None`` values
    - ``blank_record()``: react to a missing row (read-only access, errors...)
    - ``after_construct()``: runs once after load or default population
    """

    __tablename__: ClassVar[str | None] = None
    use_defaults: ClassVar[bool] = True

    def __init__(
        self,
        db: ActiveRow,
        criterion: Any = None,
        values: Sequence[Any] | None = None,
        *,
        mode: SelectionMode | str | None = None,
    ) -> None:
        """Resolve the table schema and load (or default) the record.

        Args:
            db: ActiveRow that owns the store and the schema cache
            criterion: Primary key value, column mapping or predicate string.
                None or "" builds a new, unsaved record.
            values: Values for a predicate string's placeholders
            mode: Explicit selection mode instead of guessing from criterion

        Raises:
            SchemaError: If the table cannot be described
            InvalidSelectionError: If the criterion is malformed
            QueryError: If the lookup query fails
        """
        self._fields: dict[str, Scalar] = {}
        self._db = db
        self._table_name = type(self).resolve_table_name()
        self._schema = db.schema(self._table_name)
        self._primary_key = self._schema.primary_key
        self._selection = SelectionState()

        if criterion is None or criterion == "":
            self._populate_defaults()
        else:
            self._fetch(criterion, values, mode)

        self.after_construct()

    @classmethod
    def resolve_table_name(cls) -> str:
        """Table this entity type maps to."""
        if cls.__tablename__:
            return cls.__tablename__
        name = cls.__name__
        if name.endswith(MODEL_SUFFIX) and name != MODEL_SUFFIX:
            return name[: -len(MODEL_SUFFIX)]
        return name

    def _fetch(
        self,
        criterion: Any,
        values: Sequence[Any] | None,
        mode: SelectionMode | str | None,
    ) -> None:
        selection = SelectionResolver(self._schema).resolve(criterion, values, mode)
        self._selection.mode = selection.mode

        row = self._db.loader.load(self._table_name, selection)
        if row is None:
            logger.debug(f"No {self._table_name} record found. Using defaults.")
            self._populate_defaults()
            self._selection.unbind()
            return

        for name, value in row.items():
            if self._schema.has_column(name):
                self._fields[name] = value
        self._selection.bind(selection)

    def _populate_defaults(self) -> None:
        if self.use_defaults:
            self._fields = self._schema.defaults()
        else:
            self._fields = dict.fromkeys(self._schema.column_names)
            self.blank_record()

    def _key_is_auto_generated(self) -> bool:
        if self._primary_key is None:
            return False
        column = self._schema.column(self._primary_key)
        return column is not None and column.is_auto_generated

    # Hooks

    def validate(self) -> bool:
        """Accept or veto a pending ``update()``."""
        return True

    def blank_record(self) -> None:
        """Called instead of default population when ``use_defaults`` is False."""

    def after_construct(self) -> None:
        """Called once at the end of construction."""

    # State

    @property
    def table_name(self) -> str:
        """Backing table name."""
        return self._table_name

    @property
    def schema(self) -> TableSchema:
        """Shared schema of the backing table."""
        return self._schema

    @property
    def primary_key(self) -> str | None:
        """Primary key column name, if the table has one."""
        return self._primary_key

    @property
    def selection(self) -> SelectionState:
        """How the current row was located."""
        return self._selection

    @property
    def is_bound(self) -> bool:
        """True when a stored row backs this entity."""
        return self._selection.is_bound

    def to_dict(self) -> dict[str, Any]:
        """Copy of the field bag."""
        return dict(self._fields)

    # Field access

    def __getattr__(self, name: str) -> Any:
        fields = self.__dict__.get("_fields")
        schema = self.__dict__.get("_schema")
        if fields is not None and name in fields:
            return fields[name]
        if schema is not None and schema.has_column(name):
            return None
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        schema = self.__dict__.get("_schema")
        if not name.startswith("_") and schema is not None and schema.has_column(name):
            self._fields[name] = value
        else:
            super().__setattr__(name, value)

    def __getitem__(self, name: str) -> Any:
        if not self._schema.has_column(name):
            raise KeyError(name)
        return self._fields.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        if not self._schema.has_column(name):
            raise KeyError(name)
        self._fields[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __repr__(self) -> str:
        state = "bound" if self.is_bound else "unbound"
        return f"<{type(self).__name__} {self._table_name} {state} {self._fields!r}>"

    # Persistence

    def update(self) -> bool:
        """Save the record: insert when unbound, update otherwise.

        Returns:
            False if ``validate()`` vetoed the write, True otherwise

        Raises:
            PersistenceError: If the store rejects the statement
        """
        if not self.validate():
            logger.debug(f"{self._table_name} record failed validation; nothing written")
            return False

        persistence = self._db.persistence
        if not self._selection.is_bound:
            logger.debug(f"Adding new {self._table_name} record")
            selection = persistence.insert(self._schema, self._fields)
            if selection is not None:
                self._fields[self._primary_key] = selection.bound_values[0]
                self._selection.bind(selection)
            elif self._key_is_auto_generated():
                # The value in the bag was never written
                self._fields[self._primary_key] = None
        else:
            logger.debug(f"Updating existing {self._table_name} record")
            persistence.update(self._schema, self._fields, self._selection)
        return True

    def delete(self) -> bool:
        """Delete the backing row, keeping the in-memory values.

        A later ``update()`` re-inserts them as a new row.

        Returns:
            True if the store reports a row was removed

        Raises:
            InvalidSelectionError: If nothing identifies the row
            PersistenceError: If the store rejects the delete
        """
        logger.debug(f"Deleting a {self._table_name} record")
        persistence = self._db.persistence
        selection = persistence.delete_selection(self._schema, self._fields, self._selection)
        deleted = persistence.delete(self._schema, selection)

        if self._primary_key is not None:
            self._fields[self._primary_key] = None
        self._selection.reset()
        return deleted > 0
