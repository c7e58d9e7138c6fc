"""Main ActiveRow object: one store, one schema cache, many entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from activerow.core.connection import DatabaseConnection
from activerow.core.entity import Entity
from activerow.data.loader import RecordLoader
from activerow.data.persistence import PersistenceEngine
from activerow.schema.cache import SchemaCache
from activerow.schema.introspector import SchemaIntrospector
from activerow.store.database import DatabaseStore

if TYPE_CHECKING:
    from sqlalchemy.engine.url import URL

    from activerow.core.types import SelectionMode, TableSchema
    from activerow.store.base import StoreHandle

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


class ActiveRow:
    """Entry point for loading and saving entities.

    Build one per process (or per database) and pass it to every entity; it
    holds the schema cache the entities share.

    Example:
        db = ActiveRow("sqlite:///shop.db")

        class Widget(Entity):
            pass

        widget = db.load(Widget, 5)
        widget.price = 10
        widget.update()
    """

    def __init__(
        self,
        url: str | URL | None = None,
        *,
        store: StoreHandle | None = None,
        echo: bool = False,
    ) -> None:
        """Initialize ActiveRow.

        Args:
            url: Database URL, used to build a SQLAlchemy-backed store
            store: Ready-made store handle; takes precedence over ``url``
            echo: Echo SQL statements through SQLAlchemy's engine logger

        Raises:
            ValueError: If neither url nor store is given
            ConnectionError: If the engine cannot be created
        """
        self._connection: DatabaseConnection | None = None
        if store is None:
            if url is None:
                raise ValueError("ActiveRow needs a database url or a store")
            self._connection = DatabaseConnection(url, echo=echo)
            store = DatabaseStore(self._connection.engine)

        self._store = store
        self._schema_cache = SchemaCache(SchemaIntrospector(store))
        self._loader = RecordLoader(store)
        self._persistence = PersistenceEngine(store)
        self._models: dict[str, type[Entity]] = {}

    @property
    def store(self) -> StoreHandle:
        """Store handle statements run against."""
        return self._store

    @property
    def schema_cache(self) -> SchemaCache:
        """Schema cache shared by every entity of this instance."""
        return self._schema_cache

    @property
    def loader(self) -> RecordLoader:
        """Record loader bound to the store."""
        return self._loader

    @property
    def persistence(self) -> PersistenceEngine:
        """Persistence engine bound to the store."""
        return self._persistence

    def schema(self, table_name: str) -> TableSchema:
        """Get a table's schema, introspecting it on first use.

        Raises:
            SchemaError: If the table cannot be described
        """
        return self._schema_cache.get(table_name)

    def load(
        self,
        entity_type: type[E],
        criterion: Any = None,
        values: Sequence[Any] | None = None,
        *,
        mode: SelectionMode | str | None = None,
    ) -> E:
        """Build an entity of ``entity_type`` bound to this instance.

        Args:
            entity_type: Entity subclass to instantiate
            criterion: Primary key value, column mapping or predicate string
            values: Values for a predicate string's placeholders
            mode: Explicit selection mode

        Returns:
            The loaded (or defaulted) entity
        """
        return entity_type(self, criterion, values, mode=mode)

    def model(self, table_name: str) -> type[Entity]:
        """Get a plain Entity subclass for a table known only by name."""
        model = self._models.get(table_name)
        if model is None:
            model = type(f"{table_name}Model", (Entity,), {"__tablename__": table_name})
            self._models[table_name] = model
        return model

    def close(self) -> None:
        """Dispose of the engine if this instance created one."""
        if self._connection is not None:
            self._connection.close()

    def __enter__(self) -> ActiveRow:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
