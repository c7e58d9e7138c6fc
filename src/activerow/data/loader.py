"""Record loading."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from activerow.exceptions import QueryError, StoreError

if TYPE_CHECKING:
    from activerow.core.types import Selection
    from activerow.store.base import StoreHandle

logger = logging.getLogger(__name__)


class RecordLoader:
    """Fetches the row a selection points at."""

    def __init__(self, store: StoreHandle) -> None:
        self._store = store

    def load(self, table_name: str, selection: Selection) -> dict[str, Any] | None:
        """Run ``SELECT *`` for a selection and return the first row.

        Rows past the first are ignored; there is no ordering unless the
        predicate asks for one.

        Args:
            table_name: Table to read
            selection: Resolved predicate and bound values

        Returns:
            The first matching row, or None if nothing matched

        Raises:
            QueryError: If the store fails to run the query
        """
        sql = f"SELECT * FROM {table_name} WHERE {selection.predicate}"
        logger.debug(sql)
        logger.debug(list(selection.bound_values))

        try:
            result = self._store.execute(sql, selection.bound_values)
        except StoreError as e:
            raise QueryError(table_name, sql, e.message) from e

        row = result.first()
        if row is None:
            logger.debug("No records found")
        else:
            logger.debug("Record found")
        return row
