"""Per-invocation state shared by the activerow commands."""

import os
from dataclasses import dataclass, field

from activerow import ActiveRow

DEFAULT_DATABASE_URL = "sqlite:///./activerow.db"
URL_ENV_VAR = "ACTIVEROW_URL"


def get_database_url(url: str | None) -> str:
    """Pick the store URL: ``--database``, then $ACTIVEROW_URL, then a local SQLite file."""
    return url or os.getenv(URL_ENV_VAR) or DEFAULT_DATABASE_URL


@dataclass
class CLIContext:
    """Options from the root callback plus the ActiveRow the command talks to.

    The ActiveRow is opened on first use, so ``version`` and ``--help`` never
    touch the store. Commands call ``close()`` when they finish.
    """

    database_url: str
    echo: bool
    json_output: bool
    _db: ActiveRow | None = field(default=None, init=False, repr=False)

    def get_db(self) -> ActiveRow:
        if self._db is None:
            self._db = ActiveRow(self.database_url, echo=self.echo)
        return self._db

    def close(self) -> None:
        if self._db is None:
            return
        self._db.close()
        self._db = None
