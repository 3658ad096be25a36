"""Best-effort primary-key detection for result columns."""

from __future__ import annotations

from enum import Enum

from sqlgrid.shared.exceptions import DataAccessError
from sqlgrid.shared.logging import Logger

from .driver import PrimaryKeyLookup, ResultMetadata


class KeyState(Enum):
    UNRESOLVED = "unresolved"
    KEY = "key"
    NOT_KEY = "not_key"


class PrimaryKeyResolver:
    """Answer whether a result column belongs to its table's primary key.

    Drivers do not all report table names for result columns (some return an
    empty string), so the answer is best effort. Each column is resolved at
    most once; the first answer, including a failed lookup's False, is kept
    for the lifetime of the resolver.
    """

    def __init__(
        self,
        metadata: ResultMetadata,
        lookup: PrimaryKeyLookup | None,
        *,
        catalog: str | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._metadata = metadata
        self._lookup = lookup
        self._catalog = catalog
        self._logger = logger
        self._states = [KeyState.UNRESOLVED] * metadata.column_count()

    def state(self, column: int) -> KeyState:
        return self._states[column]

    def is_primary_key(self, column: int) -> bool:
        if self._states[column] is KeyState.UNRESOLVED:
            resolved = self._resolve(column)
            self._states[column] = KeyState.KEY if resolved else KeyState.NOT_KEY
        return self._states[column] is KeyState.KEY

    def _resolve(self, column: int) -> bool:
        try:
            table = self._metadata.table_name(column)
            name = self._metadata.column_name(column)
            if not table or not name or self._lookup is None:
                return False
            return self._scan(self._lookup, table, name)
        except DataAccessError as exc:
            if self._logger is not None:
                self._logger.debug(f"Primary key lookup for column {column} failed: {exc}")
            return False

    def _scan(self, lookup: PrimaryKeyLookup, table: str, name: str) -> bool:
        wanted = name.casefold()
        for key_row in lookup.primary_keys(self._catalog, table):
            key_column = key_row.get("COLUMN_NAME")
            if key_column is not None and str(key_column).casefold() == wanted:
                return True
        return False
