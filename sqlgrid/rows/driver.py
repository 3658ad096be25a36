"""Interfaces a database driver adapter must provide to build rows.

Column indexes are 0-based everywhere. Adapters translate their driver's
errors into :class:`~sqlgrid.shared.exceptions.DataAccessError`, and raise
:class:`~sqlgrid.shared.exceptions.UnsupportedCapabilityError` for optional
operations they cannot answer.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol

from .types import SqlType


class CharacterLob(Protocol):
    """Handle to a character large object."""

    def substring(self, offset: int, length: int) -> str:
        """Return at most ``length`` characters starting at ``offset``."""
        ...


class BinaryLob(Protocol):
    """Handle to a binary large object."""

    def read(self, offset: int, length: int) -> bytes:
        """Return at most ``length`` bytes starting at ``offset``."""
        ...


class ResultMetadata(Protocol):
    def column_count(self) -> int: ...

    def column_label(self, column: int) -> str | None: ...

    def column_name(self, column: int) -> str | None: ...

    def table_name(self, column: int) -> str | None: ...

    def column_type(self, column: int) -> SqlType: ...

    def display_size(self, column: int) -> int: ...


class ResultCursor(Protocol):
    """Forward-only cursor positioned before the first row until advanced."""

    @property
    def metadata(self) -> ResultMetadata: ...

    @property
    def catalog(self) -> str | None: ...

    def advance(self) -> bool:
        """Move to the next row; return False once the result is exhausted."""
        ...

    def get_object(self, column: int) -> Any: ...

    def get_string(self, column: int) -> str | None: ...

    def get_clob(self, column: int) -> CharacterLob | None: ...

    def get_blob(self, column: int) -> BinaryLob | None: ...

    def row_deleted(self) -> bool: ...

    def row_updated(self) -> bool: ...

    def row_inserted(self) -> bool: ...


class PrimaryKeyLookup(Protocol):
    def primary_keys(self, catalog: str | None, table: str) -> Iterable[Mapping[str, Any]]:
        """Yield one mapping per key column, each carrying ``COLUMN_NAME``."""
        ...
