"""Driver adapter exposing a ``sqlite3`` cursor as a :class:`ResultCursor`."""

from __future__ import annotations

import re
import sqlite3
from typing import Any, Iterable, Mapping, Sequence

from sqlgrid.shared.exceptions import DataAccessError, UnsupportedCapabilityError

from .lobs import BytesLob, TextLob
from .types import SqlType

SQLITE_CATALOG = "main"

_LENGTH_PATTERN = re.compile(r"\(\s*(\d+)")


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def sql_type_for_declaration(declared: str | None) -> SqlType | None:
    """Map a declared column type to a SqlType using SQLite's affinity rules.

    Returns None for an empty declaration, which carries no type information.
    """
    if not declared:
        return None
    upper = declared.upper()
    if "INT" in upper:
        return SqlType.INTEGER
    if "CLOB" in upper:
        return SqlType.CLOB
    if "CHAR" in upper or "TEXT" in upper:
        return SqlType.VARCHAR
    if "BLOB" in upper:
        return SqlType.BLOB
    if "REAL" in upper or "FLOA" in upper or "DOUB" in upper:
        return SqlType.DOUBLE
    if "BOOL" in upper:
        return SqlType.BOOLEAN
    if "DATE" in upper or "TIME" in upper:
        return SqlType.TIMESTAMP
    return SqlType.NUMERIC


def sql_type_for_value(value: Any) -> SqlType:
    if value is None:
        return SqlType.NULL
    if isinstance(value, int):
        return SqlType.BIGINT
    if isinstance(value, float):
        return SqlType.DOUBLE
    if isinstance(value, (bytes, bytearray, memoryview)):
        return SqlType.BLOB
    return SqlType.VARCHAR


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class SqliteMetadata:
    """Column metadata collected once when the result is wrapped."""

    def __init__(
        self,
        labels: Sequence[str],
        types: Sequence[SqlType],
        tables: Sequence[str | None],
        display_sizes: Sequence[int],
    ) -> None:
        self._labels = tuple(labels)
        self._types = tuple(types)
        self._tables = tuple(tables)
        self._display_sizes = tuple(display_sizes)

    def column_count(self) -> int:
        return len(self._labels)

    def column_label(self, column: int) -> str | None:
        return self._labels[column]

    def column_name(self, column: int) -> str | None:
        return self._labels[column]

    def table_name(self, column: int) -> str | None:
        return self._tables[column]

    def column_type(self, column: int) -> SqlType:
        return self._types[column]

    def display_size(self, column: int) -> int:
        return self._display_sizes[column]


class SqliteResult:
    """Forward-only view over an executed ``sqlite3`` cursor.

    SQLite does not report which table a result column came from, nor the
    declared type of an expression. When ``table`` names the source table,
    columns whose label matches one of its columns take their declared type
    and table name from ``PRAGMA table_info``; every other column gets a type
    inferred from the first row's value and no table name.
    """

    def __init__(self, cursor: sqlite3.Cursor, *, table: str | None = None) -> None:
        self._cursor = cursor
        self._current: tuple[Any, ...] | None = None
        self._lookahead: list[tuple[Any, ...]] = []
        labels = [column[0] for column in cursor.description or ()]

        declared: dict[str, str] = {}
        if table:
            declared = _declared_types(cursor.connection, table)

        types: list[SqlType] = []
        tables: list[str | None] = []
        sizes: list[int] = []
        first_row: tuple[Any, ...] | None = None
        peeked = False
        for index, label in enumerate(labels):
            declaration = declared.get(label.casefold())
            sql_type = sql_type_for_declaration(declaration)
            if sql_type is None:
                if not peeked:
                    first_row = self._peek()
                    peeked = True
                sql_type = sql_type_for_value(first_row[index] if first_row else None)
            types.append(sql_type)
            tables.append(table if declaration is not None else None)
            match = _LENGTH_PATTERN.search(declaration or "")
            sizes.append(int(match.group(1)) if match else 0)

        self._metadata = SqliteMetadata(labels, types, tables, sizes)

    @property
    def metadata(self) -> SqliteMetadata:
        return self._metadata

    @property
    def catalog(self) -> str | None:
        return SQLITE_CATALOG

    def advance(self) -> bool:
        if self._lookahead:
            self._current = self._lookahead.pop(0)
            return True
        self._current = self._fetch()
        return self._current is not None

    def get_object(self, column: int) -> Any:
        return self._value(column)

    def get_string(self, column: int) -> str | None:
        value = self._value(column)
        return None if value is None else _as_text(value)

    def get_clob(self, column: int) -> TextLob | None:
        value = self._value(column)
        return None if value is None else TextLob(_as_text(value))

    def get_blob(self, column: int) -> BytesLob | None:
        value = self._value(column)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray, memoryview)):
            return BytesLob(bytes(value))
        return BytesLob(str(value).encode("utf-8"))

    def row_deleted(self) -> bool:
        raise UnsupportedCapabilityError("SQLite cursors do not report deleted rows.")

    def row_updated(self) -> bool:
        raise UnsupportedCapabilityError("SQLite cursors do not report updated rows.")

    def row_inserted(self) -> bool:
        raise UnsupportedCapabilityError("SQLite cursors do not report inserted rows.")

    def _value(self, column: int) -> Any:
        if self._current is None:
            raise DataAccessError("Cursor is not positioned on a row.")
        try:
            return self._current[column]
        except IndexError as exc:
            raise DataAccessError(f"Column index {column} is out of range.") from exc

    def _peek(self) -> tuple[Any, ...] | None:
        row = self._fetch()
        if row is not None:
            self._lookahead.append(row)
        return row

    def _fetch(self) -> tuple[Any, ...] | None:
        try:
            row = self._cursor.fetchone()
        except sqlite3.Error as exc:
            raise DataAccessError(f"SQLite error while reading rows: {exc}") from exc
        return None if row is None else tuple(row)


class SqlitePrimaryKeyLookup:
    """Primary-key metadata backed by ``PRAGMA table_info``."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def primary_keys(self, catalog: str | None, table: str) -> Iterable[Mapping[str, Any]]:
        schema = catalog or SQLITE_CATALOG
        sql = f"PRAGMA {_quote_identifier(schema)}.table_info({_quote_identifier(table)})"
        try:
            rows = self._connection.execute(sql).fetchall()
        except sqlite3.Error as exc:
            raise DataAccessError(f"Unable to read primary keys for '{table}': {exc}") from exc
        keys = sorted((row[5], row[1]) for row in rows if row[5])
        return [
            {"TABLE_CAT": schema, "TABLE_NAME": table, "COLUMN_NAME": name, "KEY_SEQ": seq}
            for seq, name in keys
        ]


def _declared_types(connection: sqlite3.Connection, table: str) -> dict[str, str]:
    sql = f"PRAGMA {_quote_identifier(SQLITE_CATALOG)}.table_info({_quote_identifier(table)})"
    try:
        rows = connection.execute(sql).fetchall()
    except sqlite3.Error as exc:
        raise DataAccessError(f"Unable to describe table '{table}': {exc}") from exc
    return {str(row[1]).casefold(): str(row[2] or "") for row in rows}
