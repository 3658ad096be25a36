from __future__ import annotations

import sqlite3

import pytest

from sqlgrid.rows import BufferedRows, CellState, IncrementalRows, LargeObjectReader, SqlType
from sqlgrid.rows.sqlite import (
    SqlitePrimaryKeyLookup,
    SqliteResult,
    sql_type_for_declaration,
    sql_type_for_value,
)
from sqlgrid.shared.exceptions import DataAccessError, UnsupportedCapabilityError


@pytest.fixture()
def connection():
    conn = sqlite3.connect(":memory:")
    conn.executescript(
        """
        CREATE TABLE documents (
            id INTEGER PRIMARY KEY,
            title VARCHAR(20) NOT NULL,
            body CLOB,
            attachment BLOB,
            price DECIMAL(10, 2)
        );
        INSERT INTO documents (id, title, body, attachment, price)
        VALUES (1, 'Readme', 'A very long body of text', X'68656C6C6F', 1234567),
               (2, 'Empty', NULL, NULL, NULL);
        CREATE TABLE memberships (
            user_id INTEGER,
            group_id INTEGER,
            PRIMARY KEY (group_id, user_id)
        );
        """
    )
    yield conn
    conn.close()


@pytest.mark.parametrize(
    "declared, expected",
    [
        ("INTEGER", SqlType.INTEGER),
        ("BIGINT", SqlType.INTEGER),
        ("VARCHAR(20)", SqlType.VARCHAR),
        ("CLOB", SqlType.CLOB),
        ("BLOB", SqlType.BLOB),
        ("DOUBLE PRECISION", SqlType.DOUBLE),
        ("DECIMAL(10, 2)", SqlType.NUMERIC),
        ("BOOLEAN", SqlType.BOOLEAN),
        ("DATETIME", SqlType.TIMESTAMP),
        ("", None),
    ],
)
def test_declared_types_follow_sqlite_affinity(declared: str, expected: SqlType | None) -> None:
    assert sql_type_for_declaration(declared) is expected


def test_value_types_are_inferred() -> None:
    assert sql_type_for_value(None) is SqlType.NULL
    assert sql_type_for_value(3) is SqlType.BIGINT
    assert sql_type_for_value(1.5) is SqlType.DOUBLE
    assert sql_type_for_value(b"x") is SqlType.BLOB
    assert sql_type_for_value("x") is SqlType.VARCHAR


def test_metadata_from_named_table(connection) -> None:
    cursor = connection.execute("SELECT id, title, body, attachment, price, 1 + 1 AS two FROM documents")
    result = SqliteResult(cursor, table="documents")
    metadata = result.metadata

    assert metadata.column_count() == 6
    assert [metadata.column_label(i) for i in range(6)] == ["id", "title", "body", "attachment", "price", "two"]
    assert [metadata.column_type(i) for i in range(6)] == [
        SqlType.INTEGER,
        SqlType.VARCHAR,
        SqlType.CLOB,
        SqlType.BLOB,
        SqlType.NUMERIC,
        SqlType.BIGINT,
    ]
    assert metadata.table_name(0) == "documents"
    assert metadata.table_name(5) is None
    assert metadata.display_size(1) == 20
    assert metadata.display_size(0) == 0
    assert result.catalog == "main"


def test_type_inference_does_not_lose_the_first_row(connection) -> None:
    cursor = connection.execute("SELECT id, title FROM documents ORDER BY id")
    result = SqliteResult(cursor)

    assert result.metadata.column_type(0) is SqlType.BIGINT
    assert result.advance() is True
    assert result.get_object(0) == 1
    assert result.advance() is True
    assert result.get_string(1) == "Empty"
    assert result.advance() is False


def test_row_state_is_unsupported(connection) -> None:
    result = SqliteResult(connection.execute("SELECT id FROM documents"))

    with pytest.raises(UnsupportedCapabilityError):
        result.row_deleted()


def test_reading_before_advance_is_a_data_access_error(connection) -> None:
    result = SqliteResult(connection.execute("SELECT id FROM documents"), table="documents")

    with pytest.raises(DataAccessError):
        result.get_object(0)


def test_primary_key_lookup_lists_key_columns_in_key_order(connection) -> None:
    lookup = SqlitePrimaryKeyLookup(connection)

    keys = list(lookup.primary_keys("main", "memberships"))

    assert [key["COLUMN_NAME"] for key in keys] == ["group_id", "user_id"]
    assert list(lookup.primary_keys("main", "missing_table")) == []


def test_primary_key_lookup_wraps_sqlite_errors(connection) -> None:
    lookup = SqlitePrimaryKeyLookup(connection)

    with pytest.raises(DataAccessError):
        lookup.primary_keys("no_such_schema", "documents")


def test_buffered_rows_over_sqlite(connection) -> None:
    cursor = connection.execute("SELECT id, title, body, attachment, price FROM documents ORDER BY id")
    source = BufferedRows(
        SqliteResult(cursor, table="documents"),
        lookup=SqlitePrimaryKeyLookup(connection),
        lob_reader=LargeObjectReader(offset=0, length=6),
    )

    rows = list(source)

    assert rows[0].values == ("id", "title", "body", "attachment", "price")
    assert rows[1].values == ("1", "Readme", "A very", "hello", "1234567")
    assert rows[2].values == ("2", "Empty", "null", "null", "null")
    assert source.is_primary_key(0) is True
    assert source.is_primary_key(1) is False


def test_incremental_rows_without_table_hint(connection) -> None:
    cursor = connection.execute("SELECT id, body FROM documents ORDER BY id")
    source = IncrementalRows(SqliteResult(cursor), lookup=SqlitePrimaryKeyLookup(connection))

    header, first, second = list(source)

    assert header.is_meta is True
    assert first.values == ("1", "A very long body of text")
    assert second.cells[1].state is CellState.NULL
    assert second.values == ("2", None)
    assert source.is_primary_key(0) is False
