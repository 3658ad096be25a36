"""Query execution helpers for the sqlgrid CLI."""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Iterator

from sqlgrid.rows import RowSource, open_rows
from sqlgrid.rows.sqlite import SqlitePrimaryKeyLookup, SqliteResult
from sqlgrid.shared.config import AppConfig
from sqlgrid.shared.database import connect
from sqlgrid.shared.exceptions import QueryError
from sqlgrid.shared.logging import Logger


@contextmanager
def run_query(
    *,
    config: AppConfig,
    query: str,
    params: Mapping[str, object] | None = None,
    table: str | None = None,
    logger: Logger | None = None,
) -> Iterator[RowSource]:
    """Execute SQL read-only and yield a row source over its result.

    The source is only usable inside the ``with`` block; leaving it closes
    the connection the cursor reads from.
    """
    bindings = dict(params or {})
    with connect(config, read_only=True) as connection:
        try:
            cursor = connection.execute(query, bindings)
        except sqlite3.OperationalError as exc:
            raise QueryError(f"SQLite error: {exc}") from exc
        except sqlite3.DatabaseError as exc:
            raise QueryError(f"Database error during execution: {exc}") from exc

        if cursor.description is None:
            raise QueryError("Statement did not return a result set.")

        result = SqliteResult(cursor, table=table)
        yield open_rows(
            result,
            settings=config.display,
            lookup=SqlitePrimaryKeyLookup(connection),
            logger=logger,
        )
