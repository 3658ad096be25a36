"""Database connection helpers."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import AppConfig
from .exceptions import DatabaseError


def _resolve_database_path(config: AppConfig, *, read_only: bool) -> Path:
    db_path = config.database.path
    if read_only:
        if not db_path.exists():
            raise DatabaseError(f"Database path not found: {db_path}")
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


def _open_connection(path: Path, *, read_only: bool = False) -> sqlite3.Connection:
    try:
        if read_only:
            uri = f"file:{path}?mode=ro"
            return sqlite3.connect(uri, uri=True)
        return sqlite3.connect(path)
    except sqlite3.Error as exc:
        raise DatabaseError(f"Unable to open database {path}: {exc}") from exc


@contextmanager
def connect(config: AppConfig, *, read_only: bool = False) -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection for the configured database."""
    db_path = _resolve_database_path(config, read_only=read_only)
    connection = _open_connection(db_path, read_only=read_only)
    try:
        yield connection
    finally:
        connection.close()
