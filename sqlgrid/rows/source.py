"""Lazy row sequences over a query result.

A row source yields the header row first, then one row per cursor advance.
It is single pass: once exhausted it cannot be replayed, a new query has to
be issued instead. Two width strategies are available:

``BufferedRows``
    Drains the whole cursor when built. ``normalize_widths`` gives every row
    the exact per-column maximum over the complete result.

``IncrementalRows``
    Materializes one row per advance. ``normalize_widths`` switches on a
    running per-column maximum that is shared by the header and every row
    produced afterwards, so widths grow as wider rows stream past. Rows the
    renderer still holds see that growth; rows it has dropped are forgotten.
"""

from __future__ import annotations

import weakref
from abc import ABC, abstractmethod
from typing import Protocol

from sqlgrid.shared.config import DisplaySettings
from sqlgrid.shared.exceptions import UnsupportedOperationError
from sqlgrid.shared.logging import Logger

from .driver import PrimaryKeyLookup, ResultCursor
from .keys import PrimaryKeyResolver
from .lobs import LargeObjectReader
from .materializer import RowMaterializer
from .numeric import NumericFormatter
from .types import Row


class RowSource(Protocol):
    """What a renderer consumes."""

    @property
    def column_count(self) -> int: ...

    def __iter__(self) -> RowSource: ...

    def __next__(self) -> Row: ...

    def has_next(self) -> bool: ...

    def remove(self) -> None: ...

    def normalize_widths(self) -> None: ...

    def is_primary_key(self, column: int) -> bool: ...


class _RowSourceBase(ABC):
    def __init__(
        self,
        cursor: ResultCursor,
        *,
        lookup: PrimaryKeyLookup | None = None,
        formatter: NumericFormatter | None = None,
        lob_reader: LargeObjectReader | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._cursor = cursor
        self._logger = logger.child("rows") if logger is not None else None
        metadata = cursor.metadata
        self._materializer = RowMaterializer(metadata, formatter=formatter, lob_reader=lob_reader)
        self._keys = PrimaryKeyResolver(
            metadata,
            lookup,
            catalog=cursor.catalog,
            logger=self._logger.child("keys") if self._logger is not None else None,
        )

    @property
    def column_count(self) -> int:
        return self._materializer.column_count

    def __iter__(self) -> _RowSourceBase:
        return self

    def __next__(self) -> Row:
        if not self.has_next():
            raise StopIteration
        return self._take()

    def remove(self) -> None:
        raise UnsupportedOperationError("Rows cannot be removed from a query result.")

    def is_primary_key(self, column: int) -> bool:
        return self._keys.is_primary_key(column)

    @abstractmethod
    def has_next(self) -> bool:
        """Return True if another row is available, without skipping any."""

    @abstractmethod
    def normalize_widths(self) -> None:
        """Make rows report per-column maximum widths."""

    @abstractmethod
    def _take(self) -> Row:
        """Hand out the row ``has_next`` found."""


class BufferedRows(_RowSourceBase):
    """Row source that reads the complete result up front."""

    def __init__(self, cursor: ResultCursor, **kwargs) -> None:
        super().__init__(cursor, **kwargs)
        rows = [self._materializer.header()]
        while cursor.advance():
            rows.append(self._materializer.data_row(cursor))
        self._rows = rows
        self._position = 0
        if self._logger is not None:
            self._logger.debug(f"Buffered {len(rows) - 1} row(s) across {self.column_count} column(s).")

    def __len__(self) -> int:
        return len(self._rows)

    def has_next(self) -> bool:
        return self._position < len(self._rows)

    def _take(self) -> Row:
        row = self._rows[self._position]
        self._position += 1
        return row

    def normalize_widths(self) -> None:
        widths = [0] * self.column_count
        for row in self._rows:
            for column, cell in enumerate(row.cells):
                widths[column] = max(widths[column], cell.width)
        for row in self._rows:
            row.sizes = widths


class IncrementalRows(_RowSourceBase):
    """Row source that reads one cursor row at a time.

    Widths start from the header labels and, when ``max_column_width`` is
    positive, from the driver's display size capped at that width.
    """

    def __init__(self, cursor: ResultCursor, *, max_column_width: int = 0, **kwargs) -> None:
        super().__init__(cursor, **kwargs)
        metadata = cursor.metadata
        self._header = self._materializer.header()
        self._max_widths = list(self._header.sizes)
        if max_column_width > 0:
            for column in range(self.column_count):
                display = min(metadata.display_size(column), max_column_width)
                self._max_widths[column] = max(self._max_widths[column], display)
        self._pending: Row | None = self._header
        self._exhausted = False
        self._normalizing = False
        self._handed_out: weakref.WeakSet[Row] = weakref.WeakSet()

    def has_next(self) -> bool:
        if self._pending is None and not self._exhausted:
            if self._cursor.advance():
                self._pending = self._materializer.data_row(self._cursor)
            else:
                self._exhausted = True
        return self._pending is not None

    def _take(self) -> Row:
        row = self._pending
        if row is None:
            raise StopIteration
        self._pending = None
        self._track(row)
        return row

    def _track(self, row: Row) -> None:
        for column, cell in enumerate(row.cells):
            if cell.width > self._max_widths[column]:
                self._max_widths[column] = cell.width
        if self._normalizing:
            row.sizes = self._max_widths
        else:
            self._handed_out.add(row)

    def normalize_widths(self) -> None:
        if self._normalizing:
            return
        self._normalizing = True
        self._header.sizes = self._max_widths
        for row in self._handed_out:
            row.sizes = self._max_widths
        self._handed_out.clear()


def open_rows(
    cursor: ResultCursor,
    *,
    settings: DisplaySettings,
    lookup: PrimaryKeyLookup | None = None,
    logger: Logger | None = None,
) -> BufferedRows | IncrementalRows:
    """Build the row source the display settings ask for."""
    formatter = NumericFormatter.from_pattern(settings.number_format)
    lob_reader = (
        LargeObjectReader(settings.lob_start_offset, settings.lob_read_length)
        if settings.read_lob_fields
        else None
    )
    common = dict(lookup=lookup, formatter=formatter, lob_reader=lob_reader, logger=logger)
    if settings.incremental:
        return IncrementalRows(cursor, max_column_width=settings.max_column_width, **common)
    return BufferedRows(cursor, **common)
