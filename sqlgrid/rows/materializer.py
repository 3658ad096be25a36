"""Build display rows from result metadata and cursor positions."""

from __future__ import annotations

from typing import Callable

from sqlgrid.shared.exceptions import DataAccessError, UnsupportedCapabilityError

from .driver import ResultCursor, ResultMetadata
from .lobs import LargeObjectReader
from .numeric import NumericFormatter
from .types import Cell, Row, TypeCategory


class RowMaterializer:
    """Turn metadata into a header row and cursor positions into data rows.

    ``lob_reader`` set to None disables large-object reads: CLOB and BLOB
    columns then produce NOT_READ cells instead of touching the handle.
    """

    def __init__(
        self,
        metadata: ResultMetadata,
        *,
        formatter: NumericFormatter | None = None,
        lob_reader: LargeObjectReader | None = None,
    ) -> None:
        self._metadata = metadata
        self._formatter = formatter
        self._lob_reader = lob_reader
        self._count = metadata.column_count()
        self._categories = tuple(
            metadata.column_type(column).category for column in range(self._count)
        )

    @property
    def column_count(self) -> int:
        return self._count

    def header(self) -> Row:
        cells = []
        for column in range(self._count):
            label = self._metadata.column_label(column)
            cells.append(Cell.null(None) if label is None else Cell.of(label))
        return Row(cells=tuple(cells), is_meta=True)

    def data_row(self, cursor: ResultCursor) -> Row:
        deleted = _row_flag(cursor.row_deleted)
        updated = _row_flag(cursor.row_updated)
        inserted = _row_flag(cursor.row_inserted)
        cells = tuple(self._cell(cursor, column) for column in range(self._count))
        return Row(cells=cells, deleted=deleted, updated=updated, inserted=inserted)

    def _cell(self, cursor: ResultCursor, column: int) -> Cell:
        category = self._categories[column]

        if category is TypeCategory.NUMERIC:
            value = cursor.get_object(column)
            if value is None:
                return Cell.null()
            if self._formatter is not None:
                return Cell.of(self._formatter.format(value))
            return Cell.of(str(value))

        if category is TypeCategory.CLOB:
            if self._lob_reader is None:
                return Cell.not_read()
            clob = cursor.get_clob(column)
            if clob is None:
                return Cell.null()
            return Cell.of(self._lob_reader.read_text(clob))

        if category is TypeCategory.BLOB:
            if self._lob_reader is None:
                return Cell.not_read()
            blob = cursor.get_blob(column)
            if blob is None:
                return Cell.null()
            return Cell.of(self._lob_reader.read_binary_text(blob))

        if category is TypeCategory.OBJECT:
            value = cursor.get_object(column)
            if value is None:
                return Cell.null()
            return Cell.of(str(value))

        text = cursor.get_string(column)
        if text is None:
            return Cell.null(None)
        return Cell.of(text)


def _row_flag(predicate: Callable[[], bool]) -> bool:
    """Row-state flags are advisory: unsupported or failing reads mean False."""
    try:
        return bool(predicate())
    except (UnsupportedCapabilityError, DataAccessError):
        return False
