"""Plain-text table rendering for row sources."""

from __future__ import annotations

import sys
from typing import IO

from rich.console import Console
from rich.text import Text

from sqlgrid.rows import Row, RowSource
from sqlgrid.shared.logging import Logger

COLUMN_SEPARATOR = " | "
HEADER_SEPARATOR = "-+-"

_ROW_STYLES = (
    ("deleted", "strike"),
    ("inserted", "green"),
    ("updated", "yellow"),
)


def render_rows(source: RowSource, *, logger: Logger, stream: IO[str] | None = None) -> int:
    """Print every row of ``source`` as an aligned table; return the data row count.

    Widths are normalized before the first line is written. A buffered source
    then pads to the exact widths of the whole result; an incremental source
    pads to the widest value seen so far, so lines may grow as it streams.
    """
    console = Console(file=stream or sys.stdout, highlight=False, force_terminal=False, soft_wrap=True)
    source.normalize_widths()

    count = 0
    for row in source:
        if row.is_meta:
            console.print(_header_line(source, row))
            console.print(HEADER_SEPARATOR.join("-" * size for size in row.sizes), markup=False)
            continue
        console.print(_data_line(row))
        count += 1

    if count == 0:
        logger.info("Query returned zero rows.")
    else:
        logger.debug(f"Rendered {count} row(s).")
    return count


def _cell_text(row: Row, column: int) -> str:
    text = row.cells[column].text or ""
    return text.ljust(row.sizes[column])


def _header_line(source: RowSource, row: Row) -> Text:
    line = Text()
    for column in range(len(row)):
        if column:
            line.append(COLUMN_SEPARATOR)
        style = "bold underline" if source.is_primary_key(column) else "bold"
        line.append(_cell_text(row, column), style=style)
    return line


def _data_line(row: Row) -> Text:
    style = " ".join(name for flag, name in _ROW_STYLES if getattr(row, flag))
    return Text(COLUMN_SEPARATOR.join(_cell_text(row, column) for column in range(len(row))), style=style)
