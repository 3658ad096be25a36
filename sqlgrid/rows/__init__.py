"""Public exports for the row-source package."""

from .keys import KeyState, PrimaryKeyResolver
from .lobs import BytesLob, LargeObjectReader, TextLob
from .materializer import RowMaterializer
from .numeric import NumericFormatter
from .source import BufferedRows, IncrementalRows, RowSource, open_rows
from .types import Cell, CellState, Row, SqlType, TypeCategory

__all__ = [
    "BufferedRows",
    "BytesLob",
    "Cell",
    "CellState",
    "IncrementalRows",
    "KeyState",
    "LargeObjectReader",
    "NumericFormatter",
    "PrimaryKeyResolver",
    "Row",
    "RowMaterializer",
    "RowSource",
    "SqlType",
    "TextLob",
    "TypeCategory",
    "open_rows",
]
