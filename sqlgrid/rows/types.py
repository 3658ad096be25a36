"""Data structures shared across row-source modules."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass, field
from enum import Enum


class SqlType(str, Enum):
    """Declared column types as reported by a driver."""

    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    REAL = "REAL"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    NUMERIC = "NUMERIC"
    CLOB = "CLOB"
    BLOB = "BLOB"
    BIT = "BIT"
    REF = "REF"
    JAVA_OBJECT = "JAVA_OBJECT"
    STRUCT = "STRUCT"
    ROWID = "ROWID"
    NCLOB = "NCLOB"
    SQLXML = "SQLXML"
    CHAR = "CHAR"
    VARCHAR = "VARCHAR"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"
    NULL = "NULL"
    OTHER = "OTHER"

    @property
    def category(self) -> TypeCategory:
        return _CATEGORIES.get(self, TypeCategory.DEFAULT)


class TypeCategory(str, Enum):
    """Formatting strategy picked for a column."""

    NUMERIC = "numeric"
    CLOB = "clob"
    BLOB = "blob"
    OBJECT = "object"
    DEFAULT = "default"


_CATEGORIES: dict[SqlType, TypeCategory] = {
    SqlType.TINYINT: TypeCategory.NUMERIC,
    SqlType.SMALLINT: TypeCategory.NUMERIC,
    SqlType.INTEGER: TypeCategory.NUMERIC,
    SqlType.BIGINT: TypeCategory.NUMERIC,
    SqlType.REAL: TypeCategory.NUMERIC,
    SqlType.FLOAT: TypeCategory.NUMERIC,
    SqlType.DOUBLE: TypeCategory.NUMERIC,
    SqlType.DECIMAL: TypeCategory.NUMERIC,
    SqlType.NUMERIC: TypeCategory.NUMERIC,
    SqlType.CLOB: TypeCategory.CLOB,
    SqlType.BLOB: TypeCategory.BLOB,
    SqlType.BIT: TypeCategory.OBJECT,
    SqlType.REF: TypeCategory.OBJECT,
    SqlType.JAVA_OBJECT: TypeCategory.OBJECT,
    SqlType.STRUCT: TypeCategory.OBJECT,
    SqlType.ROWID: TypeCategory.OBJECT,
    # NCLOB is shown through str() like other opaque values, not windowed.
    SqlType.NCLOB: TypeCategory.OBJECT,
    SqlType.SQLXML: TypeCategory.OBJECT,
}

NULL_TEXT = "null"

_FIXED_ROW_FIELDS = frozenset({"cells", "is_meta", "deleted", "updated", "inserted"})


class CellState(str, Enum):
    """What a cell holds."""

    TEXT = "text"
    NULL = "null"
    NOT_READ = "not_read"


@dataclass(frozen=True, slots=True)
class Cell:
    """A single display value.

    ``text`` is what a renderer prints. NULL cells carry the literal ``"null"``
    for the numeric, object and large-object families and no text otherwise;
    NOT_READ cells (large-object reading disabled) never carry text.
    """

    state: CellState
    text: str | None = None

    @classmethod
    def of(cls, text: str) -> Cell:
        return cls(CellState.TEXT, text)

    @classmethod
    def null(cls, text: str | None = NULL_TEXT) -> Cell:
        return cls(CellState.NULL, text)

    @classmethod
    def not_read(cls) -> Cell:
        return cls(CellState.NOT_READ)

    @property
    def width(self) -> int:
        return 1 if self.text is None else len(self.text)


@dataclass(slots=True, eq=False, weakref_slot=True)
class Row:
    """One display line produced by a row source.

    Cells and flags are fixed once built; assigning to them raises
    ``FrozenInstanceError``. ``sizes`` is replaced only by width
    normalization, which may hand the same list to several rows.
    """

    cells: tuple[Cell, ...]
    is_meta: bool = False
    deleted: bool = False
    updated: bool = False
    inserted: bool = False
    sizes: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.sizes:
            self.sizes = [cell.width for cell in self.cells]

    def __setattr__(self, name: str, value: object) -> None:
        if name in _FIXED_ROW_FIELDS and hasattr(self, name):
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        object.__setattr__(self, name, value)

    @property
    def values(self) -> tuple[str | None, ...]:
        return tuple(cell.text for cell in self.cells)

    def __len__(self) -> int:
        return len(self.cells)
