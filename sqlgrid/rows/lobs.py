"""Bounded reads from large-object handles."""

from __future__ import annotations

from dataclasses import dataclass

from sqlgrid.shared.exceptions import DataAccessError

from .driver import BinaryLob, CharacterLob


@dataclass(frozen=True, slots=True)
class LargeObjectReader:
    """Read a fixed window of ``length`` units starting at ``offset``."""

    offset: int
    length: int

    def read_text(self, lob: CharacterLob) -> str:
        return lob.substring(self.offset, self.length)

    def read_bytes(self, lob: BinaryLob) -> bytes:
        return lob.read(self.offset, self.length)

    def read_binary_text(self, lob: BinaryLob) -> str:
        return self.read_bytes(lob).decode("utf-8", errors="replace")


def _check_window(offset: int, length: int, size: int) -> None:
    if offset < 0 or offset > size:
        raise DataAccessError(f"Large object offset {offset} is outside 0..{size}.")
    if length < 0:
        raise DataAccessError(f"Large object read length must not be negative (got {length}).")


class TextLob:
    """Character large object backed by an already fetched string."""

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    def __len__(self) -> int:
        return len(self._value)

    def substring(self, offset: int, length: int) -> str:
        _check_window(offset, length, len(self._value))
        return self._value[offset : offset + length]


class BytesLob:
    """Binary large object backed by an already fetched bytes value."""

    __slots__ = ("_value",)

    def __init__(self, value: bytes) -> None:
        self._value = bytes(value)

    def __len__(self) -> int:
        return len(self._value)

    def read(self, offset: int, length: int) -> bytes:
        _check_window(offset, length, len(self._value))
        return self._value[offset : offset + length]
