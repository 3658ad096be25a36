"""Numeric display formatting."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Number

from sqlgrid.shared.config import DEFAULT_NUMBER_FORMAT, check_number_format
from sqlgrid.shared.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class NumericFormatter:
    """Apply one Python format spec (``","``, ``",.2f"``, ``"n"``) to numbers.

    ``"n"`` groups digits by the process's ``LC_NUMERIC`` locale, which the
    CLI takes from the environment on startup.
    """

    pattern: str

    @classmethod
    def from_pattern(cls, pattern: str | None) -> NumericFormatter | None:
        """Return a formatter, or None for the ``"default"`` sentinel.

        Patterns that only suit one numeric family (``"d"``, ``"x"``, ``"c"``)
        are rejected here rather than on the first float or decimal cell.
        """
        if not pattern or pattern == DEFAULT_NUMBER_FORMAT:
            return None
        check_number_format(pattern)
        return cls(pattern)

    def format(self, value: object) -> str:
        # Dynamically typed drivers can report text in a numeric column.
        if isinstance(value, bool) or not isinstance(value, Number):
            return str(value)
        try:
            return format(value, self.pattern)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Number format '{self.pattern}' cannot format {type(value).__name__} values: {exc}"
            ) from exc
