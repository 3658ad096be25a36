"""Rich-based logging helpers shared across the CLI and row sources."""

from __future__ import annotations

from dataclasses import dataclass, replace

from rich.console import Console
from rich.theme import Theme
from rich.traceback import install

install(show_locals=False)

_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "debug": "dim",
    }
)

# Log chatter goes to stderr so it never mixes with a rendered grid.
# Highlighting is disabled so Rich does not inject styles into numbers or
# punctuation inside log messages.
_stderr_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(frozen=True, slots=True)
class Logger:
    """Lightweight logger facade backed by Rich consoles.

    ``scope`` names the component a message comes from (``rows.keys``,
    ``query``); it is prefixed to every line when set.
    """

    verbose: bool = False
    scope: str = ""

    def child(self, name: str) -> Logger:
        """Return a logger for a sub-component, sharing the verbosity."""
        scope = f"{self.scope}.{name}" if self.scope else name
        return replace(self, scope=scope)

    def info(self, message: str) -> None:
        self._emit(message, "info")

    def success(self, message: str) -> None:
        self._emit(message, "success")

    def warning(self, message: str) -> None:
        self._emit(message, "warning")

    def error(self, message: str) -> None:
        self._emit(message, "error")

    def debug(self, message: str) -> None:
        if self.verbose:
            self._emit(message, "debug")

    def _emit(self, message: str, style: str) -> None:
        text = f"[{self.scope}] {message}" if self.scope else message
        _stderr_console.print(text, style=style, markup=False)


def get_logger(verbose: bool = False, scope: str = "") -> Logger:
    """Return a configured Logger instance."""
    return Logger(verbose=verbose, scope=scope)
