"""Console output abstraction.

Services report progress through ``ConsoleProtocol`` and never print
directly. ``RichConsole`` is the terminal implementation, ``MockConsole``
records everything for tests.

Long-running steps wrap their work in ``console.status("...")``, which shows
a spinner on a terminal. The spinner lives entirely in the console; callers
hold no animation state.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()  # Green checkmark, positive message
    ERROR = auto()  # Red X, error message
    WARNING = auto()  # Yellow, warning message
    INFO = auto()  # Blue/cyan, informational
    DIM = auto()  # Dimmed/muted text
    BOLD = auto()  # Bold text
    HEADER = auto()  # Section header
    STATUS = auto()  # Spinner text for a running step


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None:
        """Print a success message (green checkmark)."""
        ...

    def error(self, message: str) -> None:
        """Print an error message (red X)."""
        ...

    def warning(self, message: str) -> None:
        """Print a warning message (yellow)."""
        ...

    def info(self, message: str) -> None:
        """Print an informational message."""
        ...

    def header(self, message: str) -> None:
        """Print a section header."""
        ...

    def newline(self) -> None:
        """Print an empty line."""
        ...

    def status(self, message: str) -> AbstractContextManager[None]:
        """Show ``message`` with a spinner until the block exits."""
        ...


class RichConsole:
    """Console implementation using Rich library.

    Messages go to stderr so that stdout stays clean for tool output
    streamed from child processes.
    """

    def __init__(self) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console
        from rich.text import Text

        self._text = Text
        self._console = Console(stderr=True)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "cyan",
            Style.DIM: "dim",
            Style.BOLD: "bold",
            Style.HEADER: "blue bold",
            Style.STATUS: "yellow",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, highlight=False, markup=False)
        else:
            self._console.print(message, highlight=False, markup=False)

    def _tagged(self, tag: str, tag_style: str, message: str) -> None:
        # Messages carry changelog text and tool stderr, never parse them as markup.
        self._console.print(self._text.assemble((tag, tag_style), " ", message), highlight=False)

    def success(self, message: str) -> None:
        self._tagged("OK", "green", message)

    def error(self, message: str) -> None:
        self._tagged("error:", "red bold", message)

    def warning(self, message: str) -> None:
        self._tagged("warning:", "yellow", message)

    def info(self, message: str) -> None:
        self._tagged("info:", "cyan", message)

    def header(self, message: str) -> None:
        self._console.print()
        self._console.print(message, style="blue bold", highlight=False, markup=False)

    def newline(self) -> None:
        self._console.print()

    def status(self, message: str) -> AbstractContextManager[None]:
        return self._spin(message)

    @contextmanager
    def _spin(self, message: str) -> Iterator[None]:
        # Non-interactive terminals (CI, pipes) get a plain line instead.
        if not self._console.is_terminal:
            self._console.print(f"- {message}", highlight=False, markup=False)
            yield
            return
        with self._console.status(self._text(message), spinner="dots", spinner_style="yellow"):
            yield


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def newline(self) -> None:
        self.outputs.append(OutputRecord("", Style.DEFAULT))

    def status(self, message: str) -> AbstractContextManager[None]:
        return self._record_status(message)

    @contextmanager
    def _record_status(self, message: str) -> Iterator[None]:
        self.outputs.append(OutputRecord(message, Style.STATUS))
        yield

    # Test helper methods

    def clear(self) -> None:
        """Clear all captured output."""
        self.outputs.clear()

    @property
    def messages(self) -> list[str]:
        """Get all output messages as a list of strings."""
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """Get all output as a single newline-separated string."""
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def has_success(self) -> bool:
        return any(o.style == Style.SUCCESS for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        """Count outputs with a specific style."""
        return sum(1 for o in self.outputs if o.style == style)
