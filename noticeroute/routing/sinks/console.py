"""Console host: in-memory windows printed through a Rich console.

Every printed line is kept in the window's ``lines`` log as well, which
makes this host convenient for interactive use and for tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from rich.console import Console
from rich.text import Text

from noticeroute.routing.levels import DisplayLevel
from noticeroute.routing.sinks._formatting import FormatRegistry

logger = logging.getLogger(__name__)


def _level_style(level: DisplayLevel) -> str:
    if level & DisplayLevel.HILIGHT:
        return "bold magenta"
    if level & DisplayLevel.NO_ACT:
        return "dim"
    if level & DisplayLevel.PUBLIC:
        return ""
    return "cyan"


class ConsoleWindow:
    """A window owned by a ``ConsoleHost``."""

    def __init__(self, name: str, host: ConsoleHost) -> None:
        self._name = name
        self._host = host
        self.lines: list[tuple[DisplayLevel, str]] = []

    @property
    def name(self) -> str:
        return self._name

    def print_format(
        self, level: DisplayLevel, format_name: str, args: Sequence[str | None]
    ) -> None:
        text = self._host.formats.render(format_name, args)
        self.lines.append((level, text))
        self._host.console.print(
            Text.assemble((f"[{self._name}] ", "dim"), (text, _level_style(level)))
        )

    @property
    def texts(self) -> list[str]:
        """Rendered text of every line printed so far."""
        return [text for _, text in self.lines]


class ConsoleHost:
    """Display host with windows kept in memory.

    Parameters
    ----------
    console:
        Rich Console to print to.  A new one is created if not provided.
    default_window:
        Name of the fallback window, which always exists and starts out
        as the active window.
    windows:
        Names of additional windows to create up front.
    """

    def __init__(
        self,
        console: Console | None = None,
        default_window: str = "status",
        windows: Iterable[str] = (),
    ) -> None:
        self.console = console or Console()
        self.formats = FormatRegistry()
        self._windows: dict[str, ConsoleWindow] = {}
        self._default = self.create_window(default_window)
        self._active = self._default
        for name in windows:
            self.create_window(name)

    def find_window(self, name: str) -> ConsoleWindow | None:
        return self._windows.get(name)

    def active_window(self) -> ConsoleWindow:
        return self._active

    def default_window(self) -> ConsoleWindow:
        return self._default

    def create_window(self, name: str) -> ConsoleWindow:
        window = self._windows.get(name)
        if window is None:
            window = ConsoleWindow(name, self)
            self._windows[name] = window
            logger.debug("Created console window %s", name)
        return window

    def focus(self, name: str) -> ConsoleWindow:
        """Make *name* the active window, creating it if needed."""
        self._active = self.create_window(name)
        return self._active

    def window_names(self) -> list[str]:
        return list(self._windows)

    def register_formats(self, formats: Mapping[str, str]) -> None:
        self.formats.register(formats)
