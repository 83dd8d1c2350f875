"""Local file host: every window is a log file in one directory.

Layout: {base_path}/{window_name}.log

A window exists exactly when its file exists, so ``noticeroute create``
materializes windows by creating their files.  Each printed line is
appended with a timestamp and can optionally be echoed to a Rich console.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.text import Text

from noticeroute.routing.levels import DisplayLevel
from noticeroute.routing.sinks._formatting import FormatRegistry

logger = logging.getLogger(__name__)

_WINDOW_NAME_RE = re.compile(r"^[\w.#&+-]+$")
_SUFFIX = ".log"


def is_valid_window_name(name: str) -> bool:
    """Window names become file names; reject anything path-like."""
    return bool(_WINDOW_NAME_RE.match(name)) and name not in {".", ".."}


class FileWindow:
    """A window backed by an append-only log file."""

    def __init__(self, name: str, path: Path, host: FileHost) -> None:
        self._name = name
        self.path = path
        self._host = host

    @property
    def name(self) -> str:
        return self._name

    def print_format(
        self, level: DisplayLevel, format_name: str, args: Sequence[str | None]
    ) -> None:
        text = self._host.formats.render(format_name, args)
        stamp = datetime.now().strftime("%H:%M:%S")
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(f"{stamp} {text}\n")
        if self._host.console is not None:
            self._host.console.print(Text.assemble((f"[{self._name}] ", "dim"), text))

    def read_lines(self) -> list[str]:
        """Return the logged lines without their timestamps."""
        if not self.path.exists():
            return []
        return [
            line.split(" ", 1)[1] if " " in line else ""
            for line in self.path.read_text(encoding="utf-8").splitlines()
        ]


class FileHost:
    """Display host writing each window to ``{base_path}/{name}.log``.

    Parameters
    ----------
    base_path:
        Directory holding the window files.  Created if missing.
    default_window:
        Fallback window; its file is created on construction.
    active_window:
        Window returned for the ``active`` destination.  Defaults to the
        default window; created on construction when given.
    console:
        Optional Rich console every printed line is echoed to.
    """

    def __init__(
        self,
        base_path: Path | str,
        default_window: str = "status",
        active_window: str | None = None,
        console: Console | None = None,
    ) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)
        self.formats = FormatRegistry()
        self.console = console
        self._default = self.create_window(default_window)
        self._active = self.create_window(active_window) if active_window else self._default

    @property
    def base_path(self) -> Path:
        return self._base

    def _path_for(self, name: str) -> Path:
        return self._base / f"{name}{_SUFFIX}"

    def find_window(self, name: str) -> FileWindow | None:
        if not is_valid_window_name(name):
            return None
        path = self._path_for(name)
        if not path.is_file():
            return None
        return FileWindow(name, path, self)

    def active_window(self) -> FileWindow:
        return self._active

    def default_window(self) -> FileWindow:
        return self._default

    def create_window(self, name: str) -> FileWindow:
        if not is_valid_window_name(name):
            raise ValueError(f"Invalid window name: {name!r}")
        path = self._path_for(name)
        if not path.exists():
            path.touch()
            logger.info("Created window %s at %s", name, path)
        return FileWindow(name, path, self)

    def window_names(self) -> list[str]:
        return sorted(path.stem for path in self._base.glob(f"*{_SUFFIX}"))

    def register_formats(self, formats: Mapping[str, str]) -> None:
        self.formats.register(formats)
