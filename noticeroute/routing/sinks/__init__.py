"""Window and host protocols for noticeroute output routing.

The dispatcher never talks to a chat client directly.  It asks a
``HostPort`` for windows by name and prints through the ``Window``
protocol, so any display surface implementing these two protocols can
receive reformatted notices.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from noticeroute.routing.levels import DisplayLevel


@runtime_checkable
class Window(Protocol):
    """A named output surface that formatted lines are printed to."""

    @property
    def name(self) -> str:
        """Return the window's name."""
        ...

    def print_format(
        self, level: DisplayLevel, format_name: str, args: Sequence[str | None]
    ) -> None:
        """Render the registered format *format_name* with *args* and print it."""
        ...


@runtime_checkable
class HostPort(Protocol):
    """Operations the engine needs from the hosting display layer.

    ``default_window`` must always return a window; it is the fallback for
    every destination that cannot be found by name.
    """

    def find_window(self, name: str) -> Window | None:
        ...

    def active_window(self) -> Window:
        ...

    def default_window(self) -> Window:
        ...

    def create_window(self, name: str) -> Window:
        ...

    def window_names(self) -> list[str]:
        ...

    def register_formats(self, formats: Mapping[str, str]) -> None:
        """Replace the host's registered display templates."""
        ...
