"""Destination resolution: maps a rule's destination token to a window."""

from __future__ import annotations

import logging

from noticeroute.models.rules import ACTIVE_WINDOW, DEVNULL
from noticeroute.routing.sinks import HostPort, Window

logger = logging.getLogger(__name__)


class DestinationResolver:
    """Finds the window a destination token refers to.

    Resolution order:

    1. ``active`` is the host's currently focused window.
    2. In multi-network mode, ``<lowercased tag>_<token>`` is tried first.
    3. The window named ``<token>``.
    4. The host's default window, which always exists.

    Resolution never fails; an unknown name silently lands in the default
    window.
    """

    def __init__(self, host: HostPort) -> None:
        self._host = host

    @property
    def host(self) -> HostPort:
        return self._host

    def resolve(self, token: str, network_tag: str, multinetwork: bool) -> Window:
        if token == DEVNULL:
            raise ValueError("devnull is a discard marker, not a window")
        if token == ACTIVE_WINDOW:
            return self._host.active_window()

        window: Window | None = None
        if multinetwork:
            window = self._host.find_window(f"{network_tag.lower()}_{token}")
        if window is None:
            window = self._host.find_window(token)
        if window is None:
            window = self._host.default_window()
            logger.debug("No window named %s, using %s", token, window.name)
        return window
