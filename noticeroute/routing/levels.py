"""Display levels: how visibly a reformatted line is shown in a window."""

from __future__ import annotations

from enum import IntFlag

from noticeroute.models.rules import MessageLevel


class DisplayLevel(IntFlag):
    """Window display levels, combinable like a chat client's message levels."""

    CLIENTCRAP = 1
    PUBLIC = 2
    HILIGHT = 4
    NO_ACT = 8


_LEVEL_MAP: dict[str, DisplayLevel] = {
    MessageLevel.HILIGHT.value: DisplayLevel.PUBLIC | DisplayLevel.HILIGHT,
    MessageLevel.MSG.value: DisplayLevel.PUBLIC,
    MessageLevel.NONE.value: DisplayLevel.PUBLIC | DisplayLevel.NO_ACT,
}


def get_display_level(name: MessageLevel | str | None) -> DisplayLevel:
    """Map a rule's level keyword to a display level.

    Unknown or missing keywords map to ``CLIENTCRAP``, the lowest
    visibility level.

    Examples
    --------
    >>> get_display_level("MSG") is DisplayLevel.PUBLIC
    True
    >>> get_display_level("bogus") is DisplayLevel.CLIENTCRAP
    True
    """
    if isinstance(name, MessageLevel):
        name = name.value
    return _LEVEL_MAP.get(name or "", DisplayLevel.CLIENTCRAP)
