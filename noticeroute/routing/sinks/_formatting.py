"""Shared template helpers for the display hosts.

Rule templates use ``$0``, ``$1``, ... for arguments, the ``{line_start}``
abstract, and ``%X`` colour codes.  The hosts shipped here render plain
text, so colour codes are dropped and ``%%`` becomes a literal ``%``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from noticeroute.models.rules import LINE_START

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"%(.)|\$(\d+)|" + re.escape(LINE_START), re.DOTALL)


def render_template(template: str, args: Sequence[str | None]) -> str:
    """Substitute arguments into a template in a single pass.

    Argument values are inserted verbatim: colour codes inside a notice's
    text are not interpreted.  Missing or ``None`` arguments render as "".

    Examples
    --------
    >>> render_template("{line_start}%C$0%n killed $1", ["EFNet", "baduser"])
    'EFNet killed baduser'
    """

    def _replace(match: re.Match[str]) -> str:
        code, index = match.group(1), match.group(2)
        if code is not None:
            return "%" if code == "%" else ""
        if index is not None:
            position = int(index)
            if position < len(args) and args[position] is not None:
                return str(args[position])
        return ""

    return _TOKEN_RE.sub(_replace, template)


class FormatRegistry:
    """Named display templates, replaced wholesale on every registration."""

    def __init__(self) -> None:
        self._formats: Mapping[str, str] = MappingProxyType({})

    def register(self, formats: Mapping[str, str]) -> None:
        self._formats = MappingProxyType(dict(formats))

    @property
    def formats(self) -> Mapping[str, str]:
        return self._formats

    def render(self, format_name: str, args: Sequence[str | None]) -> str:
        template = self._formats.get(format_name)
        if template is None:
            logger.warning("Unknown format %s, printing raw arguments", format_name)
            return " ".join(str(arg) for arg in args if arg is not None)
        return render_template(template, args)
