"""Rule models: one compiled pattern-to-window mapping per record."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ACTIVE_WINDOW = "active"
DEVNULL = "devnull"
FORMAT_PREFIX = "r_"
LINE_START = "{line_start}"

RULE_NAME_PATTERN = r"^[a-z0-9_]+$"

_SCOPE_RE = re.compile(r"^(\S+): ")


class MessageLevel(str, Enum):
    """Level keyword given on the destination line of a rule."""

    HILIGHT = "HILIGHT"
    MSG = "MSG"
    NONE = "NONE"
    CLIENTCRAP = "CLIENTCRAP"


class RuleOption(str, Enum):
    """Flags accepted after the rule name on the header line."""

    SERVERNAME = "SERVERNAME"          # prepend the source server as $1
    CONTINUEMATCH = "CONTINUEMATCH"    # keep evaluating rules after a match


class Rule(BaseModel):
    """A single reformatting rule, immutable once loaded.

    The destination text is kept as written (minus the level keyword) because
    its leading ``"TAG: "`` qualifier scopes the whole rule to one network.

    Examples
    --------
    >>> rule = Rule(
    ...     name="kill",
    ...     pattern=re.compile(r"^Received KILL message for (\\S+)"),
    ...     format_template="$0 killed $1",
    ...     destinations="kill",
    ...     message_level=MessageLevel.MSG,
    ... )
    >>> rule.format_name
    'r_kill'
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(pattern=RULE_NAME_PATTERN)
    pattern: re.Pattern
    format_template: str
    destinations: str
    message_level: MessageLevel = MessageLevel.CLIENTCRAP
    options: frozenset[RuleOption] = frozenset()
    line: int = 0  # 1-based header line in the data file, 0 when built in code

    @property
    def format_name(self) -> str:
        """Key of this rule's display template in the format registry."""
        return FORMAT_PREFIX + self.name

    @property
    def destination_tokens(self) -> list[str]:
        return self.destinations.split()

    @property
    def network_scope(self) -> str | None:
        """The ``TAG`` of a leading ``"TAG: "`` qualifier, if any."""
        match = _SCOPE_RE.match(self.destinations)
        return match.group(1) if match else None

    @property
    def discards(self) -> bool:
        """Whether matching notices are swallowed without delivery."""
        return DEVNULL in self.destination_tokens

    def has_option(self, option: RuleOption) -> bool:
        return option in self.options

    def applies_to_network(self, tag: str) -> bool:
        """Return True unless the rule is scoped to a different network."""
        scope = self.network_scope
        return scope is None or scope.lower() == tag.lower()
