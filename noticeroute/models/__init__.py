"""noticeroute data models: all Pydantic v2, all frozen (immutable)."""

from noticeroute.models.notices import (
    Delivery,
    DispatchOutcome,
    DispatchResult,
    NoticeEvent,
    ServerContext,
)
from noticeroute.models.rules import (
    ACTIVE_WINDOW,
    DEVNULL,
    FORMAT_PREFIX,
    LINE_START,
    MessageLevel,
    Rule,
    RuleOption,
)

__all__ = [
    # rules
    "ACTIVE_WINDOW",
    "DEVNULL",
    "FORMAT_PREFIX",
    "LINE_START",
    "MessageLevel",
    "Rule",
    "RuleOption",
    # notices
    "ServerContext",
    "NoticeEvent",
    "DispatchOutcome",
    "Delivery",
    "DispatchResult",
]
