"""Notice event and dispatch result models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from noticeroute.models.rules import MessageLevel


class ServerContext(BaseModel):
    """The connection a notice arrived on."""

    model_config = ConfigDict(frozen=True)

    tag: str                 # network tag, e.g. "EFNet"
    real_address: str        # address of the server we are connected to
    nick: str = ""


class NoticeEvent(BaseModel):
    """One inbound server event, as delivered by the host.

    ``message`` is the protocol line without its prefix, e.g.
    ``"NOTICE oper :*** Notice -- ..."``.  ``source`` is the nick or server
    name from the prefix; ``hostmask`` is empty for server-origin events.
    """

    model_config = ConfigDict(frozen=True)

    server: ServerContext
    message: str
    source: str
    hostmask: str = ""

    @classmethod
    def from_irc_line(cls, server: ServerContext, line: str) -> NoticeEvent:
        """Build an event from a raw IRC protocol line.

        ``":irc.example.net NOTICE oper :text"`` gives source
        ``irc.example.net`` with an empty hostmask, while
        ``":nick!user@host NOTICE ..."`` gives source ``nick`` and hostmask
        ``user@host``.  A line without a prefix comes from the server itself.
        """
        line = line.rstrip("\r\n")
        if not line.startswith(":"):
            return cls(server=server, message=line, source=server.real_address)

        prefix, _, message = line[1:].partition(" ")
        source, _, hostmask = prefix.partition("!")
        return cls(server=server, message=message.lstrip(" "), source=source, hostmask=hostmask)


class DispatchOutcome(str, Enum):
    """Whether the host should suppress its default handling of a notice."""

    CONSUMED = "consumed"
    NOT_CONSUMED = "not_consumed"


class Delivery(BaseModel):
    """A formatted line printed to one window."""

    model_config = ConfigDict(frozen=True)

    rule_name: str
    window_name: str
    format_name: str
    args: tuple[str, ...]
    level: MessageLevel


class DispatchResult(BaseModel):
    """Outcome of running one notice through the rule table."""

    model_config = ConfigDict(frozen=True)

    outcome: DispatchOutcome = DispatchOutcome.NOT_CONSUMED
    deliveries: list[Delivery] = Field(default_factory=list)
    matched_rules: list[str] = Field(default_factory=list)

    @property
    def consumed(self) -> bool:
        return self.outcome is DispatchOutcome.CONSUMED
