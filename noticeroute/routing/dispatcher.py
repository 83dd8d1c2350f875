"""NoticeDispatcher: runs one server notice through the rule table.

The dispatcher filters out anything that is not a genuine server notice,
walks the rules in table order, and prints the reformatted notice to every
window the first applicable rule names (and to those of any further rules
when CONTINUEMATCH is set).  It reports whether the notice was consumed as
its return value; suppressing the host's default handling is left to the
caller.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from noticeroute.config import ReformatConfig
from noticeroute.models.notices import (
    Delivery,
    DispatchOutcome,
    DispatchResult,
    NoticeEvent,
)
from noticeroute.models.rules import Rule, RuleOption
from noticeroute.routing.levels import get_display_level
from noticeroute.routing.resolver import DestinationResolver

logger = logging.getLogger(__name__)

NOTICE_PREFIX = "*** Notice -- "

# Notices to channels, or to @/+ channel members, are not server notices.
_NOTICE_RE = re.compile(r"^NOTICE ([^#&@+\s]\S*) :(.*)$", re.DOTALL)


class DispatchSettings(BaseModel):
    """Runtime flags the dispatcher consults on every notice."""

    model_config = ConfigDict(frozen=True)

    multinetwork: bool = False
    rewrite_servername: re.Pattern | None = None

    @classmethod
    def from_config(cls, config: ReformatConfig) -> DispatchSettings:
        return cls(
            multinetwork=config.multinetwork,
            rewrite_servername=config.rewrite_pattern,
        )


def extract_notice_body(event: NoticeEvent) -> str | None:
    """Return the notice text after ``"*** Notice -- "``, or None.

    None means the event is not a server notice this engine handles: it
    has a hostmask, is not a NOTICE to a non-channel target, or lacks the
    server notice prefix.
    """
    if event.hostmask:
        return None
    match = _NOTICE_RE.match(event.message)
    if match is None:
        return None
    body = match.group(2)
    if not body.startswith(NOTICE_PREFIX):
        return None
    return body[len(NOTICE_PREFIX):]


class NoticeDispatcher:
    """Matches notices against rules and prints them to resolved windows.

    Usage
    -----
    >>> dispatcher = NoticeDispatcher(DestinationResolver(host))
    >>> result = dispatcher.dispatch(event, table)
    >>> result.consumed
    True
    """

    def __init__(
        self,
        resolver: DestinationResolver,
        settings: DispatchSettings | None = None,
    ) -> None:
        self._resolver = resolver
        self.settings = settings or DispatchSettings()

    def dispatch(self, event: NoticeEvent, rules: Iterable[Rule]) -> DispatchResult:
        """Run *event* through *rules* in order.

        Rules are skipped when their pattern does not match, when they are
        scoped to another network, or (without SERVERNAME) when the notice
        did not come from the server we are connected to.  A ``devnull``
        rule consumes the notice without printing anything.
        """
        body = extract_notice_body(event)
        if body is None:
            return DispatchResult()

        tag = event.server.tag
        outcome = DispatchOutcome.NOT_CONSUMED
        deliveries: list[Delivery] = []
        matched: list[str] = []

        for rule in rules:
            match = rule.pattern.match(body)
            if match is None:
                continue
            if not rule.applies_to_network(tag):
                continue

            if rule.discards:
                logger.debug("Notice discarded by rule %s", rule.name)
                matched.append(rule.name)
                outcome = DispatchOutcome.CONSUMED
                break

            args = list(match.groups())
            if rule.has_option(RuleOption.SERVERNAME):
                args.insert(0, self._rewrite_servername(event.source))
            elif event.source != event.server.real_address:
                continue

            matched.append(rule.name)
            deliveries.extend(self._deliver(rule, tag, args))
            outcome = DispatchOutcome.CONSUMED

            if not rule.has_option(RuleOption.CONTINUEMATCH):
                break

        return DispatchResult(outcome=outcome, deliveries=deliveries, matched_rules=matched)

    def _rewrite_servername(self, source: str) -> str:
        pattern = self.settings.rewrite_servername
        if pattern is None:
            return source
        match = pattern.search(source)
        if match is None or match.group(1) is None:
            return source
        return match.group(1)

    def _deliver(self, rule: Rule, tag: str, args: list[str | None]) -> list[Delivery]:
        deliveries: list[Delivery] = []
        level = get_display_level(rule.message_level)
        rendered = tuple("" if arg is None else arg for arg in (tag, *args))

        for token in rule.destination_tokens:
            # "TAG:" itself is a scope qualifier, not a window.
            if token.endswith(":"):
                continue
            if not rule.applies_to_network(tag):
                continue

            window = self._resolver.resolve(token, tag, self.settings.multinetwork)
            try:
                window.print_format(level, rule.format_name, rendered)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Window %s failed to print %s: %s", window.name, rule.format_name, exc
                )
                continue
            deliveries.append(
                Delivery(
                    rule_name=rule.name,
                    window_name=window.name,
                    format_name=rule.format_name,
                    args=rendered,
                    level=rule.message_level,
                )
            )
        return deliveries
