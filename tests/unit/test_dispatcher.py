"""Unit tests for NoticeDispatcher: eligibility, ordering, scoping, delivery."""

from __future__ import annotations

import re

import pytest

from noticeroute.core.rule_table import RuleTable
from noticeroute.models.notices import Delivery, DispatchOutcome, NoticeEvent, ServerContext
from noticeroute.models.rules import MessageLevel, RuleOption
from noticeroute.routing.dispatcher import (
    DispatchSettings,
    NoticeDispatcher,
    extract_notice_body,
)
from noticeroute.routing.levels import DisplayLevel
from noticeroute.routing.resolver import DestinationResolver
from noticeroute.routing.sinks.console import ConsoleHost


def _dispatcher(host: ConsoleHost, rules, **settings) -> tuple[NoticeDispatcher, RuleTable]:
    table = RuleTable(rules)
    host.register_formats(table.formats)
    return NoticeDispatcher(DestinationResolver(host), DispatchSettings(**settings)), table


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------


class TestEligibility:
    def test_extracts_body(self, make_notice):
        assert extract_notice_body(make_notice("Hello there")) == "Hello there"

    def test_hostmask_rejected(self, make_notice):
        assert extract_notice_body(make_notice("x", source="nick", hostmask="u@h")) is None

    @pytest.mark.parametrize("target", ["#chan", "&local", "@#chan", "+#chan"])
    def test_channel_targets_rejected(self, make_notice, target):
        assert extract_notice_body(make_notice("x", target=target)) is None

    def test_missing_prefix_rejected(self, make_notice):
        assert extract_notice_body(make_notice("Received KILL", prefix=False)) is None

    def test_not_a_notice(self, server: ServerContext):
        event = NoticeEvent(
            server=server,
            message="PRIVMSG oper :*** Notice -- x",
            source=server.real_address,
        )
        assert extract_notice_body(event) is None

    def test_ineligible_notice_is_not_consumed(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(pattern=".*")])
        result = dispatcher.dispatch(make_notice("anything", target="#chan"), table)
        assert result.outcome is DispatchOutcome.NOT_CONSUMED
        assert result.deliveries == []
        assert host.find_window("kill").lines == []


# ---------------------------------------------------------------------------
# Matching and delivery
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_kill_scenario(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule()])

        result = dispatcher.dispatch(make_notice("Received KILL message for baduser"), table)

        assert result.consumed
        assert result.deliveries == [
            Delivery(
                rule_name="kill",
                window_name="kill",
                format_name="r_kill",
                args=("EFNet", "baduser"),
                level=MessageLevel.MSG,
            )
        ]
        assert host.find_window("kill").lines == [(DisplayLevel.PUBLIC, "EFNet killed baduser")]

    def test_no_match_is_not_consumed(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule()])
        result = dispatcher.dispatch(make_notice("Client connecting: bob"), table)
        assert not result.consumed
        assert result.matched_rules == []

    def test_pattern_is_anchored_at_start(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(pattern=r"Received KILL")])
        assert not dispatcher.dispatch(make_notice("Oh, Received KILL"), table).consumed
        assert dispatcher.dispatch(make_notice("Received KILL for x"), table).consumed

    def test_first_match_wins(self, host, make_rule, make_notice):
        first = make_rule(name="first", destinations="kill")
        second = make_rule(name="second", destinations="client")
        dispatcher, table = _dispatcher(host, [first, second])

        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)

        assert result.matched_rules == ["first"]
        assert host.find_window("client").lines == []

    def test_continuematch_fires_both_in_order(self, host, make_rule, make_notice):
        first = make_rule(name="first", destinations="kill", options=(RuleOption.CONTINUEMATCH,))
        second = make_rule(name="second", destinations="client")
        third = make_rule(name="third", destinations="warning")
        dispatcher, table = _dispatcher(host, [first, second, third])

        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)

        assert result.matched_rules == ["first", "second"]
        assert [d.window_name for d in result.deliveries] == ["kill", "client"]
        assert host.find_window("warning").lines == []

    def test_multiple_destinations(self, host, make_rule, make_notice):
        host.focus("server")
        dispatcher, table = _dispatcher(host, [make_rule(destinations="kill warning active")])

        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)

        assert [d.window_name for d in result.deliveries] == ["kill", "warning", "server"]

    def test_unknown_window_lands_in_default(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(destinations="nowhere")])
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert [d.window_name for d in result.deliveries] == ["status"]

    def test_multinetwork_uses_tagged_window(self, host, make_rule, make_notice):
        host.create_window("efnet_kill")
        dispatcher, table = _dispatcher(host, [make_rule()], multinetwork=True)
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert [d.window_name for d in result.deliveries] == ["efnet_kill"]

    def test_level_mapping_applied(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(message_level=MessageLevel.HILIGHT)])
        dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        level, _ = host.find_window("kill").lines[0]
        assert level == DisplayLevel.PUBLIC | DisplayLevel.HILIGHT

    def test_unmatched_optional_group_renders_empty(self, host, make_rule, make_notice):
        rule = make_rule(pattern=r"^Received KILL message for (\S+)( urgently)?", format_template="$1|$2")
        dispatcher, table = _dispatcher(host, [rule])
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert result.deliveries[0].args == ("EFNet", "x", "")
        assert host.find_window("kill").texts == ["x|"]


# ---------------------------------------------------------------------------
# devnull and network scoping
# ---------------------------------------------------------------------------


class TestDiscardAndScope:
    def test_devnull_consumes_without_delivery(self, host, make_rule, make_notice):
        discard = make_rule(name="drop", destinations="devnull", options=(RuleOption.CONTINUEMATCH,))
        later = make_rule(name="later")
        dispatcher, table = _dispatcher(host, [discard, later])

        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)

        assert result.outcome is DispatchOutcome.CONSUMED
        assert result.deliveries == []
        assert host.find_window("kill").lines == []

    def test_devnull_skips_identity_check(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(destinations="devnull")])
        result = dispatcher.dispatch(make_notice("Received KILL message for x", source="hub.example.net"), table)
        assert result.consumed

    def test_scoped_devnull_for_other_network_is_skipped(self, host, make_rule, make_notice):
        discard = make_rule(name="drop", destinations="IRCnet: devnull")
        fallback = make_rule(name="fallback")
        dispatcher, table = _dispatcher(host, [discard, fallback])

        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)

        assert result.matched_rules == ["fallback"]

    def test_scope_mismatch_does_not_consume(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(destinations="IRCnet: kill")])
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert not result.consumed

    def test_scope_match_skips_qualifier_token(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(destinations="efnet: kill client")])
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert [d.window_name for d in result.deliveries] == ["kill", "client"]

    def test_trailing_colon_tokens_never_delivered(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule(destinations="kill stray:")])
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert [d.window_name for d in result.deliveries] == ["kill"]


# ---------------------------------------------------------------------------
# Source identity and SERVERNAME
# ---------------------------------------------------------------------------


class TestServerIdentity:
    def test_notice_from_other_server_skips_rule(self, host, make_rule, make_notice):
        dispatcher, table = _dispatcher(host, [make_rule()])
        result = dispatcher.dispatch(
            make_notice("Received KILL message for x", source="hub.example.net"), table
        )
        assert not result.consumed

    def test_other_server_falls_through_to_servername_rule(self, host, make_rule, make_notice):
        strict = make_rule(name="strict")
        remote = make_rule(name="remote", destinations="server", options=(RuleOption.SERVERNAME,))
        dispatcher, table = _dispatcher(host, [strict, remote])

        result = dispatcher.dispatch(
            make_notice("Received KILL message for x", source="hub.example.net"), table
        )

        assert result.matched_rules == ["remote"]
        assert result.deliveries[0].args == ("EFNet", "hub.example.net", "x")

    def test_servername_rewrite(self, host, make_rule, make_notice):
        rule = make_rule(options=(RuleOption.SERVERNAME,))
        dispatcher, table = _dispatcher(
            host, [rule], rewrite_servername=re.compile(r"^([^.]+)\.")
        )
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert result.deliveries[0].args == ("EFNet", "irc", "x")

    def test_servername_rewrite_without_match_keeps_identity(self, host, make_rule, make_notice):
        rule = make_rule(options=(RuleOption.SERVERNAME,))
        dispatcher, table = _dispatcher(
            host, [rule], rewrite_servername=re.compile(r"^(\d+)\.")
        )
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert result.deliveries[0].args == ("EFNet", "irc.example.net", "x")

    def test_servername_prepended_without_captures(self, host, make_rule, make_notice):
        rule = make_rule(pattern=r"^Received KILL", options=(RuleOption.SERVERNAME,))
        dispatcher, table = _dispatcher(host, [rule])
        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)
        assert result.deliveries[0].args == ("EFNet", "irc.example.net")


# ---------------------------------------------------------------------------
# Window failures
# ---------------------------------------------------------------------------


class TestWindowFailure:
    def test_failing_window_does_not_block_others(self, host, make_rule, make_notice, monkeypatch):
        def _explode(*args, **kwargs):
            raise RuntimeError("window closed")

        monkeypatch.setattr(host.find_window("kill"), "print_format", _explode)
        dispatcher, table = _dispatcher(host, [make_rule(destinations="kill client")])

        result = dispatcher.dispatch(make_notice("Received KILL message for x"), table)

        assert result.consumed
        assert [d.window_name for d in result.deliveries] == ["client"]
