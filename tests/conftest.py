"""Shared test fixtures for noticeroute."""

from __future__ import annotations

import io
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from noticeroute.config import ReformatConfig
from noticeroute.core.reformatter import Reformatter
from noticeroute.models.notices import NoticeEvent, ServerContext
from noticeroute.models.rules import MessageLevel, Rule, RuleOption
from noticeroute.routing.sinks.console import ConsoleHost

SAMPLE_DATA = """\
# Sample reformattings for a hybrid-style server.

kill
^Received KILL message for (\\S+)\\. From (\\S+) Path: \\S+ \\((.*)\\)$
[$0] $1 killed by $2 ($3)
kill MSG

client_connect
^Client connecting: (\\S+) \\((\\S+)\\) \\[(\\S+)\\]
$1 ($2) [$3] connected
client

client_exit
^Client exiting: (\\S+) \\((\\S+)\\)
$1 ($2) exited
client NONE

flood
^Possible Flooder (\\S+)
$1 is flooding
warning active HILIGHT

motd
^(\\S+) is requesting the MOTD
$1 read the MOTD
devnull

linked SERVERNAME
^Link with (\\S+) established
$1: link with $2 established
server MSG

oper_efnet
^(\\S+) is now an operator
$1 opered up
EFNet: warning MSG
"""


@pytest.fixture
def sample_data() -> str:
    """The rule data file used across tests (7 valid records)."""
    return SAMPLE_DATA


@pytest.fixture
def datafile(tmp_path: Path, sample_data: str) -> Path:
    """Write the sample data file to a temp directory."""
    path = tmp_path / "reformat.data"
    path.write_text(sample_data, encoding="utf-8")
    return path


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer capturing everything the console host prints."""
    return io.StringIO()


@pytest.fixture
def host(console_output: io.StringIO) -> ConsoleHost:
    """A ConsoleHost with the windows the sample data sends to."""
    return ConsoleHost(
        console=Console(file=console_output, width=200),
        windows=["kill", "client", "warning", "server"],
    )


@pytest.fixture
def server() -> ServerContext:
    """Provide a deterministic server context."""
    return ServerContext(tag="EFNet", real_address="irc.example.net", nick="oper")


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., ReformatConfig]:
    """Factory fixture: build a ReformatConfig rooted in the temp directory."""

    def _factory(**overrides: Any) -> ReformatConfig:
        defaults: dict[str, Any] = {
            "datafile_path": tmp_path / "reformat.data",
            "output_dir": tmp_path / "windows",
            "network": "EFNet",
            "server_address": "irc.example.net",
            "nick": "oper",
        }
        defaults.update(overrides)
        return ReformatConfig(**defaults)

    return _factory


@pytest.fixture
def reformatter(
    host: ConsoleHost,
    datafile: Path,
    make_config: Callable[..., ReformatConfig],
) -> Reformatter:
    """A Reformatter with the sample data loaded into a ConsoleHost."""
    engine = Reformatter(host, make_config(datafile_path=datafile))
    engine.reload()
    return engine


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_rule() -> Callable[..., Rule]:
    """Factory fixture: build a Rule with sensible defaults."""

    def _factory(
        name: str = "kill",
        pattern: str = r"^Received KILL message for (\S+)",
        format_template: str = "$0 killed $1",
        destinations: str = "kill",
        message_level: MessageLevel = MessageLevel.MSG,
        options: tuple[RuleOption, ...] = (),
        **overrides: Any,
    ) -> Rule:
        return Rule(
            name=name,
            pattern=re.compile(pattern),
            format_template=format_template,
            destinations=destinations,
            message_level=message_level,
            options=frozenset(options),
            **overrides,
        )

    return _factory


@pytest.fixture
def make_notice(server: ServerContext) -> Callable[..., NoticeEvent]:
    """Factory fixture: build a server NoticeEvent for a notice body."""

    def _factory(
        body: str,
        *,
        prefix: bool = True,
        target: str = "oper",
        source: str | None = None,
        hostmask: str = "",
        on: ServerContext | None = None,
    ) -> NoticeEvent:
        context = on or server
        text = f"*** Notice -- {body}" if prefix else body
        return NoticeEvent(
            server=context,
            message=f"NOTICE {target} :{text}",
            source=context.real_address if source is None else source,
            hostmask=hostmask,
        )

    return _factory
