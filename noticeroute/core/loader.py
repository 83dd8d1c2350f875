"""Rule data file loader: parses 4-line records into a ``RuleTable``.

File format
-----------
Blank lines and ``#`` comments are skipped between records.  Each record is
four consecutive lines::

    name [OPTION ...]
    <regular expression>
    <format using $0 (network tag), $1, $2, ...>
    [TAG: ]window [window ...] [MSG|HILIGHT|NONE]

A malformed record is reported with its line number and skipped; it never
aborts the rest of the file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from noticeroute.core.rule_table import RuleTable, RuleTableBuilder
from noticeroute.errors import DatafileNotFoundError, RuleDefinitionError
from noticeroute.models.rules import MessageLevel, Rule, RuleOption

logger = logging.getLogger(__name__)

RECORD_LINES = 4
SERVERTAG_PREFIX = "[$0] "

_HEADER_RE = re.compile(r"^([a-z0-9_]+)(?:\s+(.*))?$")

# Checked in this order; each keyword found overrides the previous one.
_LEVEL_KEYWORDS: tuple[MessageLevel, ...] = (
    MessageLevel.MSG,
    MessageLevel.HILIGHT,
    MessageLevel.NONE,
)
_LEVEL_RES = {level: re.compile(rf"\b{level.value}\b") for level in _LEVEL_KEYWORDS}


class LoadError(BaseModel):
    """A record that could not be loaded."""

    model_config = ConfigDict(frozen=True)

    line: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class LoadReport(BaseModel):
    """Result of one load pass over a rule source."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: str = "<string>"
    table: RuleTable = Field(default_factory=RuleTable.empty)
    errors: list[LoadError] = Field(default_factory=list)
    records_seen: int = 0

    @property
    def loaded(self) -> int:
        return len(self.table)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_destinations(text: str) -> tuple[MessageLevel, str]:
    """Split a destination line into its level and window text.

    Examples
    --------
    >>> parse_destinations("kill  MSG")
    (<MessageLevel.MSG: 'MSG'>, 'kill')
    >>> parse_destinations("EFNet: warning HILIGHT")[1]
    'EFNet: warning'
    """
    level = MessageLevel.CLIENTCRAP
    for keyword in _LEVEL_KEYWORDS:
        text, count = _LEVEL_RES[keyword].subn("", text)
        if count:
            level = keyword
    return level, " ".join(text.split())


class RuleLoader:
    """Parses rule records and validates their patterns.

    Parameters
    ----------
    prepend_servertag:
        Keep a leading ``"[$0] "`` in format templates instead of
        stripping it.
    """

    def __init__(self, prepend_servertag: bool = False) -> None:
        self.prepend_servertag = prepend_servertag

    def load_file(self, path: Path | str) -> LoadReport:
        path = Path(path)
        if not path.is_file():
            raise DatafileNotFoundError(f"Data file not found: {path}")
        logger.info("Loading %s", path)
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return self.parse_lines(handle, source=str(path))

    def parse_text(self, text: str, source: str = "<string>") -> LoadReport:
        return self.parse_lines(text.splitlines(), source=source)

    def parse_lines(self, lines: Iterable[str], source: str = "<string>") -> LoadReport:
        numbered = ((number, line.rstrip()) for number, line in enumerate(lines, start=1))
        builder = RuleTableBuilder()
        errors: list[LoadError] = []
        records_seen = 0

        for number, line in numbered:
            if not line or line.startswith("#"):
                continue
            records_seen += 1

            record = [(number, line)]
            while len(record) < RECORD_LINES:
                following = next(numbered, None)
                if following is None:
                    break
                record.append(following)
                if not following[1]:
                    break

            try:
                rule = self.parse_record(record)
            except RuleDefinitionError as exc:
                logger.warning("%s: %s", source, exc)
                errors.append(LoadError(line=exc.line, message=exc.message))
                continue
            builder.append(rule)

        logger.info("Processed %d server notice reformats.", len(builder))
        return LoadReport(
            source=source,
            table=builder.build(),
            errors=errors,
            records_seen=records_seen,
        )

    def parse_record(self, record: list[tuple[int, str]]) -> Rule:
        """Build a Rule from ``(line_number, text)`` pairs of one record."""
        header_line, header = record[0]
        match = _HEADER_RE.match(header)
        if match is None:
            raise RuleDefinitionError(header_line, f"invalid rule header {header!r}")
        name, options_text = match.group(1), match.group(2) or ""

        last_line, last_text = record[-1]
        if len(record) < RECORD_LINES:
            raise RuleDefinitionError(
                last_line, f"incomplete record for {name!r} (expected {RECORD_LINES} lines)"
            )
        if not last_text:
            raise RuleDefinitionError(last_line, f"blank line inside record for {name!r}")

        (pattern_line, pattern_text), (_, template), (_, destination_text) = record[1:]
        try:
            pattern = re.compile(pattern_text)
        except re.error as exc:
            raise RuleDefinitionError(pattern_line, f"invalid regexp: {exc}") from exc

        if not self.prepend_servertag and template.startswith(SERVERTAG_PREFIX):
            template = template[len(SERVERTAG_PREFIX):]

        level, destinations = parse_destinations(destination_text)
        return Rule(
            name=name,
            pattern=pattern,
            format_template=template,
            destinations=destinations,
            message_level=level,
            options=self._parse_options(options_text, header_line),
            line=header_line,
        )

    def _parse_options(self, text: str, line: int) -> frozenset[RuleOption]:
        options: set[RuleOption] = set()
        for word in text.split():
            try:
                options.add(RuleOption(word.upper()))
            except ValueError:
                logger.warning("line %d: ignoring unknown option %s", line, word)
        return frozenset(options)
