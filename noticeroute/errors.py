"""Exception hierarchy for noticeroute.

Dispatch itself never raises for bad input; these errors surface from
loading the rule data file, fetching it, and validating configuration.
"""

from __future__ import annotations


class NoticeRouteError(RuntimeError):
    """Base class for all noticeroute errors."""


class RuleDefinitionError(ValueError):
    """Raised when a single record of the rule data file is malformed.

    Carries the 1-based line number the problem was found on so the loader
    can report it and move on to the next record.
    """

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line
        self.message = message


class DatafileNotFoundError(NoticeRouteError):
    """Raised when the rule data file does not exist."""


class DatafileDownloadError(NoticeRouteError):
    """Raised when the rule data file cannot be fetched."""
