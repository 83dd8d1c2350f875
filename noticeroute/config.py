"""Runtime configuration read from the environment and a .env file.

Centralized settings via pydantic-settings, overridable with NOTICEROUTE_*
variables.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReformatConfig(BaseSettings):
    """Configuration for the notice reformatter.

    All settings can be overridden via NOTICEROUTE_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export NOTICEROUTE_MULTINETWORK=true
        export NOTICEROUTE_REWRITE_SERVERNAME='^([^.]+)\\.'
        export NOTICEROUTE_DATAFILE_URL=https://example.net/reformat.data

    Or via .env file::

        NOTICEROUTE_PREPEND_SERVERTAG=true
        NOTICEROUTE_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NOTICEROUTE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Rule data file
    datafile_path: Path = Path(".noticeroute/reformat.data")
    datafile_url: str = ""
    datafile_timeout_seconds: float = 30.0

    # Rule evaluation
    multinetwork: bool = False          # resolve "<tag>_<window>" before "<window>"
    prepend_servertag: bool = False     # keep a leading "[$0] " in templates
    rewrite_servername: str = ""        # regex with one group, used by SERVERNAME rules

    # Output windows
    output_dir: Path = Path(".noticeroute/windows")
    default_window: str = "status"
    active_window: str = "status"

    # Server context used by `inject`
    network: str = "local"
    server_address: str = "irc.localhost"
    nick: str = "oper"

    @field_validator("rewrite_servername")
    @classmethod
    def _check_rewrite_servername(cls, value: str) -> str:
        if not value:
            return value
        try:
            compiled = re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid rewrite_servername regexp: {exc}") from exc
        if compiled.groups < 1:
            raise ValueError("rewrite_servername must contain a capture group")
        return value

    @field_validator("datafile_timeout_seconds")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("datafile_timeout_seconds must be positive")
        return value

    @property
    def rewrite_pattern(self) -> re.Pattern[str] | None:
        """Compiled server-name rewrite pattern, or None when unset."""
        return re.compile(self.rewrite_servername) if self.rewrite_servername else None

