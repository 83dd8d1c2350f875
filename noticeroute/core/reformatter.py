"""Reformatter: owns the current rule table and runs notices through it.

The Reformatter is the single entry point host integrations talk to:

- ``reload`` builds a new ``RuleTable`` from the data file and publishes it
  with one reference swap, so a notice is always matched against one whole
  table generation.
- ``dispatch`` runs an inbound server event through the current table.
- ``inject`` / ``replay`` feed synthetic or recorded notices.
- window inventory helpers back the ``list`` and ``create`` commands.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from noticeroute.config import ReformatConfig
from noticeroute.core.datafile import download_datafile
from noticeroute.core.loader import LoadError, LoadReport, RuleLoader
from noticeroute.core.rule_table import RuleTable
from noticeroute.errors import DatafileDownloadError, DatafileNotFoundError
from noticeroute.models.notices import DispatchResult, NoticeEvent, ServerContext
from noticeroute.routing.dispatcher import DispatchSettings, NoticeDispatcher
from noticeroute.routing.resolver import DestinationResolver
from noticeroute.routing.sinks import HostPort, Window

logger = logging.getLogger(__name__)


class Reformatter:
    """Server notice reformatting engine bound to one display host.

    Parameters
    ----------
    host:
        Display host providing windows and the format registry.
    config:
        Settings to use.  Defaults to a fresh ``ReformatConfig`` read from
        the environment.
    """

    def __init__(self, host: HostPort, config: ReformatConfig | None = None) -> None:
        self.config = config or ReformatConfig()
        self._host = host
        self._loader = RuleLoader(prepend_servertag=self.config.prepend_servertag)
        self._dispatcher = NoticeDispatcher(
            DestinationResolver(host),
            DispatchSettings.from_config(self.config),
        )
        self._table = RuleTable.empty()
        self.last_report: LoadReport | None = None

    @property
    def host(self) -> HostPort:
        return self._host

    @property
    def table(self) -> RuleTable:
        return self._table

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def publish(self, table: RuleTable) -> None:
        """Make *table* the current generation and register its formats."""
        self._host.register_formats(table.formats)
        self._table = table

    def load_text(self, text: str, source: str = "<string>") -> LoadReport:
        report = self._loader.parse_text(text, source=source)
        self.publish(report.table)
        self.last_report = report
        return report

    def reload(self, path: Path | str | None = None) -> LoadReport:
        """Discard the current rules and load the data file again.

        A missing file leaves an empty table in place; every notice then
        passes through unconsumed.
        """
        path = Path(path) if path is not None else self.config.datafile_path
        try:
            report = self._loader.load_file(path)
        except DatafileNotFoundError as exc:
            logger.warning("Could not load data file %s. No reformattings loaded.", path)
            report = LoadReport(
                source=str(path),
                errors=[LoadError(line=0, message=str(exc))],
            )
        self.publish(report.table)
        self.last_report = report
        return report

    def bootstrap(self) -> LoadReport:
        """Startup load: fetch the data file first if it is missing.

        Missing windows (or the multi-network naming hint) are logged as
        warnings once the rules are in place.
        """
        path = self.config.datafile_path
        if not path.is_file() and self.config.datafile_url:
            try:
                self.download()
            except DatafileDownloadError as exc:
                logger.error("%s", exc)
        report = self.reload(path)
        for warning in self.check_windows():
            logger.warning("%s", warning)
        return report

    def download(self) -> Path:
        return download_datafile(
            self.config.datafile_url,
            self.config.datafile_path,
            timeout=self.config.datafile_timeout_seconds,
        )

    def update(self) -> LoadReport:
        """Re-fetch the data file and reload it.

        Raises
        ------
        DatafileDownloadError
            If the download fails; the current rules stay in place.
        """
        self.download()
        return self.reload()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: NoticeEvent) -> DispatchResult:
        table = self._table
        return self._dispatcher.dispatch(event, table)

    def server_context(self) -> ServerContext:
        """The server context ``inject`` pretends notices arrive on."""
        return ServerContext(
            tag=self.config.network,
            real_address=self.config.server_address,
            nick=self.config.nick,
        )

    def inject(self, text: str, server: ServerContext | None = None) -> DispatchResult:
        """Fake a server notice carrying *text* and dispatch it.

        *text* is sent as ``NOTICE <nick> :<text>`` from the server's own
        address, so it must include the ``*** Notice -- `` prefix to match.
        """
        server = server or self.server_context()
        event = NoticeEvent(
            server=server,
            message=f"NOTICE {server.nick or '*'} :{text}",
            source=server.real_address,
        )
        return self.dispatch(event)

    def replay(
        self, lines: Iterable[str], server: ServerContext | None = None
    ) -> list[DispatchResult]:
        """Dispatch every raw IRC line in *lines*, skipping blank ones."""
        server = server or self.server_context()
        results: list[DispatchResult] = []
        for line in lines:
            if not line.strip():
                continue
            results.append(self.dispatch(NoticeEvent.from_irc_line(server, line)))
        return results

    # ------------------------------------------------------------------
    # Windows
    # ------------------------------------------------------------------

    def all_window_names(self) -> list[str]:
        return self._table.all_window_names()

    def missing_window_names(self) -> list[str]:
        return [name for name in self.all_window_names() if self._host.find_window(name) is None]

    def create_missing_windows(self) -> list[Window]:
        created: list[Window] = []
        for name in self.missing_window_names():
            try:
                created.append(self._host.create_window(name))
            except ValueError as exc:
                logger.warning("Cannot create window %s: %s", name, exc)
        if created:
            logger.info("Created windows: %s", ", ".join(window.name for window in created))
        return created

    def check_windows(self) -> list[str]:
        """Return human-readable warnings about the configured windows."""
        if self.config.multinetwork:
            return [
                "Using multi-network settings. Prepend your window names with the "
                "network tag followed by an underscore, for example efnet_conn."
            ]
        missing = self.missing_window_names()
        if not missing:
            return []
        plural = "s" if len(missing) > 1 else ""
        message = (
            f"You are missing the window{plural} named {' '.join(missing)}. "
            "Use `noticeroute create` to create them."
        )
        return [message]
