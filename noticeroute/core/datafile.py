"""Rule data file bootstrap: fetches the data file over HTTPS.

This is the only blocking operation in noticeroute.  It is reachable from
the ``update`` command and from startup when the data file is missing,
never from notice dispatch.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from noticeroute import __version__
from noticeroute.errors import DatafileDownloadError

logger = logging.getLogger(__name__)

USER_AGENT = f"noticeroute/{__version__}"
DEFAULT_TIMEOUT_SECONDS = 30.0


def download_datafile(
    url: str,
    destination: Path | str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.BaseTransport | None = None,
) -> Path:
    """Download the rule data file from *url* into *destination*.

    The file is written to a temporary sibling first and moved into place,
    so a failed download never leaves a truncated data file behind.

    Raises
    ------
    DatafileDownloadError
        If no URL is given, the URL is not HTTPS, or the request fails.
    """
    if not url:
        raise DatafileDownloadError(
            "No data file URL configured. Install a data file or set NOTICEROUTE_DATAFILE_URL."
        )
    if httpx.URL(url).scheme != "https":
        raise DatafileDownloadError(f"Refusing to download data file over insecure URL: {url}")

    destination = Path(destination)
    logger.info("Downloading data file from %s", url)

    try:
        with httpx.Client(
            timeout=httpx.Timeout(float(timeout)),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DatafileDownloadError(
            f"Unable to download the data file from {url}: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.RequestError as exc:
        raise DatafileDownloadError(f"Unable to download the data file from {url}: {exc}") from exc

    if response.url.scheme != "https":
        raise DatafileDownloadError(f"Data file download was redirected to insecure URL: {response.url}")

    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".part")
    try:
        partial.write_bytes(response.content)
        partial.replace(destination)
    except OSError as exc:
        partial.unlink(missing_ok=True)
        raise DatafileDownloadError(f"Unable to store the data file in {destination}: {exc}") from exc

    logger.info("Data file successfully fetched and stored in %s", destination)
    return destination
