"""Download the spawn index CSV export."""

from __future__ import annotations

from herring_forecast.services.http import session

SOURCE_NAME = "DFO Pacific Herring Spawn Index"


def download_spawn_index(url: str) -> str:
    """Fetch the spawn index CSV and return its text.

    Args:
        url: Location of the CSV export.

    Raises:
        requests.HTTPError: If the final response (after retries) is an error.
    """
    resp = session.get(url)
    resp.raise_for_status()
    # requests assumes latin-1 for text/* without a charset; the export is UTF-8.
    if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
        resp.encoding = "utf-8"
    return resp.text
