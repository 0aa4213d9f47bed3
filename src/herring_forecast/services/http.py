"""
Shared HTTP client with automatic retry and backoff.

The spawn index is a single large CSV on a government open-data portal,
which occasionally answers with 502/503 under load. ``session`` retries
those (and connection resets) with exponential backoff and applies a default
timeout to every request.

Usage::

    from herring_forecast.services.http import session

    resp = session.get(url)
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from herring_forecast import __version__

DEFAULT_RETRY = Retry(
    total=4,
    backoff_factor=2,
    status_forcelist=[429, 500, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,  # resp.raise_for_status() reports the final status
)

# The CSV export is tens of MB; allow for slow transfers.
DEFAULT_TIMEOUT = 120

USER_AGENT = f"herring-forecast/{__version__}"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Timeout applied when a request does not pass its own.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    original_send = s.send

    def send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = send_with_timeout  # type: ignore[method-assign]
    return s


session: requests.Session = create_session()
