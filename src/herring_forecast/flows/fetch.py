"""
Prefect flow for fetching the spawn index.

The CSV is re-downloaded at most every 30 days unless forced. A local
export can be imported instead of downloading.

Run locally:
    SOURCE_URL=https://... python -m herring_forecast.flows.fetch
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from prefect import flow, task

from herring_forecast.config import get_settings
from herring_forecast.datasources.spawn_index import SOURCE_NAME, download_spawn_index
from herring_forecast.store import DataStore

store = DataStore(Path("data"))

SPAWN_INDEX_PATH = Path("raw/spawn_index.csv")
SPAWN_INDEX_TTL = timedelta(days=30)


@task(name="download-spawn-index", retries=2, retry_delay_seconds=5)
def fetch_spawn_index(url: str) -> str:
    """Download the spawn index CSV text."""
    return download_spawn_index(url)


@task(name="save-spawn-index")
def save_spawn_index(text: str, url: str) -> Path:
    """Save downloaded CSV text via store."""
    return store.write_text(
        SPAWN_INDEX_PATH,
        text,
        source=SOURCE_NAME,
        valid_until=datetime.now(UTC) + SPAWN_INDEX_TTL,
        url=url,
    )


@task(name="import-spawn-index")
def import_spawn_index(csv_path: Path) -> Path:
    """Copy a local spawn index export into the store."""
    return store.write_file(
        SPAWN_INDEX_PATH,
        csv_path,
        source=SOURCE_NAME,
        valid_until=datetime.now(UTC) + SPAWN_INDEX_TTL,
        imported_from=str(csv_path),
    )


@flow(name="fetch-spawn-index", log_prints=True)
def fetch_all(
    source_url: str | None = None,
    csv_path: Path | None = None,
    force: bool = False,
) -> dict[str, Any]:
    """
    Make the spawn index available in the store.

    A ``csv_path`` is always imported. Otherwise the download is skipped
    while the stored copy is fresh, unless ``force`` is set.

    Raises:
        ValueError: If a download is needed but no source URL is configured.
    """
    if csv_path is not None:
        print(f"Importing spawn index from {csv_path}...")
        path = import_spawn_index(csv_path)
        print(f"Saved spawn index to {path}")
        return {"source": "file", "path": str(path)}

    if not force and store.is_fresh(SPAWN_INDEX_PATH):
        print("Spawn index is fresh, skipping fetch.")
        return {"source": "cache", "path": str(store.base / SPAWN_INDEX_PATH)}

    url = source_url or get_settings().source_url
    if not url:
        msg = "No spawn index source configured; set SOURCE_URL or pass a CSV path"
        raise ValueError(msg)

    print(f"Downloading spawn index from {url}...")
    text = fetch_spawn_index(url)
    path = save_spawn_index(text, url)
    print(f"Saved {len(text.encode('utf-8')) / 1e6:.1f} MB spawn index to {path}")
    return {"source": "download", "path": str(path)}


if __name__ == "__main__":
    result = fetch_all()
    print(f"Flow complete: {result}")
