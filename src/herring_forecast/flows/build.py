"""
Prefect flow for building forecasts and the static map site.

Reads the stored spawn index, runs the forecast pipeline, and writes
``derived/predictions.json`` plus ``derived/site/index.html``.

Run locally:
    python -m herring_forecast.flows.build
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from prefect import flow, task

from herring_forecast.analysis.pipeline import ForecastRun, run_forecast
from herring_forecast.analysis.serialization import (
    config_to_dict,
    predictions_to_dict,
    report_to_dict,
)
from herring_forecast.config import get_settings
from herring_forecast.datasources.spawn_index import SOURCE_NAME, read_spawn_csv
from herring_forecast.renderers import render_template
from herring_forecast.renderers.spawn_map import build_spawn_map_html
from herring_forecast.schemas import ForecastConfig
from herring_forecast.store import DataStore

store = DataStore(Path("data"))
SITE_DIR = store.derived / "site"

# Paths matching what fetch.py writes
SPAWN_INDEX_PATH = Path("raw/spawn_index.csv")
PREDICTIONS_PATH = Path("derived/predictions.json")

LOCAL_TZ = ZoneInfo("America/Vancouver")


# =============================================================================
# Tasks
# =============================================================================


@task(name="load-spawn-rows")
def load_spawn_rows() -> list[dict[str, str]] | None:
    """Load raw spawn index rows from the store, or None if not fetched yet."""
    path = store.file_path(SPAWN_INDEX_PATH)
    if path is None:
        return None
    return read_spawn_csv(path)


@task(name="run-forecast")
def forecast(rows: list[dict[str, str]], config: ForecastConfig) -> ForecastRun:
    """Run the forecast pipeline over raw rows."""
    return run_forecast(rows, config)


@task(name="save-predictions")
def save_predictions(run: ForecastRun) -> Path:
    """Save predictions with the run's config and audit counts as metadata."""
    return store.write(
        PREDICTIONS_PATH,
        predictions_to_dict(run.predictions),
        source=SOURCE_NAME,
        target_year=run.config.target_year,
        config=config_to_dict(run.config),
        report=report_to_dict(run.report),
    )


@task(name="build-html")
def build_html(run: ForecastRun, updated: str) -> str:
    """Render the full map page for a forecast run."""
    config = run.config
    spawn_map_html, map_script_html = build_spawn_map_html(run.predictions, config)
    return render_template(
        "base.html.j2",
        title=f"Pacific Herring Spawn Predictions {config.target_year}",
        target_year=config.target_year,
        window_years=config.window_years,
        window_label=config.window_label,
        source_name=SOURCE_NAME,
        updated=updated,
        spawn_map=spawn_map_html,
        map_script=map_script_html,
    )


@task(name="write-site")
def write_site(html: str) -> Path:
    """Write HTML to site directory."""
    SITE_DIR.mkdir(parents=True, exist_ok=True)
    output_path = SITE_DIR / "index.html"
    output_path.write_text(html, encoding="utf-8")
    return output_path


def _updated_label() -> str:
    """When the source data was fetched, in local time; now if unknown."""
    fetched_at = store.metadata(SPAWN_INDEX_PATH).get("fetched_at")
    fetched = datetime.fromisoformat(fetched_at) if fetched_at else datetime.now(UTC)
    return fetched.astimezone(LOCAL_TZ).strftime("%Y-%m-%d %H:%M")


# =============================================================================
# Flow
# =============================================================================


@flow(name="build-site", log_prints=True)
def build_all(config: ForecastConfig | None = None) -> dict[str, Any]:
    """
    Forecast from the stored spawn index and build the static site.

    Args:
        config: Forecast constants; defaults to ``Settings.forecast_config()``.
    """
    if config is None:
        config = get_settings().forecast_config()

    print("Loading spawn index...")
    rows = load_spawn_rows()
    if rows is None:
        print("No spawn index found. Run fetch flow first.")
        return {"error": "no data"}

    print(f"Forecasting {config.target_year} from {config.window_label} records...")
    run = forecast(rows, config)
    for line in run.report.summary_lines():
        print(line)
    if not run.predictions:
        print("Warning: no location has enough measured spawns; the map will be empty.")

    predictions_path = save_predictions(run)
    print(f"Saved {len(run.predictions)} predictions to {predictions_path}")

    print("Building HTML...")
    html = build_html(run, _updated_label())
    output_path = write_site(html)

    print(f"Site built: {output_path}")
    return {
        "pages": 1,
        "output": str(output_path),
        "predictions": str(predictions_path),
        "locations_forecast": run.report.locations_forecast,
    }


if __name__ == "__main__":
    result = build_all()
    print(f"Flow complete: {result}")
