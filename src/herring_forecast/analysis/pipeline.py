"""End-to-end forecast: raw rows in, predictions and an audit report out.

    normalize -> group -> filter measured -> summarize -> filter sufficient -> forecast

Pure function of (rows, config); no I/O and no wall-clock access.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from herring_forecast.analysis.forecast import forecast_locations
from herring_forecast.analysis.locations import (
    filter_measured_locations,
    filter_sufficient,
    group_by_location,
    summarize_locations,
)
from herring_forecast.analysis.models import LocationSummary, PipelineReport, Prediction
from herring_forecast.analysis.normalize import normalize_records

if TYPE_CHECKING:
    from herring_forecast.datasources.spawn_index.models import SpawnRow
    from herring_forecast.schemas import ForecastConfig


@dataclass(frozen=True)
class ForecastRun:
    """Output of one pipeline run."""

    config: ForecastConfig
    summaries: tuple[LocationSummary, ...]
    predictions: tuple[Prediction, ...]
    report: PipelineReport


def run_forecast(rows: Iterable[SpawnRow], config: ForecastConfig) -> ForecastRun:
    """Run every pipeline stage over ``rows``.

    Summaries and predictions are ordered by location code so repeated runs
    over the same input produce identical output.

    Raises:
        InputDataError: If ``rows`` is empty or lacks required columns.
    """
    normalized = normalize_records(rows, config)
    grouped = group_by_location(normalized.events)
    measured = filter_measured_locations(grouped)
    summaries = summarize_locations(measured, config.target_year)
    sufficient = filter_sufficient(summaries, config.min_measured_events)
    predictions = forecast_locations(sufficient, config)

    report = PipelineReport(
        rows_read=normalized.rows_read,
        events_retained=len(normalized.events),
        excluded_by_reason=dict(normalized.excluded_by_reason),
        locations_considered=len(grouped),
        locations_retained=len(measured),
        locations_sufficient=len(sufficient),
        locations_forecast=len(predictions),
    )
    return ForecastRun(
        config=config,
        summaries=tuple(sufficient[code] for code in sorted(sufficient)),
        predictions=tuple(predictions[code] for code in sorted(predictions)),
        report=report,
    )
