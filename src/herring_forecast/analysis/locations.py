"""Per-location grouping, filtering, and historical summaries.

Three pipeline stages live here:

  - ``filter_measured_locations``: drop locations whose every biomass reading
    is zero (spawn known to occur but never quantified).
  - ``summarize_locations``: historical statistics per location.
  - ``filter_sufficient``: drop summaries with too few measured events to
    estimate a variance.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Mapping, Sequence

from herring_forecast.analysis.models import LocationSummary, SpawnEvent


def _sample_sd(values: Sequence[float]) -> float | None:
    """Sample standard deviation (n - 1); None for fewer than two values."""
    if len(values) < 2:
        return None
    return statistics.stdev(values)


def group_by_location(events: Iterable[SpawnEvent]) -> dict[str, tuple[SpawnEvent, ...]]:
    """Group events by location code, preserving first-seen order."""
    grouped: dict[str, list[SpawnEvent]] = {}
    for event in events:
        grouped.setdefault(event.location_code, []).append(event)
    return {code: tuple(group) for code, group in grouped.items()}


def filter_measured_locations(
    grouped: Mapping[str, Sequence[SpawnEvent]],
) -> dict[str, tuple[SpawnEvent, ...]]:
    """Keep only locations with at least one strictly positive biomass index."""
    return {
        code: tuple(events)
        for code, events in grouped.items()
        if any(event.is_measured for event in events)
    }


def summarize_location(events: Sequence[SpawnEvent], target_year: int) -> LocationSummary:
    """Compute the historical summary for one location's events.

    Name and coordinates come from the first event. Biomass statistics use
    measured events only and are None when there are none.

    Args:
        events: All retained events at a single location.
        target_year: Forecast year; recency is measured against the year before it.

    Raises:
        ValueError: If ``events`` is empty.
    """
    if not events:
        msg = "Cannot summarize a location without events"
        raise ValueError(msg)

    first = events[0]
    measured = [event.biomass_index for event in events if event.is_measured]
    doys = [event.start_doy for event in events]
    most_recent_year = max(event.year for event in events)

    if measured:
        avg_biomass: float | None = float(statistics.mean(measured))
        sd_biomass = _sample_sd(measured)
        sd_log_biomass = _sample_sd([math.log(value + 1) for value in measured])
        max_biomass: float | None = max(measured)
        median_biomass: float | None = float(statistics.median(measured))
    else:
        avg_biomass = sd_biomass = sd_log_biomass = max_biomass = median_biomass = None

    return LocationSummary(
        location_code=first.location_code,
        location_name=first.location_name,
        latitude=first.latitude,
        longitude=first.longitude,
        total_event_count=len(events),
        measured_event_count=len(measured),
        years_observed=len({event.year for event in events}),
        avg_biomass=avg_biomass,
        sd_biomass=sd_biomass,
        sd_log_biomass=sd_log_biomass,
        max_biomass=max_biomass,
        median_biomass=median_biomass,
        avg_start_doy=float(statistics.mean(doys)),
        sd_start_doy=_sample_sd(doys),
        earliest_doy=min(doys),
        latest_doy=max(doys),
        most_recent_year=most_recent_year,
        years_since_last_spawn=(target_year - 1) - most_recent_year,
    )


def summarize_locations(
    grouped: Mapping[str, Sequence[SpawnEvent]],
    target_year: int,
) -> dict[str, LocationSummary]:
    """Summarize every location in ``grouped``."""
    return {code: summarize_location(events, target_year) for code, events in grouped.items()}


def filter_sufficient(
    summaries: Mapping[str, LocationSummary],
    min_measured_events: int = 2,
) -> dict[str, LocationSummary]:
    """Drop summaries with fewer than ``min_measured_events`` measured events."""
    return {
        code: summary
        for code, summary in summaries.items()
        if summary.measured_event_count >= min_measured_events
    }
