"""Parse raw spawn index rows into typed SpawnEvent records.

Coercion rules:
  - Start/end dates are ISO ``YYYY-MM-DD`` (a trailing time is ignored).
    An unusable start date drops the row; an unusable end date becomes None.
  - Latitude/longitude must be finite and in range, otherwise the row is dropped.
  - Biomass sub-components that are blank, ``NA``, non-numeric, or negative
    count as 0 and never drop the row.
  - ``Year`` falls back to the start date's year when blank or non-numeric.
  - Rows outside the configured analysis window are dropped.

Dropped rows are counted per reason, never raised.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from herring_forecast.analysis.models import SpawnEvent
from herring_forecast.datasources.spawn_index.models import (
    BIOMASS_COMPONENTS,
    END_DATE,
    LATITUDE,
    LOCATION_CODE,
    LOCATION_NAME,
    LONGITUDE,
    REQUIRED_COLUMNS,
    START_DATE,
    YEAR,
    SpawnRow,
)

if TYPE_CHECKING:
    from herring_forecast.schemas import ForecastConfig

# Exclusion reasons reported in NormalizationResult.excluded_by_reason
MISSING_LOCATION = "missing_location"
INVALID_START_DATE = "invalid_start_date"
MISSING_COORDINATES = "missing_coordinates"
OUTSIDE_WINDOW = "outside_window"

EXCLUSION_REASONS: tuple[str, ...] = (
    MISSING_LOCATION,
    INVALID_START_DATE,
    MISSING_COORDINATES,
    OUTSIDE_WINDOW,
)

_MISSING_TOKENS = frozenset({"", "na", "n/a", "nan", "null", "none"})


class InputDataError(ValueError):
    """The input collection is empty or lacks required columns."""


@dataclass(frozen=True)
class NormalizationResult:
    """Normalized events plus counts of what was dropped and why."""

    events: tuple[SpawnEvent, ...]
    rows_read: int
    excluded_by_reason: dict[str, int] = field(default_factory=dict)

    @property
    def rows_excluded(self) -> int:
        return sum(self.excluded_by_reason.values())


# =============================================================================
# Field coercion
# =============================================================================


def parse_date(value: Any) -> date | None:
    """Coerce a date-like value to a ``date``; None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.lower() in _MISSING_TOKENS:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_float(value: Any) -> float | None:
    """Coerce to a finite float; None for blanks, NA markers, and junk."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip()
        if text.lower() in _MISSING_TOKENS:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_year(value: Any) -> int | None:
    """Coerce to an integer year; None unless the value is a whole number."""
    number = parse_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def biomass_component(value: Any) -> float:
    """A survey sub-component reading, with missing or negative values as 0."""
    number = parse_float(value)
    if number is None or number < 0:
        return 0.0
    return number


def _coordinates(row: SpawnRow) -> tuple[float, float] | None:
    lat = parse_float(row.get(LATITUDE))
    lon = parse_float(row.get(LONGITUDE))
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lat, lon


# =============================================================================
# Normalizer
# =============================================================================


def check_columns(rows: list[SpawnRow]) -> None:
    """Raise InputDataError when there are no rows or required columns are missing."""
    if not rows:
        msg = "No spawn records supplied; the input collection is empty"
        raise InputDataError(msg)
    missing = [column for column in REQUIRED_COLUMNS if column not in rows[0]]
    if missing:
        msg = f"Spawn records are missing required columns: {', '.join(missing)}"
        raise InputDataError(msg)


def normalize_row(row: SpawnRow, config: ForecastConfig) -> SpawnEvent | str:
    """Normalize a single row.

    Returns:
        The SpawnEvent, or the exclusion reason when the row is dropped.
    """
    code = str(row.get(LOCATION_CODE) or "").strip()
    if code.lower() in _MISSING_TOKENS:
        return MISSING_LOCATION

    start = parse_date(row.get(START_DATE))
    if start is None:
        return INVALID_START_DATE

    coords = _coordinates(row)
    if coords is None:
        return MISSING_COORDINATES

    year = parse_year(row.get(YEAR))
    if year is None:
        year = start.year
    if not config.in_window(year):
        return OUTSIDE_WINDOW

    name = str(row.get(LOCATION_NAME) or "").strip() or code
    return SpawnEvent(
        location_code=code,
        location_name=name,
        latitude=coords[0],
        longitude=coords[1],
        start_date=start,
        end_date=parse_date(row.get(END_DATE)),
        year=year,
        biomass_index=sum(biomass_component(row.get(c)) for c in BIOMASS_COMPONENTS),
    )


def normalize_records(rows: Iterable[SpawnRow], config: ForecastConfig) -> NormalizationResult:
    """Normalize raw rows into SpawnEvents restricted to the analysis window.

    Args:
        rows: Raw records exposing the spawn index columns.
        config: Supplies the inclusive analysis window.

    Returns:
        NormalizationResult with events in input order and per-reason
        exclusion counts.

    Raises:
        InputDataError: If ``rows`` is empty or lacks required columns.
    """
    row_list = list(rows)
    check_columns(row_list)

    events: list[SpawnEvent] = []
    excluded = dict.fromkeys(EXCLUSION_REASONS, 0)
    for row in row_list:
        result = normalize_row(row, config)
        if isinstance(result, str):
            excluded[result] += 1
        else:
            events.append(result)

    return NormalizationResult(
        events=tuple(events),
        rows_read=len(row_list),
        excluded_by_reason=excluded,
    )
