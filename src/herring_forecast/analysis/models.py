"""Typed records passed between pipeline stages.

Each stage produces a new tuple of these frozen dataclasses; nothing is
mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class SpawnEvent:
    """One normalized spawn survey record."""

    location_code: str
    location_name: str
    latitude: float
    longitude: float
    start_date: date
    end_date: date | None
    year: int
    biomass_index: float

    @property
    def start_doy(self) -> int:
        """1-based day-of-year of the start date (1-366)."""
        return self.start_date.timetuple().tm_yday

    @property
    def is_measured(self) -> bool:
        """True when the event carries a quantified (non-zero) biomass index."""
        return self.biomass_index > 0


@dataclass(frozen=True)
class LocationSummary:
    """Historical statistics for one location.

    Biomass fields are computed over measured events only; timing fields
    over every retained event at the location. Standard deviations use the
    sample (n - 1) estimator and are ``None`` for fewer than two values.
    """

    location_code: str
    location_name: str
    latitude: float
    longitude: float

    total_event_count: int
    measured_event_count: int
    years_observed: int

    avg_biomass: float | None
    sd_biomass: float | None
    sd_log_biomass: float | None
    max_biomass: float | None
    median_biomass: float | None

    avg_start_doy: float
    sd_start_doy: float | None
    earliest_doy: int
    latest_doy: int

    most_recent_year: int
    years_since_last_spawn: int


@dataclass(frozen=True)
class Interval:
    """Closed numeric interval ``[lower, upper]``."""

    lower: float
    upper: float


@dataclass(frozen=True)
class Prediction:
    """Next-season forecast for one location.

    Carries its source summary so display layers can show the history
    alongside the forecast.
    """

    summary: LocationSummary
    target_year: int

    predicted_doy: float
    timing_ci95: Interval
    predicted_date: date
    predicted_date_lower: date
    predicted_date_upper: date

    predicted_biomass: float
    biomass_ci95: Interval

    frequency_score: float
    recency_score: float
    consistency_score: float
    spawn_probability: float

    @property
    def location_code(self) -> str:
        return self.summary.location_code

    @property
    def location_name(self) -> str:
        return self.summary.location_name

    @property
    def latitude(self) -> float:
        return self.summary.latitude

    @property
    def longitude(self) -> float:
        return self.summary.longitude


@dataclass(frozen=True)
class PipelineReport:
    """Row and location counts for auditing what each stage dropped."""

    rows_read: int
    events_retained: int
    excluded_by_reason: dict[str, int] = field(default_factory=dict)
    locations_considered: int = 0
    locations_retained: int = 0
    locations_sufficient: int = 0
    locations_forecast: int = 0

    @property
    def rows_excluded(self) -> int:
        return sum(self.excluded_by_reason.values())

    def summary_lines(self) -> list[str]:
        """Human-readable report, one count per line."""
        lines = [
            f"Rows read: {self.rows_read}",
            f"Rows excluded: {self.rows_excluded}",
        ]
        lines.extend(
            f"  {reason.replace('_', ' ')}: {count}"
            for reason, count in sorted(self.excluded_by_reason.items())
            if count
        )
        lines.extend(
            [
                f"Events retained: {self.events_retained}",
                f"Locations considered: {self.locations_considered}",
                f"Locations with measured biomass: {self.locations_retained}",
                f"Locations with sufficient evidence: {self.locations_sufficient}",
                f"Locations forecast: {self.locations_forecast}",
            ]
        )
        return lines
