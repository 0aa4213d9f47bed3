"""Next-season spawn forecasts from per-location summaries.

All estimates are historical averages with normal-approximation intervals
(mean +/- z * SD). There is no trend term, so the forecast for a location is
exactly its recent history restated for the target year.

Spawn probability is a weighted composite of three scores:

    frequency   = measured events / analysis window years
    recency     = step function of years since the last recorded spawn
    consistency = 1 - sd_biomass / (avg_biomass + 1), clamped to [0, 1]

    probability = clamp01(w_f * frequency + w_r * recency + w_c * consistency)
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date, timedelta
from typing import TYPE_CHECKING

from herring_forecast.analysis.models import Interval, LocationSummary, Prediction

if TYPE_CHECKING:
    from herring_forecast.schemas import ForecastConfig, RecencyStep

FIRST_DOY = 1
LAST_DOY = 365


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def doy_to_date(doy: float, year: int) -> date:
    """Calendar date of a (possibly fractional) day-of-year in ``year``.

    Fractional days are truncated, so day 45.8 is Feb 14.
    """
    return date(year, 1, 1) + timedelta(days=math.floor(doy) - 1)


# =============================================================================
# Component scores
# =============================================================================


def frequency_score(measured_event_count: int, window_years: int) -> float:
    """Measured spawns per analysis year. Not capped; the composite is clamped instead."""
    return measured_event_count / window_years


def recency_score(
    years_since_last_spawn: int,
    schedule: Sequence[RecencyStep],
    floor: float,
) -> float:
    """Score from the first schedule step whose ``max_years`` covers the gap.

    Negative gaps (a spawn recorded in or after the target year) score as 0.
    """
    years = max(0, years_since_last_spawn)
    for step in schedule:
        if years <= step.max_years:
            return step.score
    return floor


def consistency_score(avg_biomass: float, sd_biomass: float | None) -> float:
    """Stability of biomass relative to its mean, clamped to [0, 1]."""
    spread = sd_biomass or 0.0
    return clamp(1.0 - spread / (avg_biomass + 1.0), 0.0, 1.0)


# =============================================================================
# Intervals
# =============================================================================


def timing_interval(summary: LocationSummary, z: float) -> tuple[float, Interval]:
    """Predicted start day and its interval, all clamped to [1, 365]."""
    predicted = clamp(summary.avg_start_doy, FIRST_DOY, LAST_DOY)
    spread = z * (summary.sd_start_doy or 0.0)
    interval = Interval(
        lower=clamp(predicted - spread, FIRST_DOY, LAST_DOY),
        upper=clamp(predicted + spread, FIRST_DOY, LAST_DOY),
    )
    return predicted, interval


def biomass_interval(
    avg_biomass: float,
    sd_biomass: float | None,
    sd_log_biomass: float | None,
    z: float,
    default_log_sd: float,
) -> Interval:
    """Biomass interval on the linear scale, lower bound floored at 0.

    When the linear SD is missing or zero the interval is built on the
    ``log(x + 1)`` scale instead, using the log-scale SD if it is positive
    and ``default_log_sd`` otherwise, then transformed back.
    """
    if sd_biomass:
        return Interval(
            lower=max(0.0, avg_biomass - z * sd_biomass),
            upper=avg_biomass + z * sd_biomass,
        )

    log_sd = sd_log_biomass if sd_log_biomass else default_log_sd
    centre = math.log1p(avg_biomass)
    return Interval(
        lower=max(0.0, math.expm1(centre - z * log_sd)),
        upper=math.expm1(centre + z * log_sd),
    )


# =============================================================================
# Forecaster
# =============================================================================


def forecast_location(summary: LocationSummary, config: ForecastConfig) -> Prediction:
    """Build the target-year Prediction for one summary.

    Raises:
        ValueError: If the summary has no measured biomass.
    """
    if summary.avg_biomass is None:
        msg = f"Location {summary.location_code} has no measured biomass to forecast"
        raise ValueError(msg)

    year = config.target_year
    predicted_doy, timing = timing_interval(summary, config.ci_z)
    biomass = biomass_interval(
        summary.avg_biomass,
        summary.sd_biomass,
        summary.sd_log_biomass,
        config.ci_z,
        config.default_log_sd,
    )

    frequency = frequency_score(summary.measured_event_count, config.window_years)
    recency = recency_score(
        summary.years_since_last_spawn, config.recency_schedule, config.recency_floor
    )
    consistency = consistency_score(summary.avg_biomass, summary.sd_biomass)
    weights = config.weights
    probability = clamp(
        weights.frequency * frequency
        + weights.recency * recency
        + weights.consistency * consistency,
        0.0,
        1.0,
    )

    return Prediction(
        summary=summary,
        target_year=year,
        predicted_doy=predicted_doy,
        timing_ci95=timing,
        predicted_date=doy_to_date(predicted_doy, year),
        predicted_date_lower=doy_to_date(timing.lower, year),
        predicted_date_upper=doy_to_date(timing.upper, year),
        predicted_biomass=summary.avg_biomass,
        biomass_ci95=biomass,
        frequency_score=frequency,
        recency_score=recency,
        consistency_score=consistency,
        spawn_probability=probability,
    )


def forecast_locations(
    summaries: Mapping[str, LocationSummary],
    config: ForecastConfig,
) -> dict[str, Prediction]:
    """One Prediction per summary, keyed by location code."""
    return {code: forecast_location(summary, config) for code, summary in summaries.items()}
