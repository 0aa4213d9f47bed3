"""JSON serialization helpers for forecast results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from herring_forecast.analysis.models import LocationSummary, PipelineReport, Prediction
    from herring_forecast.schemas import ForecastConfig


def _round(value: float | None, digits: int) -> float | None:
    return None if value is None else round(value, digits)


def summary_to_dict(summary: LocationSummary) -> dict[str, Any]:
    """Serialize the historical fields of a LocationSummary."""
    return {
        "total_event_count": summary.total_event_count,
        "measured_event_count": summary.measured_event_count,
        "years_observed": summary.years_observed,
        "avg_biomass": _round(summary.avg_biomass, 2),
        "sd_biomass": _round(summary.sd_biomass, 2),
        "sd_log_biomass": _round(summary.sd_log_biomass, 4),
        "max_biomass": _round(summary.max_biomass, 2),
        "median_biomass": _round(summary.median_biomass, 2),
        "avg_start_doy": round(summary.avg_start_doy, 2),
        "sd_start_doy": _round(summary.sd_start_doy, 2),
        "earliest_doy": summary.earliest_doy,
        "latest_doy": summary.latest_doy,
        "most_recent_year": summary.most_recent_year,
        "years_since_last_spawn": summary.years_since_last_spawn,
    }


def prediction_to_dict(prediction: Prediction) -> dict[str, Any]:
    """Serialize a Prediction with its location and history."""
    return {
        "location_code": prediction.location_code,
        "location_name": prediction.location_name,
        "latitude": prediction.latitude,
        "longitude": prediction.longitude,
        "target_year": prediction.target_year,
        "spawn_probability": round(prediction.spawn_probability, 4),
        "scores": {
            "frequency": round(prediction.frequency_score, 4),
            "recency": round(prediction.recency_score, 4),
            "consistency": round(prediction.consistency_score, 4),
        },
        "timing": {
            "predicted_doy": round(prediction.predicted_doy, 2),
            "ci95": [
                round(prediction.timing_ci95.lower, 2),
                round(prediction.timing_ci95.upper, 2),
            ],
            "predicted_date": prediction.predicted_date.isoformat(),
            "date_ci95": [
                prediction.predicted_date_lower.isoformat(),
                prediction.predicted_date_upper.isoformat(),
            ],
        },
        "biomass": {
            "predicted": round(prediction.predicted_biomass, 2),
            "ci95": [
                round(prediction.biomass_ci95.lower, 2),
                round(prediction.biomass_ci95.upper, 2),
            ],
        },
        "history": summary_to_dict(prediction.summary),
    }


def predictions_to_dict(predictions: Sequence[Prediction]) -> list[dict[str, Any]]:
    """Serialize predictions, highest spawn probability first."""
    ranked = sorted(predictions, key=lambda p: (-p.spawn_probability, p.location_code))
    return [prediction_to_dict(p) for p in ranked]


def report_to_dict(report: PipelineReport) -> dict[str, Any]:
    """Serialize the audit counts of a pipeline run."""
    return {
        "rows_read": report.rows_read,
        "rows_excluded": report.rows_excluded,
        "excluded_by_reason": dict(report.excluded_by_reason),
        "events_retained": report.events_retained,
        "locations_considered": report.locations_considered,
        "locations_retained": report.locations_retained,
        "locations_sufficient": report.locations_sufficient,
        "locations_forecast": report.locations_forecast,
    }


def config_to_dict(config: ForecastConfig) -> dict[str, Any]:
    """Serialize the constants a forecast was produced with."""
    return config.model_dump(mode="json")
