"""Statistical aggregation and forecasting pipeline.

Turns raw spawn index rows into per-location history and next-season
forecasts. This is the domain logic layer.

Dependency rule: analysis/ imports from datasources/ models only.
It never fetches data or produces HTML.

Modules:
  - models: SpawnEvent, LocationSummary, Prediction, PipelineReport
  - normalize: raw rows -> SpawnEvents (coercion, window, exclusion counts)
  - locations: measured-location filter, per-location summaries, sufficiency filter
  - forecast: summaries -> target-year Predictions
  - pipeline: run_forecast, chaining all stages
  - serialization: JSON-ready dicts for the store and the CLI

Adding a pipeline stage
-----------------------
1. Write a pure function that takes the previous stage's collection and
   returns a new one keyed by location code. No I/O, no Prefect decorators.
2. Call it from ``pipeline.run_forecast`` and add its count to
   ``PipelineReport`` if it can drop locations.
3. Re-export it here and add tests in ``tests/test_{module}.py``.
"""

from herring_forecast.analysis.forecast import (
    biomass_interval,
    consistency_score,
    doy_to_date,
    forecast_location,
    forecast_locations,
    frequency_score,
    recency_score,
    timing_interval,
)
from herring_forecast.analysis.locations import (
    filter_measured_locations,
    filter_sufficient,
    group_by_location,
    summarize_location,
    summarize_locations,
)
from herring_forecast.analysis.models import (
    Interval,
    LocationSummary,
    PipelineReport,
    Prediction,
    SpawnEvent,
)
from herring_forecast.analysis.normalize import (
    InputDataError,
    NormalizationResult,
    normalize_records,
)
from herring_forecast.analysis.pipeline import ForecastRun, run_forecast
from herring_forecast.analysis.serialization import (
    prediction_to_dict,
    predictions_to_dict,
    report_to_dict,
)

__all__ = [
    "ForecastRun",
    "InputDataError",
    "Interval",
    "LocationSummary",
    "NormalizationResult",
    "PipelineReport",
    "Prediction",
    "SpawnEvent",
    "biomass_interval",
    "consistency_score",
    "doy_to_date",
    "filter_measured_locations",
    "filter_sufficient",
    "forecast_location",
    "forecast_locations",
    "frequency_score",
    "group_by_location",
    "normalize_records",
    "prediction_to_dict",
    "predictions_to_dict",
    "recency_score",
    "report_to_dict",
    "run_forecast",
    "summarize_location",
    "summarize_locations",
    "timing_interval",
]
