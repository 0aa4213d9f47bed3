"""Herring Forecast - Pacific herring spawn history and next-season forecasts.

Architecture::

    datasources/   Spawn index CSV (download, parse into raw rows)
    analysis/      Pure pipeline: normalize -> filter -> summarize -> forecast
    store.py       raw/ and derived/ tiers with freshness metadata
    renderers/     Pure data -> HTML (Leaflet spawn map)
    flows/         Prefect orchestration (fetch checks freshness, build renders site)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources -> store (raw) -> analysis -> store (derived) + renderers -> site/

Extension points - see each package's docstring:
  - New data source:     datasources/__init__.py
  - New pipeline stage:  analysis/__init__.py
  - New UI module:       renderers/__init__.py
"""

__version__ = "0.1.0"

from herring_forecast.config import Settings
from herring_forecast.schemas import ForecastConfig

__all__ = ["ForecastConfig", "Settings", "__version__"]
