"""DFO Pacific herring spawn index data source.

One row per spawn event: location, coordinates, start/end dates, and the
three survey sub-components (understory, macrocystis, surface) whose sum is
the biomass index.

Public API:
  - models: REQUIRED_COLUMNS, BIOMASS_COMPONENTS, SpawnRow
  - client: download_spawn_index
  - records: parse_spawn_csv, read_spawn_csv
"""

from herring_forecast.datasources.spawn_index.client import SOURCE_NAME, download_spawn_index
from herring_forecast.datasources.spawn_index.models import (
    BIOMASS_COMPONENTS,
    REQUIRED_COLUMNS,
    SpawnRow,
)
from herring_forecast.datasources.spawn_index.records import parse_spawn_csv, read_spawn_csv

__all__ = [
    "BIOMASS_COMPONENTS",
    "REQUIRED_COLUMNS",
    "SOURCE_NAME",
    "SpawnRow",
    "download_spawn_index",
    "parse_spawn_csv",
    "read_spawn_csv",
]
