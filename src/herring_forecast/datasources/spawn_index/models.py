"""Column names of the spawn index CSV export."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

LOCATION_CODE = "LocationCode"
LOCATION_NAME = "LocationName"
LATITUDE = "Latitude"
LONGITUDE = "Longitude"
START_DATE = "StartDate"
END_DATE = "EndDate"
YEAR = "Year"

# Survey sub-components summed into the biomass index.
UNDERSTORY = "Understory"
MACROCYSTIS = "Macrocystis"
SURFACE = "Surface"
BIOMASS_COMPONENTS: tuple[str, ...] = (UNDERSTORY, MACROCYSTIS, SURFACE)

REQUIRED_COLUMNS: tuple[str, ...] = (
    LOCATION_CODE,
    LOCATION_NAME,
    LATITUDE,
    LONGITUDE,
    START_DATE,
    END_DATE,
    YEAR,
    *BIOMASS_COMPONENTS,
)

#: A raw record as read from the source; values are usually strings.
SpawnRow = Mapping[str, Any]
