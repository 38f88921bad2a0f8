"""Station models and discovery backends."""

from .catalog import (
    SAMPLE_STATIONS,
    RadioBrowserCatalog,
    StaticCatalog,
    StationCatalog,
)
from .models import (
    FILTER_KEYS,
    SearchQuery,
    Station,
    StationFilters,
    StationSort,
    station_from_dict,
)

__all__ = [
    "FILTER_KEYS",
    "SAMPLE_STATIONS",
    "RadioBrowserCatalog",
    "SearchQuery",
    "StaticCatalog",
    "Station",
    "StationCatalog",
    "StationFilters",
    "StationSort",
    "station_from_dict",
]
