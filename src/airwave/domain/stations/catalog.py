"""
Station discovery backends.

RadioBrowserCatalog talks to the public radio-browser JSON API.
StaticCatalog serves a small built-in list for offline use and tests.
"""

import time
from typing import Any, Iterable, Optional, Protocol

import requests
from loguru import logger

from airwave.core.errors import (
    DiscoveryNetworkError,
    DiscoveryTimeoutError,
    MalformedResponseError,
)

from .models import SearchQuery, Station, StationSort, station_from_dict

USER_AGENT = "airwave-cli/0.1"
RETRY_BACKOFF_SECONDS = 0.25


class StationCatalog(Protocol):
    """Anything that can search and look up stations."""

    def search(self, query: SearchQuery) -> list[Station]:
        ...

    def lookup(self, ids: Iterable[str]) -> list[Station]:
        ...


def build_search_params(query: SearchQuery) -> dict[str, Any]:
    """Translate a SearchQuery into radio-browser query parameters."""
    params: dict[str, Any] = {
        "order": query.sort.api_order,
        "reverse": "true" if query.sort.descending else "false",
        "limit": query.limit,
        "hidebroken": "true",
    }
    text = query.text.strip()
    if text:
        params["name"] = text

    filters = query.filters
    if filters.country:
        # Two letters is an ISO code, anything else is a country name
        if len(filters.country) == 2 and filters.country.isalpha():
            params["countrycode"] = filters.country.upper()
        else:
            params["country"] = filters.country
    if filters.language:
        params["language"] = filters.language
    if filters.tag:
        params["tag"] = filters.tag
    if filters.codec:
        params["codec"] = filters.codec
    if filters.min_bitrate is not None:
        params["bitrateMin"] = filters.min_bitrate
    return params


def parse_station_list(payload: Any) -> list[Station]:
    """Convert a radio-browser JSON array into Stations.

    Records without an id or stream URL are skipped.

    Raises:
        MalformedResponseError: If the payload is not a JSON array of objects
    """
    if not isinstance(payload, list):
        raise MalformedResponseError(
            f"expected a JSON array of stations, got {type(payload).__name__}"
        )

    stations = []
    for record in payload:
        if not isinstance(record, dict):
            raise MalformedResponseError("station entry is not a JSON object")
        try:
            stations.append(station_from_dict(record))
        except ValueError as e:
            logger.debug(f"Skipping station record: {e}")
    return stations


class RadioBrowserCatalog:
    """Client for the radio-browser station directory.

    Every request gets its own timeout; only timeouts and connection
    failures are retried, up to `retries` extra attempts.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 3.0,
        retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = max(0, retries)
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        attempts = self.retries + 1

        for attempt in range(1, attempts + 1):
            try:
                logger.debug(f"GET {url} params={params} (attempt {attempt}/{attempts})")
                response = self._session.get(url, params=params, timeout=self.timeout)
                response.raise_for_status()
            except requests.Timeout as e:
                if attempt == attempts:
                    raise DiscoveryTimeoutError(
                        f"station search timed out after {attempts} attempt(s)"
                    ) from e
                logger.warning(f"Discovery request timed out, retrying: {url}")
            except requests.ConnectionError as e:
                if attempt == attempts:
                    raise DiscoveryNetworkError(f"cannot reach {self.base_url}: {e}") from e
                logger.warning(f"Discovery connection failed, retrying: {e}")
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else "?"
                raise DiscoveryNetworkError(f"station directory returned HTTP {status}") from e
            except requests.RequestException as e:
                raise DiscoveryNetworkError(str(e)) from e
            else:
                try:
                    return response.json()
                except ValueError as e:
                    raise MalformedResponseError(
                        "station directory returned invalid JSON"
                    ) from e

            time.sleep(RETRY_BACKOFF_SECONDS * attempt)

        # Loop always returns or raises
        raise DiscoveryNetworkError(f"cannot reach {self.base_url}")

    def search(self, query: SearchQuery) -> list[Station]:
        """Search stations matching the query.

        Raises:
            DiscoveryTimeoutError, DiscoveryNetworkError, MalformedResponseError
        """
        params = build_search_params(query)
        stations = parse_station_list(self._get_json("/json/stations/search", params))
        logger.info(f"Search '{query.text}' returned {len(stations)} stations")
        return stations

    def lookup(self, ids: Iterable[str]) -> list[Station]:
        """Fetch stations by id, returned in the order the ids were given."""
        wanted = list(ids)
        if not wanted:
            return []
        payload = self._get_json("/json/stations/byuuid", {"uuids": ",".join(wanted)})
        by_id = {station.id: station for station in parse_station_list(payload)}
        return [by_id[i] for i in wanted if i in by_id]


SAMPLE_STATIONS: tuple[Station, ...] = (
    Station(
        id="bbc-world-service",
        name="BBC World Service",
        url="http://stream.live.vc.bbcmedia.co.uk/bbc_world_service",
        homepage="https://www.bbc.co.uk/worldserviceradio",
        tags=("news", "world"),
        country="United Kingdom",
        country_code="GB",
        language="english",
        codec="MP3",
        bitrate=128,
        votes=500,
        click_count=2000,
    ),
    Station(
        id="npr",
        name="NPR",
        url="https://npr-ice.streamguys1.com/live.mp3",
        homepage="https://www.npr.org",
        tags=("news", "talk"),
        country="United States",
        country_code="US",
        language="english",
        codec="MP3",
        bitrate=128,
        votes=700,
        click_count=3000,
    ),
    Station(
        id="soma-groove",
        name="SomaFM Groove Salad",
        url="https://ice2.somafm.com/groovesalad-128-mp3",
        homepage="https://somafm.com/groovesalad/",
        tags=("ambient", "electronic"),
        country="United States",
        country_code="US",
        language="english",
        codec="MP3",
        bitrate=128,
        votes=900,
        click_count=4000,
    ),
)


def _sort_key(sort: StationSort):
    if sort is StationSort.NAME:
        return lambda s: s.name.lower()
    if sort is StationSort.CLICKS:
        return lambda s: s.click_count or 0
    return lambda s: getattr(s, sort.value) or 0


class StaticCatalog:
    """In-memory catalog, filtered and sorted client-side."""

    def __init__(self, stations: Iterable[Station] = SAMPLE_STATIONS):
        self.stations = tuple(stations)

    def search(self, query: SearchQuery) -> list[Station]:
        matches = [
            s
            for s in self.stations
            if s.matches_query(query.text) and query.filters.accepts(s)
        ]
        matches.sort(key=_sort_key(query.sort), reverse=query.sort.descending)
        return matches[: query.limit]

    def lookup(self, ids: Iterable[str]) -> list[Station]:
        by_id = {s.id: s for s in self.stations}
        return [by_id[i] for i in ids if i in by_id]
