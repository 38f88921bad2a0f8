"""
Station domain models.

Contains data structures for stations, search filters and search queries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class Station:
    """One discoverable internet radio stream.

    `id` is the stable key used for favorites and for "is this station
    already playing" checks.
    """

    id: str
    name: str
    url: str
    homepage: Optional[str] = None
    favicon: Optional[str] = None
    tags: tuple[str, ...] = ()
    country: Optional[str] = None
    country_code: Optional[str] = None
    language: Optional[str] = None
    codec: Optional[str] = None
    bitrate: Optional[int] = None
    votes: Optional[int] = None
    click_count: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Station id must be non-empty")

    def matches_query(self, query: str) -> bool:
        """Case-insensitive match against name and tags."""
        q = query.strip().lower()
        if not q:
            return True
        return q in self.name.lower() or any(q in t.lower() for t in self.tags)


class StationSort(Enum):
    """Sort keys accepted by /sort and the catalog."""

    NAME = "name"
    VOTES = "votes"
    CLICKS = "clicks"
    BITRATE = "bitrate"

    @property
    def api_order(self) -> str:
        """Order key understood by the radio-browser API."""
        return "clickcount" if self is StationSort.CLICKS else self.value

    @property
    def descending(self) -> bool:
        return self is not StationSort.NAME

    @classmethod
    def parse(cls, value: str) -> "StationSort":
        """Parse a sort key (case-insensitive).

        Raises:
            ValueError: If value is not a known sort key
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"invalid sort '{value}' (expected {valid})") from None


FILTER_KEYS = ("country", "language", "tag", "codec", "min_bitrate")


@dataclass(frozen=True)
class StationFilters:
    """Optional search constraints. Absent field = no constraint."""

    country: Optional[str] = None
    language: Optional[str] = None
    tag: Optional[str] = None
    codec: Optional[str] = None
    min_bitrate: Optional[int] = None

    def is_empty(self) -> bool:
        return all(getattr(self, key) is None for key in FILTER_KEYS)

    def describe(self) -> str:
        """Short `key=value` summary for the status bar."""
        parts = [
            f"{key}={getattr(self, key)}"
            for key in FILTER_KEYS
            if getattr(self, key) is not None
        ]
        return " ".join(parts) if parts else "none"

    def accepts(self, station: Station) -> bool:
        """Client-side filter check (used by the offline catalog)."""
        if self.country:
            wanted = self.country.lower()
            if wanted not in (
                (station.country or "").lower(),
                (station.country_code or "").lower(),
            ):
                return False
        if self.language and self.language.lower() != (station.language or "").lower():
            return False
        if self.tag and self.tag.lower() not in (t.lower() for t in station.tags):
            return False
        if self.codec and self.codec.lower() != (station.codec or "").lower():
            return False
        if self.min_bitrate is not None and (station.bitrate or 0) < self.min_bitrate:
            return False
        return True


@dataclass(frozen=True)
class SearchQuery:
    """Everything the discovery client needs for one search."""

    text: str = ""
    filters: StationFilters = field(default_factory=StationFilters)
    sort: StationSort = StationSort.VOTES
    limit: int = 50


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_tags(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return tuple(t.strip() for t in items if t and t.strip())


def station_from_dict(data: dict[str, Any]) -> Station:
    """Build a Station from radio-browser JSON or a legacy saved object.

    Accepts both field spellings:
    - radio-browser: stationuuid, url_resolved, countrycode, clickcount, tags="a,b"
    - legacy/internal: station_uuid or id, stream_url or url, country_code, clicks

    Raises:
        ValueError: If the record has no identifier, name or stream URL
    """
    station_id = _opt_str(
        data.get("stationuuid") or data.get("station_uuid") or data.get("id")
    )
    if not station_id:
        raise ValueError("station record has no identifier")

    url = _opt_str(
        data.get("url_resolved") or data.get("stream_url") or data.get("url")
    )
    if not url:
        raise ValueError(f"station {station_id} has no stream URL")

    click_count = data.get("clickcount")
    if click_count is None:
        click_count = data.get("click_count", data.get("clicks"))

    return Station(
        id=station_id,
        name=_opt_str(data.get("name")) or station_id,
        url=url,
        homepage=_opt_str(data.get("homepage")),
        favicon=_opt_str(data.get("favicon")),
        tags=_parse_tags(data.get("tags")),
        country=_opt_str(data.get("country")),
        country_code=_opt_str(data.get("countrycode") or data.get("country_code")),
        language=_opt_str(data.get("language")),
        codec=_opt_str(data.get("codec")),
        bitrate=_opt_int(data.get("bitrate")),
        votes=_opt_int(data.get("votes")),
        click_count=_opt_int(click_count),
    )
