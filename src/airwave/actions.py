"""
Actions and effects.

Actions are what the user (or a finished background job) asks for; they
are the only input to `dispatcher.reduce`. Effects are the side-effect
requests `reduce` returns; `runtime.EffectRunner` executes them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from airwave.domain.playback.status import PlaybackStatus
from airwave.domain.stations.models import SearchQuery, Station, StationFilters, StationSort


class Focus(Enum):
    """Which input the keyboard currently drives."""

    SEARCH = "search"
    SLASH = "slash"
    PALETTE = "palette"

    def next(self) -> "Focus":
        order = list(Focus)
        return order[(order.index(self) + 1) % len(order)]


# Play selectors


@dataclass(frozen=True)
class SelectedStation:
    """The highlighted row."""


@dataclass(frozen=True)
class StationIndex:
    index: int  # 1-based


@dataclass(frozen=True)
class StationName:
    fragment: str


PlaySelector = Union[SelectedStation, StationIndex, StationName]


# User actions


@dataclass(frozen=True)
class Search:
    text: str


@dataclass(frozen=True)
class Filter:
    filters: StationFilters


@dataclass(frozen=True)
class ClearFilters:
    pass


@dataclass(frozen=True)
class Sort:
    sort: StationSort


@dataclass(frozen=True)
class ListFavorites:
    pass


@dataclass(frozen=True)
class Play:
    selector: PlaySelector = SelectedStation()


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class PauseToggle:
    pass


@dataclass(frozen=True)
class ToggleFavorite:
    pass


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class PaletteInvoke:
    id: str


@dataclass(frozen=True)
class Volume:
    level: int  # 0-100


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class SetFocus:
    focus: Focus


# Feedback actions posted by effects


@dataclass(frozen=True)
class SearchCompleted:
    seq: int
    stations: tuple[Station, ...]


@dataclass(frozen=True)
class SearchFailed:
    seq: int
    reason: str


@dataclass(frozen=True)
class PlaybackUpdated:
    status: PlaybackStatus
    station: Optional[Station] = None


@dataclass(frozen=True)
class FavoritesSaveFailed:
    reason: str


@dataclass(frozen=True)
class CommandFailed:
    message: str


Action = Union[
    Search,
    Filter,
    ClearFilters,
    Sort,
    ListFavorites,
    Play,
    Stop,
    PauseToggle,
    ToggleFavorite,
    Help,
    Quit,
    PaletteInvoke,
    Volume,
    MoveSelection,
    SetFocus,
    SearchCompleted,
    SearchFailed,
    PlaybackUpdated,
    FavoritesSaveFailed,
    CommandFailed,
]


# Effects


@dataclass(frozen=True)
class RunSearch:
    query: SearchQuery
    seq: int


@dataclass(frozen=True)
class LookupStations:
    ids: tuple[str, ...]
    seq: int


@dataclass(frozen=True)
class StartPlayback:
    station: Station


@dataclass(frozen=True)
class SwitchPlayback:
    station: Station


@dataclass(frozen=True)
class StopPlayback:
    pass


@dataclass(frozen=True)
class TogglePause:
    pass


@dataclass(frozen=True)
class SetVolume:
    level: int


@dataclass(frozen=True)
class SaveFavorites:
    ids: tuple[str, ...]


@dataclass(frozen=True)
class ShutdownPlayback:
    pass


Effect = Union[
    RunSearch,
    LookupStations,
    StartPlayback,
    SwitchPlayback,
    StopPlayback,
    TogglePause,
    SetVolume,
    SaveFavorites,
    ShutdownPlayback,
]
