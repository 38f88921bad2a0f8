"""
Application state and the reducer.

`reduce(state, action)` is pure: it returns the next AppState and the
effects to run. Nothing here touches the network, the player or disk.
"""

from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from airwave.actions import (
    Action,
    ClearFilters,
    CommandFailed,
    Effect,
    FavoritesSaveFailed,
    Filter,
    Focus,
    Help,
    ListFavorites,
    LookupStations,
    MoveSelection,
    PaletteInvoke,
    PauseToggle,
    Play,
    PlaybackUpdated,
    Quit,
    RunSearch,
    SaveFavorites,
    Search,
    SearchCompleted,
    SearchFailed,
    SetFocus,
    SetVolume,
    ShutdownPlayback,
    Sort,
    StartPlayback,
    Stop,
    StopPlayback,
    SwitchPlayback,
    ToggleFavorite,
    TogglePause,
    Volume,
)
from airwave.commands.palette import palette_action
from airwave.commands.parser import SelectorError, resolve_play_selector
from airwave.core.config import Config
from airwave.domain.playback.status import STOPPED, PlaybackState, PlaybackStatus
from airwave.domain.stations.models import SearchQuery, Station, StationFilters, StationSort

VIEW_SEARCH = "search"
VIEW_FAVORITES = "favorites"


@dataclass(frozen=True)
class AppState:
    """Everything the renderer needs, in one immutable value."""

    query: str = ""
    filters: StationFilters = StationFilters()
    sort: StationSort = StationSort.VOTES
    limit: int = 50
    results: tuple[Station, ...] = ()
    selected_index: int = 0
    focus: Focus = Focus.SEARCH
    view: str = VIEW_SEARCH

    now_playing: Optional[Station] = None
    playback: PlaybackStatus = STOPPED
    volume: Optional[int] = None

    favorites: tuple[str, ...] = ()

    last_error: Optional[str] = None
    status_message: Optional[str] = None
    show_help: bool = False

    search_seq: int = 0
    search_pending: bool = False
    running: bool = True

    @property
    def selected_station(self) -> Optional[Station]:
        if not self.results:
            return None
        return self.results[min(self.selected_index, len(self.results) - 1)]

    def is_favorite(self, station: Station) -> bool:
        return station.id in self.favorites

    def search_query(self) -> SearchQuery:
        return SearchQuery(self.query, self.filters, self.sort, self.limit)


def initial_state(config: Config, favorites: tuple[str, ...] = ()) -> AppState:
    """Startup state: default sort and filters from config, loaded favorites."""
    f = config.defaults.filters
    return AppState(
        filters=StationFilters(
            country=f.country,
            language=f.language,
            tag=f.tag,
            codec=f.codec,
            min_bitrate=f.min_bitrate,
        ),
        sort=StationSort.parse(config.defaults.sort),
        limit=config.discovery.limit,
        volume=config.playback.volume,
        favorites=tuple(favorites),
    )


Result = tuple[AppState, list[Effect]]


def _start_search(state: AppState) -> Result:
    seq = state.search_seq + 1
    state = replace(
        state,
        search_seq=seq,
        search_pending=True,
        view=VIEW_SEARCH,
        status_message="Searching...",
    )
    return state, [RunSearch(state.search_query(), seq)]


def startup(state: AppState) -> Result:
    """First search with the configured default filters and sort."""
    return _start_search(state)


def _sorted_locally(stations: tuple[Station, ...], sort: StationSort) -> tuple[Station, ...]:
    if sort is StationSort.NAME:
        return tuple(sorted(stations, key=lambda s: s.name.lower()))
    attr = "click_count" if sort is StationSort.CLICKS else sort.value
    return tuple(sorted(stations, key=lambda s: getattr(s, attr) or 0, reverse=True))


def _play(state: AppState, action: Play) -> Result:
    try:
        station = resolve_play_selector(action.selector, state.results, state.selected_index)
    except SelectorError as e:
        return replace(state, last_error=str(e)), []

    if (
        state.now_playing is not None
        and state.now_playing.id == station.id
        and state.playback.state is PlaybackState.PLAYING
    ):
        return replace(state, status_message=f"Already playing {station.name}"), []

    effect: Effect
    if state.playback.is_active:
        effect = SwitchPlayback(station)
    else:
        effect = StartPlayback(station)
    return replace(state, status_message=f"Tuning in to {station.name}..."), [effect]


def _toggle_favorite(state: AppState) -> Result:
    station = state.selected_station
    if station is None:
        return replace(state, last_error="No station selected"), []

    if station.id in state.favorites:
        favorites = tuple(i for i in state.favorites if i != station.id)
        message = f"Removed {station.name} from favorites"
    else:
        favorites = state.favorites + (station.id,)
        message = f"Added {station.name} to favorites"
    return replace(state, favorites=favorites, status_message=message), [SaveFavorites(favorites)]


def _playback_updated(state: AppState, action: PlaybackUpdated) -> AppState:
    status = action.status
    if status.state is PlaybackState.PLAYING:
        station = action.station or state.now_playing
        name = station.name if station else "stream"
        return replace(
            state,
            playback=status,
            now_playing=station,
            status_message=f"Playing {name}",
        )
    if status.state is PlaybackState.STOPPED:
        return replace(state, playback=status, now_playing=None, status_message="Stopped")
    if status.state is PlaybackState.ERROR:
        return replace(state, playback=status, last_error=status.message)
    if status.state is PlaybackState.PAUSED:
        return replace(state, playback=status, status_message="Paused")
    return replace(state, playback=status)


def _user_action(state: AppState, action: Action) -> Result:
    """Handle a command issued by the user."""
    if isinstance(action, Search):
        return _start_search(replace(state, query=action.text.strip()))

    if isinstance(action, Filter):
        return _start_search(replace(state, filters=action.filters))

    if isinstance(action, ClearFilters):
        return _start_search(replace(state, filters=StationFilters()))

    if isinstance(action, Sort):
        state = replace(state, sort=action.sort)
        if state.view == VIEW_FAVORITES:
            results = _sorted_locally(state.results, action.sort)
            return replace(state, results=results, selected_index=0), []
        return _start_search(state)

    if isinstance(action, ListFavorites):
        if not state.favorites:
            return (
                replace(
                    state,
                    view=VIEW_FAVORITES,
                    results=(),
                    selected_index=0,
                    status_message="No favorites yet",
                ),
                [],
            )
        seq = state.search_seq + 1
        state = replace(
            state,
            view=VIEW_FAVORITES,
            search_seq=seq,
            search_pending=True,
            status_message="Loading favorites...",
        )
        return state, [LookupStations(state.favorites, seq)]

    if isinstance(action, Play):
        return _play(state, action)

    if isinstance(action, Stop):
        return state, [StopPlayback()]

    if isinstance(action, PauseToggle):
        if not state.playback.is_active:
            return replace(state, last_error="Nothing is playing"), []
        return state, [TogglePause()]

    if isinstance(action, ToggleFavorite):
        return _toggle_favorite(state)

    if isinstance(action, Help):
        return replace(state, show_help=True), []

    if isinstance(action, Quit):
        return replace(state, running=False, status_message="Goodbye"), [ShutdownPlayback()]

    if isinstance(action, Volume):
        return (
            replace(state, volume=action.level, status_message=f"Volume {action.level}%"),
            [SetVolume(action.level)],
        )

    if isinstance(action, PaletteInvoke):
        target = palette_action(action.id)
        if target is None:
            return replace(state, last_error=f"Unknown palette command '{action.id}'"), []
        return reduce(replace(state, focus=Focus.SEARCH), target)

    raise TypeError(f"Unhandled action: {action!r}")


def reduce(state: AppState, action: Action) -> Result:
    """Apply one action. Returns the new state and effects to run."""
    # Navigation
    if isinstance(action, MoveSelection):
        if not state.results:
            return state, []
        index = max(0, min(state.selected_index + action.delta, len(state.results) - 1))
        return replace(state, selected_index=index), []

    if isinstance(action, SetFocus):
        return replace(state, focus=action.focus, show_help=False), []

    # Feedback from effects
    if isinstance(action, SearchCompleted):
        if action.seq != state.search_seq:
            logger.debug(f"Dropping stale results (seq {action.seq} != {state.search_seq})")
            return state, []
        count = len(action.stations)
        noun = "favorite" if state.view == VIEW_FAVORITES else "station"
        return (
            replace(
                state,
                results=tuple(action.stations),
                selected_index=0,
                search_pending=False,
                status_message=f"{count} {noun}{'s' if count != 1 else ''}",
            ),
            [],
        )

    if isinstance(action, SearchFailed):
        if action.seq != state.search_seq:
            logger.debug(f"Dropping stale failure (seq {action.seq})")
            return state, []
        return replace(state, search_pending=False, last_error=action.reason, status_message=None), []

    if isinstance(action, PlaybackUpdated):
        return _playback_updated(state, action), []

    if isinstance(action, FavoritesSaveFailed):
        return replace(state, last_error=f"Could not save favorites: {action.reason}"), []

    if isinstance(action, CommandFailed):
        return replace(state, last_error=action.message), []

    # User commands clear the previous error and the help overlay
    state = replace(state, last_error=None, show_help=False)
    return _user_action(state, action)
