"""Tests for the reducer: actions in, state and effects out."""

from dataclasses import replace

import pytest

from airwave.actions import (
    ClearFilters,
    CommandFailed,
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
    StationIndex,
    Stop,
    StopPlayback,
    SwitchPlayback,
    ToggleFavorite,
    TogglePause,
    Volume,
)
from airwave.core.config import Config
from airwave.dispatcher import AppState, initial_state, reduce, startup
from airwave.domain.playback.status import PlaybackState, PlaybackStatus
from airwave.domain.stations.models import Station, StationFilters, StationSort

JAZZ = Station(id="jazz", name="Jazz FM", url="http://jazz", votes=10, bitrate=128)
ROCK = Station(id="rock", name="Classic Rock", url="http://rock", votes=30, bitrate=64)
NEWS = Station(id="news", name="News 24", url="http://news", votes=20, bitrate=256)

PLAYING = PlaybackStatus(PlaybackState.PLAYING)
PAUSED = PlaybackStatus(PlaybackState.PAUSED)


@pytest.fixture
def loaded() -> AppState:
    """State with three results from a completed search."""
    return AppState(results=(JAZZ, ROCK, NEWS), search_seq=1)


class TestStartup:
    def test_initial_state_from_config(self) -> None:
        config = Config()
        config.defaults.sort = "bitrate"
        config.defaults.filters.country = "DE"
        config.discovery.limit = 20

        state = initial_state(config, ("a", "b"))

        assert state.sort is StationSort.BITRATE
        assert state.filters == StationFilters(country="DE")
        assert state.limit == 20
        assert state.favorites == ("a", "b")

    def test_startup_searches_with_defaults(self) -> None:
        state = AppState(filters=StationFilters(tag="jazz"), sort=StationSort.NAME)

        state, effects = startup(state)

        assert state.search_pending
        assert effects == [RunSearch(state.search_query(), 1)]
        assert effects[0].query.filters.tag == "jazz"


class TestSearch:
    """Tests for search, filter and sort handling."""

    def test_search_bumps_sequence(self, loaded: AppState) -> None:
        state, effects = reduce(loaded, Search("  jazz "))
        assert state.query == "jazz"
        assert state.search_seq == 2
        assert effects == [RunSearch(state.search_query(), 2)]

    def test_stale_results_dropped(self, loaded: AppState) -> None:
        """Only the latest search may replace the results."""
        state, _ = reduce(loaded, Search("a"))
        state, _ = reduce(state, Search("b"))

        state, _ = reduce(state, SearchCompleted(2, (JAZZ,)))
        assert state.results == loaded.results
        assert state.search_pending

        state, _ = reduce(state, SearchCompleted(3, (ROCK,)))
        assert state.results == (ROCK,)
        assert not state.search_pending
        assert state.status_message == "1 station"

    def test_stale_failure_dropped(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, Search("a"))
        state, _ = reduce(state, Search("b"))
        state, _ = reduce(state, SearchFailed(2, "timeout"))
        assert state.last_error is None

    def test_failure_keeps_results(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, Search("a"))
        state, _ = reduce(state, SearchFailed(2, "network down"))
        assert state.last_error == "network down"
        assert state.results == loaded.results
        assert not state.search_pending

    def test_filter_replaces_and_searches(self, loaded: AppState) -> None:
        filters = StationFilters(country="US")
        state, effects = reduce(loaded, Filter(filters))
        assert state.filters == filters
        assert effects[0].query.filters == filters

    def test_clear_filters(self) -> None:
        state, effects = reduce(AppState(filters=StationFilters(tag="x")), ClearFilters())
        assert state.filters.is_empty()
        assert isinstance(effects[0], RunSearch)

    def test_sort_researches(self, loaded: AppState) -> None:
        state, effects = reduce(loaded, Sort(StationSort.NAME))
        assert effects[0].query.sort is StationSort.NAME

    def test_sort_in_favorites_view_is_local(self, loaded: AppState) -> None:
        state = replace(loaded, view="favorites")
        state, effects = reduce(state, Sort(StationSort.BITRATE))
        assert effects == []
        assert [s.id for s in state.results] == ["news", "jazz", "rock"]

    def test_user_action_clears_error(self, loaded: AppState) -> None:
        state = replace(loaded, last_error="old", show_help=True)
        state, _ = reduce(state, Search("x"))
        assert state.last_error is None
        assert not state.show_help


class TestPlay:
    """Tests for /play and the playback feedback loop."""

    def test_start_when_stopped(self, loaded: AppState) -> None:
        state, effects = reduce(replace(loaded, selected_index=1), Play())
        assert effects == [StartPlayback(ROCK)]

    def test_switch_when_playing(self, loaded: AppState) -> None:
        state = replace(loaded, playback=PLAYING, now_playing=JAZZ)
        _, effects = reduce(state, Play(StationIndex(3)))
        assert effects == [SwitchPlayback(NEWS)]

    def test_switch_when_paused(self, loaded: AppState) -> None:
        state = replace(loaded, playback=PAUSED, now_playing=JAZZ)
        _, effects = reduce(state, Play(StationIndex(2)))
        assert effects == [SwitchPlayback(ROCK)]

    def test_same_station_is_noop(self, loaded: AppState) -> None:
        state = replace(loaded, playback=PLAYING, now_playing=JAZZ)
        state, effects = reduce(state, Play())
        assert effects == []
        assert "Already playing" in state.status_message

    def test_bad_selector_reports_error(self, loaded: AppState) -> None:
        state, effects = reduce(loaded, Play(StationIndex(9)))
        assert effects == []
        assert state.last_error is not None

    def test_nothing_loaded(self) -> None:
        state, effects = reduce(AppState(), Play())
        assert effects == []
        assert state.last_error

    def test_playing_update_sets_now_playing(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, PlaybackUpdated(PLAYING, ROCK))
        assert state.now_playing == ROCK
        assert state.playback == PLAYING

    def test_stopped_update_clears_now_playing(self, loaded: AppState) -> None:
        state = replace(loaded, playback=PLAYING, now_playing=ROCK)
        state, _ = reduce(state, PlaybackUpdated(PlaybackStatus()))
        assert state.now_playing is None

    def test_error_update_surfaces_message(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, PlaybackUpdated(PlaybackStatus.error("VLC rejected 'add'")))
        assert state.last_error == "VLC rejected 'add'"
        assert state.playback.state is PlaybackState.ERROR

    def test_stop(self, loaded: AppState) -> None:
        assert reduce(loaded, Stop())[1] == [StopPlayback()]

    def test_pause_needs_active_playback(self, loaded: AppState) -> None:
        state, effects = reduce(loaded, PauseToggle())
        assert effects == []
        assert state.last_error == "Nothing is playing"

        _, effects = reduce(replace(loaded, playback=PLAYING), PauseToggle())
        assert effects == [TogglePause()]

    def test_command_failed(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, CommandFailed("Cannot play X"))
        assert state.last_error == "Cannot play X"


class TestFavorites:
    """Tests for favorite toggling and the favorites view."""

    def test_toggle_adds_then_removes(self, loaded: AppState) -> None:
        state, effects = reduce(loaded, ToggleFavorite())
        assert state.favorites == ("jazz",)
        assert effects == [SaveFavorites(("jazz",))]

        state, effects = reduce(state, ToggleFavorite())
        assert state.favorites == ()
        assert effects == [SaveFavorites(())]

    def test_toggle_without_selection(self) -> None:
        state, effects = reduce(AppState(), ToggleFavorite())
        assert effects == []
        assert state.last_error == "No station selected"

    def test_list_favorites_looks_up_ids(self, loaded: AppState) -> None:
        state = replace(loaded, favorites=("rock", "jazz"))
        state, effects = reduce(state, ListFavorites())
        assert state.view == "favorites"
        assert effects == [LookupStations(("rock", "jazz"), 2)]

        state, _ = reduce(state, SearchCompleted(2, (ROCK, JAZZ)))
        assert state.results == (ROCK, JAZZ)
        assert state.status_message == "2 favorites"

    def test_list_favorites_empty(self, loaded: AppState) -> None:
        state, effects = reduce(loaded, ListFavorites())
        assert effects == []
        assert state.results == ()
        assert state.status_message == "No favorites yet"

    def test_save_failure(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, FavoritesSaveFailed("disk full"))
        assert state.last_error == "Could not save favorites: disk full"


class TestNavigationAndMisc:
    def test_move_selection_clamps(self, loaded: AppState) -> None:
        state, _ = reduce(loaded, MoveSelection(10))
        assert state.selected_index == 2
        state, _ = reduce(state, MoveSelection(-10))
        assert state.selected_index == 0

    def test_move_selection_without_results(self) -> None:
        state, _ = reduce(AppState(), MoveSelection(1))
        assert state.selected_index == 0

    def test_set_focus_hides_help(self) -> None:
        state, _ = reduce(AppState(show_help=True), SetFocus(Focus.SLASH))
        assert state.focus is Focus.SLASH
        assert not state.show_help

    def test_help(self) -> None:
        state, _ = reduce(AppState(), Help())
        assert state.show_help

    def test_quit(self) -> None:
        state, effects = reduce(AppState(), Quit())
        assert not state.running
        assert effects == [ShutdownPlayback()]

    def test_volume(self) -> None:
        state, effects = reduce(AppState(), Volume(30))
        assert state.volume == 30
        assert effects == [SetVolume(30)]

    def test_palette_invoke_runs_command(self, loaded: AppState) -> None:
        state = replace(loaded, focus=Focus.PALETTE)
        state, effects = reduce(state, PaletteInvoke("sort-name"))
        assert state.focus is Focus.SEARCH
        assert state.sort is StationSort.NAME
        assert isinstance(effects[0], RunSearch)

    def test_palette_invoke_unknown(self) -> None:
        state, effects = reduce(AppState(), PaletteInvoke("nope"))
        assert effects == []
        assert "nope" in state.last_error
