"""Tests for UI state helpers, scrolling and row formatting."""

from airwave.commands.palette import PALETTE_ITEMS
from airwave.domain.stations.models import Station
from airwave.ui.blessed.components.station_list import format_station_row
from airwave.ui.blessed.helpers.scrolling import calculate_scroll_offset, move_selection
from airwave.ui.blessed.helpers.terminal import fit
from airwave.ui.blessed.state import (
    UIState,
    append_input_char,
    delete_input_char,
    move_palette_selection,
    reset_palette,
    scroll_list_to,
    selected_palette_id,
    update_palette_filter,
)


class TestScrolling:
    def test_scroll_down_keeps_selection_visible(self) -> None:
        assert calculate_scroll_offset(15, 0, 10, 20) == 6

    def test_scroll_up(self) -> None:
        assert calculate_scroll_offset(2, 10, 10, 20) == 2

    def test_short_list_never_scrolls(self) -> None:
        assert calculate_scroll_offset(4, 3, 10, 5) == 0

    def test_move_selection_clamps_and_wraps(self) -> None:
        assert move_selection(0, -1, 5) == 0
        assert move_selection(4, 1, 5) == 4
        assert move_selection(0, -1, 5, wrap=True) == 4
        assert move_selection(0, 1, 0) == 0


class TestUIState:
    def test_input_editing(self) -> None:
        state = append_input_char(append_input_char(UIState(), "a"), "b")
        assert state.input_text == "ab"
        assert delete_input_char(state).input_text == "a"
        assert delete_input_char(UIState()).input_text == ""

    def test_palette_filter_and_reset(self) -> None:
        state = update_palette_filter(UIState(), "sort")
        assert all("sort" in item[1] for item in state.palette_items)
        state = reset_palette(state)
        assert state.palette_items == list(PALETTE_ITEMS)
        assert state.palette_query == ""

    def test_palette_selection(self) -> None:
        state = move_palette_selection(UIState(), 2)
        assert selected_palette_id(state) == PALETTE_ITEMS[2][1]

    def test_list_scroll(self) -> None:
        state = scroll_list_to(UIState(), selected=12, visible_items=5, total_items=20)
        assert state.list_scroll == 8
        assert scroll_list_to(state, 10, 5, 20) is state


class TestFormatting:
    def test_station_row(self) -> None:
        station = Station(
            id="x", name="Jazz FM", url="http://x", country_code="GB", bitrate=128, votes=5
        )
        row = format_station_row(3, station, favorite=True, playing=True)
        assert row == "  3. ▶★ Jazz FM  [GB · 128k · 5 votes]"

    def test_station_row_without_stats(self) -> None:
        row = format_station_row(1, Station(id="x", name="X", url="http://x"), False, False)
        assert row == "  1.    X"

    def test_fit_truncates(self) -> None:
        assert len(fit("a" * 50, 10)) <= 10
        assert fit("short", 10).startswith("short")
