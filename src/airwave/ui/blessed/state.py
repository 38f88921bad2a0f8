"""UI state management - immutable state updates.

Only terminal-local state lives here: the text being typed, palette
filtering and list scroll. Everything else is in dispatcher.AppState.
"""

from dataclasses import dataclass, field, replace

from airwave.commands.palette import PALETTE_ITEMS, filter_palette
from airwave.ui.blessed.helpers.scrolling import calculate_scroll_offset, move_selection

PaletteItem = tuple[str, str, str, str]


@dataclass
class UIState:
    input_text: str = ""

    palette_query: str = ""
    palette_items: list[PaletteItem] = field(default_factory=lambda: list(PALETTE_ITEMS))
    palette_selected: int = 0
    palette_scroll: int = 0

    # First visible row of the station list
    list_scroll: int = 0


def set_input_text(state: UIState, text: str) -> UIState:
    return replace(state, input_text=text)


def append_input_char(state: UIState, char: str) -> UIState:
    return replace(state, input_text=state.input_text + char)


def delete_input_char(state: UIState) -> UIState:
    """Backspace."""
    if not state.input_text:
        return state
    return replace(state, input_text=state.input_text[:-1])


def reset_palette(state: UIState) -> UIState:
    """Clear the palette filter and show every entry."""
    return replace(
        state,
        palette_query="",
        palette_items=list(PALETTE_ITEMS),
        palette_selected=0,
        palette_scroll=0,
    )


def update_palette_filter(state: UIState, query: str) -> UIState:
    """Re-rank palette entries for `query`, resetting the selection."""
    return replace(
        state,
        palette_query=query,
        palette_items=filter_palette(query),
        palette_selected=0,
        palette_scroll=0,
    )


def move_palette_selection(state: UIState, delta: int, visible_items: int = 10) -> UIState:
    if not state.palette_items:
        return state

    selected = move_selection(state.palette_selected, delta, len(state.palette_items), wrap=True)
    scroll = calculate_scroll_offset(
        selected, state.palette_scroll, visible_items, len(state.palette_items)
    )
    return replace(state, palette_selected=selected, palette_scroll=scroll)


def selected_palette_id(state: UIState) -> str | None:
    if not state.palette_items:
        return None
    return state.palette_items[state.palette_selected][1]


def scroll_list_to(state: UIState, selected: int, visible_items: int, total_items: int) -> UIState:
    """Keep the selected station visible."""
    scroll = calculate_scroll_offset(selected, state.list_scroll, visible_items, total_items)
    if scroll == state.list_scroll:
        return state
    return replace(state, list_scroll=scroll)
