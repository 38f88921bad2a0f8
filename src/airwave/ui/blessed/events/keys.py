"""Keyboard handling: keystrokes to UI state updates and Actions."""

from blessed.keyboard import Keystroke

from airwave.actions import (
    Action,
    CommandFailed,
    Focus,
    MoveSelection,
    PaletteInvoke,
    Play,
    Quit,
    Search,
    SetFocus,
)
from airwave.commands.parser import ParseError, parse_command
from airwave.dispatcher import AppState
from airwave.ui.blessed.state import (
    UIState,
    append_input_char,
    delete_input_char,
    move_palette_selection,
    reset_palette,
    selected_palette_id,
    set_input_text,
    update_palette_filter,
)


def parse_key(key: Keystroke) -> dict:
    """
    Parse keystroke into event dictionary.

    Args:
        key: blessed Keystroke

    Returns:
        Event dictionary with "type" and, for printable keys, "char"
    """
    event = {
        "type": "unknown",
        "key": key,
        "char": str(key) if key and key.isprintable() else None,
    }

    if key.name == "KEY_ENTER" or key in ("\n", "\r"):
        event["type"] = "enter"
    elif key.name == "KEY_ESCAPE" or key == "\x1b":
        event["type"] = "escape"
    elif key.name == "KEY_BACKSPACE" or key == "\x7f" or key == "\x08":
        event["type"] = "backspace"
    elif key.name == "KEY_TAB" or key == "\t":
        event["type"] = "tab"
    elif key.name == "KEY_UP":
        event["type"] = "arrow_up"
    elif key.name == "KEY_DOWN":
        event["type"] = "arrow_down"
    elif key.name == "KEY_PGUP":
        event["type"] = "page_up"
    elif key.name == "KEY_PGDOWN":
        event["type"] = "page_down"
    elif key == "\x03":  # Ctrl+C
        event["type"] = "ctrl_c"
    elif key == "\x10":  # Ctrl+P
        event["type"] = "ctrl_p"
    elif event["char"]:
        event["type"] = "char"

    return event


def _enter_focus(ui_state: UIState, focus: Focus) -> tuple[UIState, list[Action]]:
    ui_state = set_input_text(ui_state, "")
    if focus is Focus.PALETTE:
        ui_state = reset_palette(ui_state)
    return ui_state, [SetFocus(focus)]


def _submit(ui_state: UIState, state: AppState) -> tuple[UIState, list[Action]]:
    text = ui_state.input_text.strip()

    if state.focus is Focus.PALETTE:
        item_id = selected_palette_id(ui_state)
        ui_state = reset_palette(set_input_text(ui_state, ""))
        return ui_state, [PaletteInvoke(item_id)] if item_id else [SetFocus(Focus.SEARCH)]

    if state.focus is Focus.SLASH:
        ui_state = set_input_text(ui_state, "")
        try:
            action = parse_command(text)
        except ParseError as e:
            return ui_state, [SetFocus(Focus.SEARCH), CommandFailed(e.message)]
        return ui_state, [SetFocus(Focus.SEARCH), action]

    # Search focus: typed text searches, empty Enter plays the highlighted row
    if text:
        return set_input_text(ui_state, ""), [Search(text)]
    return ui_state, [Play()]


def handle_key(
    ui_state: UIState,
    state: AppState,
    key: Keystroke,
    page_size: int = 10,
) -> tuple[UIState, list[Action]]:
    """
    Handle one keystroke.

    Args:
        ui_state: Terminal-local state (input buffer, palette)
        state: Current application state (read only)
        key: blessed Keystroke
        page_size: Rows per page for PgUp/PgDn and palette scrolling

    Returns:
        Tuple of (updated UI state, actions to dispatch in order)
    """
    event = parse_key(key)
    kind = event["type"]
    focus = state.focus

    if kind == "ctrl_c":
        return ui_state, [Quit()]

    if kind == "tab":
        return _enter_focus(ui_state, focus.next())

    if kind == "ctrl_p":
        return _enter_focus(ui_state, Focus.SEARCH if focus is Focus.PALETTE else Focus.PALETTE)

    if kind == "escape":
        return _enter_focus(ui_state, Focus.SEARCH)

    if kind == "enter":
        return _submit(ui_state, state)

    if kind in ("arrow_up", "arrow_down", "page_up", "page_down"):
        step = page_size if kind.startswith("page") else 1
        delta = -step if kind in ("arrow_up", "page_up") else step
        if focus is Focus.PALETTE:
            return move_palette_selection(ui_state, delta, page_size), []
        return ui_state, [MoveSelection(delta)]

    if kind == "backspace":
        if focus is Focus.SLASH and not ui_state.input_text:
            return _enter_focus(ui_state, Focus.SEARCH)
        ui_state = delete_input_char(ui_state)
        if focus is Focus.PALETTE:
            ui_state = update_palette_filter(ui_state, ui_state.input_text)
        return ui_state, []

    if kind == "char":
        char = event["char"]
        if focus is Focus.SEARCH and char == "/" and not ui_state.input_text:
            return _enter_focus(ui_state, Focus.SLASH)
        ui_state = append_input_char(ui_state, char)
        if focus is Focus.PALETTE:
            ui_state = update_palette_filter(ui_state, ui_state.input_text)
        return ui_state, []

    return ui_state, []
