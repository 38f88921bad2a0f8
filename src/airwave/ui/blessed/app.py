"""Main blessed UI application loop."""

import sys
import time

from blessed import Terminal
from loguru import logger

from airwave.actions import Action, Focus
from airwave.dispatcher import AppState, reduce, startup
from airwave.runtime import EffectRunner

from .components import (
    DETAILS_HEIGHT,
    render_details,
    render_footer,
    render_header,
    render_help,
    render_palette,
    render_station_list,
)
from .events import handle_key
from .state import UIState, scroll_list_to

HEADER_HEIGHT = 2
FOOTER_HEIGHT = 3
HEALTH_CHECK_INTERVAL = 1.0
INPUT_TIMEOUT = 0.1


def list_height(term: Terminal) -> int:
    return max(1, term.height - HEADER_HEIGHT - FOOTER_HEIGHT - DETAILS_HEIGHT - 1)


def render(term: Terminal, state: AppState, ui_state: UIState) -> None:
    """Draw a full frame."""
    y = render_header(term, state, 0)
    body = list_height(term)

    if state.show_help:
        render_help(term, y, body + DETAILS_HEIGHT + 1)
    elif state.focus is Focus.PALETTE:
        render_palette(term, ui_state, y, body + DETAILS_HEIGHT + 1)
    else:
        render_station_list(term, state, ui_state, y, body)
        write_at_separator(term, y + body)
        render_details(term, state, y + body + 1)

    render_footer(term, state, ui_state, term.height - FOOTER_HEIGHT)
    sys.stdout.flush()


def write_at_separator(term: Terminal, y: int) -> None:
    sys.stdout.write(term.move_xy(0, y) + term.clear_eol + term.bright_black("─" * term.width))


def run_interactive_ui(runner: EffectRunner, state: AppState) -> AppState:
    """
    Run the interactive UI until the user quits.

    Args:
        runner: Effect runner wired to playback, discovery and favorites
        state: Initial application state

    Returns:
        Final AppState
    """
    term = Terminal()

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        try:
            state = main_loop(term, runner, state)
        except KeyboardInterrupt:
            logger.info("Ctrl+C detected - leaving UI")

    return state


def main_loop(term: Terminal, runner: EffectRunner, state: AppState) -> AppState:
    ui_state = UIState()

    def dispatch(current: AppState, action: Action) -> AppState:
        new_state, effects = reduce(current, action)
        runner.run(effects)
        return new_state

    state, effects = startup(state)
    runner.run(effects)

    needs_redraw = True
    last_size = (term.width, term.height)
    last_health_check = time.time()

    while state.running:
        for action in runner.drain():
            state = dispatch(state, action)
            needs_redraw = True

        now = time.time()
        if now - last_health_check >= HEALTH_CHECK_INTERVAL:
            runner.poll()
            last_health_check = now

        size = (term.width, term.height)
        if size != last_size:
            last_size = size
            sys.stdout.write(term.clear)
            needs_redraw = True

        if needs_redraw:
            ui_state = scroll_list_to(
                ui_state, state.selected_index, list_height(term), len(state.results)
            )
            render(term, state, ui_state)
            needs_redraw = False

        key = term.inkey(timeout=INPUT_TIMEOUT)
        if not key:
            continue

        ui_state, actions = handle_key(ui_state, state, key, page_size=list_height(term))
        for action in actions:
            state = dispatch(state, action)
            if not state.running:
                break
        needs_redraw = True

    return state
