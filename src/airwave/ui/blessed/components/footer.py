"""Status bar, input line and key hints."""

from blessed import Terminal

from airwave.actions import Focus
from airwave.dispatcher import AppState

from ..helpers import fit, write_at
from ..state import UIState

PROMPTS = {
    Focus.SEARCH: "search> ",
    Focus.SLASH: "/",
    Focus.PALETTE: "palette> ",
}

HINTS = "Tab focus · Ctrl+P palette · / command · ↑↓ select · Enter run/play · Esc close · Ctrl+C quit"


def render_footer(term: Terminal, state: AppState, ui_state: UIState, y: int) -> None:
    """Render status (y), input (y + 1) and hints (y + 2)."""
    if state.last_error:
        write_at(term, 0, y, term.bold_red(fit(f"✖ {state.last_error}", term.width)))
    elif state.status_message:
        write_at(term, 0, y, term.green(fit(state.status_message, term.width)))
    else:
        write_at(term, 0, y, "")

    prompt = PROMPTS[state.focus]
    text = fit(prompt + ui_state.input_text, term.width - 1)
    write_at(term, 0, y + 1, term.bold(text) + term.reverse(" "))

    write_at(term, 0, y + 2, term.bright_black(fit(HINTS, term.width)))
