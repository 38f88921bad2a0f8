"""Header rendering: app title, playback state and the current search."""

from blessed import Terminal

from airwave.dispatcher import AppState
from airwave.domain.playback.status import PlaybackState

from ..helpers import fit, write_at

STATE_ICONS = {
    PlaybackState.STOPPED: "■",
    PlaybackState.LOADING: "…",
    PlaybackState.PLAYING: "▶",
    PlaybackState.PAUSED: "⏸",
    PlaybackState.ERROR: "✖",
}


def _state_color(term: Terminal, state: PlaybackState):
    if state is PlaybackState.PLAYING:
        return term.bold_green
    if state is PlaybackState.PAUSED:
        return term.yellow
    if state is PlaybackState.ERROR:
        return term.bold_red
    if state is PlaybackState.LOADING:
        return term.cyan
    return term.white


def render_header(term: Terminal, state: AppState, y: int) -> int:
    """
    Render the two header lines.

    Returns:
        Number of lines used
    """
    playback = state.playback
    icon = STATE_ICONS[playback.state]
    title = "♪ AIRWAVE ♪"

    if state.now_playing is not None:
        playing = f"{icon} {state.now_playing.name}"
    else:
        playing = f"{icon} {playback.state.value}"
    volume = f"  vol {state.volume}%" if state.volume is not None else ""

    room = max(0, term.width - len(title) - len(volume) - 3)
    color = _state_color(term, playback.state)
    write_at(
        term,
        0,
        y,
        term.bold_cyan(title) + "  " + color(fit(playing, room)) + term.white(volume),
    )

    view = "Favorites" if state.view == "favorites" else "Search"
    query = f'"{state.query}"' if state.query else "(top stations)"
    pending = "  searching…" if state.search_pending else ""
    details = (
        f"{view}: {query}  filters: {state.filters.describe()}  "
        f"sort: {state.sort.value}{pending}"
    )
    write_at(term, 0, y + 1, term.bright_black(fit(details, term.width)))
    return 2
