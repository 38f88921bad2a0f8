"""Station list and details pane rendering."""

from blessed import Terminal

from airwave.dispatcher import AppState
from airwave.domain.stations.models import Station

from ..helpers import fit, write_at
from ..state import UIState

DETAILS_HEIGHT = 3


def format_station_row(index: int, station: Station, favorite: bool, playing: bool) -> str:
    """Plain-text row: number, markers, name and a few stats."""
    marker = "▶" if playing else " "
    star = "★" if favorite else " "
    stats = []
    if station.country_code or station.country:
        stats.append(station.country_code or station.country)
    if station.bitrate:
        stats.append(f"{station.bitrate}k")
    if station.votes is not None:
        stats.append(f"{station.votes} votes")
    suffix = f"  [{' · '.join(stats)}]" if stats else ""
    return f"{index:>3}. {marker}{star} {station.name}{suffix}"


def render_station_list(
    term: Terminal, state: AppState, ui_state: UIState, y: int, height: int
) -> None:
    if height <= 0:
        return

    if not state.results:
        if state.search_pending:
            message = "  Searching…"
        elif state.view == "favorites":
            message = "  No favorites yet. Use /fav on a highlighted station to add one"
        else:
            message = "  No stations. Type to search, / for commands, Ctrl+P for the palette"
        write_at(term, 0, y, term.bright_black(message))
        for line in range(1, height):
            write_at(term, 0, y + line, "")
        return

    playing_id = state.now_playing.id if state.now_playing else None
    start = ui_state.list_scroll
    visible = state.results[start : start + height]

    for line in range(height):
        if line >= len(visible):
            write_at(term, 0, y + line, "")
            continue
        index = start + line
        station = visible[line]
        row = fit(
            format_station_row(
                index + 1, station, state.is_favorite(station), station.id == playing_id
            ),
            term.width,
        )
        if index == state.selected_index:
            write_at(term, 0, y + line, term.black_on_cyan(row.ljust(term.width)))
        elif station.id == playing_id:
            write_at(term, 0, y + line, term.green(row))
        else:
            write_at(term, 0, y + line, row)


def render_details(term: Terminal, state: AppState, y: int) -> None:
    """Details of the highlighted station."""
    station = state.selected_station
    if station is None:
        for line in range(DETAILS_HEIGHT):
            write_at(term, 0, y + line, "")
        return

    write_at(term, 0, y, term.bold(fit(station.name, term.width)))

    facts = [
        part
        for part in (
            station.country,
            station.language,
            station.codec,
            f"{station.bitrate} kbps" if station.bitrate else None,
            f"{station.click_count} clicks" if station.click_count is not None else None,
        )
        if part
    ]
    if station.tags:
        facts.append("tags: " + ", ".join(station.tags))
    write_at(term, 0, y + 1, term.white(fit("  " + " · ".join(facts), term.width)))
    write_at(term, 0, y + 2, term.bright_black(fit("  " + (station.homepage or station.url), term.width)))
