"""Command palette and help overlay rendering."""

from blessed import Terminal

from airwave.commands.parser import help_text

from ..helpers import fit, write_at
from ..state import UIState


def render_palette(term: Terminal, ui_state: UIState, y: int, height: int) -> None:
    """
    Render the command palette with scrolling.

    Args:
        term: blessed Terminal instance
        ui_state: UI state holding ranked palette items
        y: Starting y position
        height: Available height
    """
    if height <= 0:
        return

    write_at(term, 0, y, term.bold_cyan("   Command Palette"))
    content_height = height - 1
    items = ui_state.palette_items

    if not items:
        write_at(term, 0, y + 1, term.bright_black("  No matching commands"))
        for line in range(2, height):
            write_at(term, 0, y + line, "")
        return

    start = ui_state.palette_scroll
    for line in range(content_height):
        index = start + line
        if index >= len(items):
            write_at(term, 0, y + 1 + line, "")
            continue
        category, item_id, icon, description = items[index]
        text = fit(f" {icon} {item_id:<16} {description}  ({category})", term.width)
        if index == ui_state.palette_selected:
            write_at(term, 0, y + 1 + line, term.black_on_cyan(text.ljust(term.width)))
        else:
            write_at(term, 0, y + 1 + line, text)


def render_help(term: Terminal, y: int, height: int) -> None:
    lines = help_text().splitlines()
    for line in range(height):
        text = lines[line] if line < len(lines) else ""
        write_at(term, 0, y + line, term.white(fit(text, term.width)))
