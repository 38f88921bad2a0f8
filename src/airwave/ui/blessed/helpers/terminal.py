"""Terminal output utilities that prevent rendering artifacts."""

import sys

from blessed import Terminal


def write_at(term: Terminal, x: int, y: int, content: str, *, clear: bool = True) -> None:
    """Write content at a position, clearing the rest of the line by default.

    Shorter content would otherwise leave the tail of the previous frame
    on screen.
    """
    prefix = term.move_xy(x, y) + (term.clear_eol if clear else "")
    sys.stdout.write(prefix + content)


def fit(text: str, width: int) -> str:
    """Truncate plain text to `width` columns, marking the cut with an ellipsis."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return "…"
    return text[: width - 1] + "…"
