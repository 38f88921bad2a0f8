"""Slash commands and the command palette."""

from .palette import PALETTE_ITEMS, closest, filter_palette, match, palette_action, rank
from .parser import (
    COMMANDS,
    IndexOutOfRangeError,
    NoMatchError,
    NothingLoadedError,
    ParseError,
    SelectorError,
    ValidationError,
    help_text,
    parse_command,
    resolve_play_selector,
)

__all__ = [
    "PALETTE_ITEMS",
    "closest",
    "filter_palette",
    "match",
    "palette_action",
    "rank",
    "COMMANDS",
    "IndexOutOfRangeError",
    "NoMatchError",
    "NothingLoadedError",
    "ParseError",
    "SelectorError",
    "ValidationError",
    "help_text",
    "parse_command",
    "resolve_play_selector",
]
