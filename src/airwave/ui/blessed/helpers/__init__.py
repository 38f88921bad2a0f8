"""Blessed UI helper functions."""

from .scrolling import calculate_scroll_offset, move_selection
from .terminal import fit, write_at

__all__ = ["calculate_scroll_offset", "fit", "move_selection", "write_at"]
