"""Keyboard event handling."""

from .keys import handle_key, parse_key

__all__ = ["handle_key", "parse_key"]
