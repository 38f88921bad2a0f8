"""Favorite station persistence."""

from .store import FavoritesStore, dedupe

__all__ = ["FavoritesStore", "dedupe"]
