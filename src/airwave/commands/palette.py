"""Command palette data and fuzzy ranking.

Matching is a case-insensitive subsequence test. Among matches:
contiguous substring beats scattered letters, a match anchored at a
word boundary beats one starting mid-word, and shorter labels beat
longer ones. Ties keep the caller's order.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from airwave.actions import (
    Action,
    ClearFilters,
    Help,
    ListFavorites,
    PauseToggle,
    Play,
    Quit,
    Sort,
    Stop,
    ToggleFavorite,
)
from airwave.domain.stations.models import StationSort

T = TypeVar("T")

# Palette entries: (category, id, icon, description)
PALETTE_ITEMS: list[tuple[str, str, str, str]] = [
    # Playback
    ("Playback", "play", "▶", "Play the selected station"),
    ("Playback", "stop", "■", "Stop playback"),
    ("Playback", "pause", "⏸", "Pause playback"),
    ("Playback", "resume", "▸", "Resume playback"),
    # Favorites
    ("Favorites", "favorite", "★", "Add selected station to favorites"),
    ("Favorites", "unfavorite", "☆", "Remove selected station from favorites"),
    ("Favorites", "favorites", "♥", "Show favorite stations"),
    # Search
    ("Search", "clear-filters", "✕", "Remove all search filters"),
    ("Search", "sort-name", "↕", "Sort results by name"),
    ("Search", "sort-votes", "↕", "Sort results by votes"),
    ("Search", "sort-clicks", "↕", "Sort results by clicks"),
    ("Search", "sort-bitrate", "↕", "Sort results by bitrate"),
    # App
    ("App", "help", "?", "Show available commands"),
    ("App", "quit", "⏻", "Quit Airwave"),
]

_PALETTE_ACTIONS: dict[str, Action] = {
    "play": Play(),
    "stop": Stop(),
    "pause": PauseToggle(),
    "resume": PauseToggle(),
    "favorite": ToggleFavorite(),
    "unfavorite": ToggleFavorite(),
    "favorites": ListFavorites(),
    "clear-filters": ClearFilters(),
    "sort-name": Sort(StationSort.NAME),
    "sort-votes": Sort(StationSort.VOTES),
    "sort-clicks": Sort(StationSort.CLICKS),
    "sort-bitrate": Sort(StationSort.BITRATE),
    "help": Help(),
    "quit": Quit(),
}


def palette_action(item_id: str) -> Optional[Action]:
    """Action for a palette id, or None if the id is unknown."""
    return _PALETTE_ACTIONS.get(item_id)


@dataclass(frozen=True)
class MatchScore:
    contiguous: bool
    boundary: bool
    length: int

    @property
    def sort_key(self) -> tuple[bool, bool, int]:
        # False sorts first
        return (not self.contiguous, not self.boundary, self.length)


def _at_boundary(text: str, index: int) -> bool:
    return index == 0 or not text[index - 1].isalnum()


def _is_subsequence(needle: str, haystack: str, start: int = 0) -> bool:
    pos = start
    for ch in needle:
        pos = haystack.find(ch, pos)
        if pos < 0:
            return False
        pos += 1
    return True


def match(query: str, label: str) -> Optional[MatchScore]:
    """Score `label` against `query`, or None if it does not match."""
    q = query.strip().lower()
    text = label.lower()
    if not q:
        return MatchScore(True, True, len(label))

    pos = text.find(q)
    if pos >= 0:
        boundary = False
        while pos >= 0:
            if _at_boundary(text, pos):
                boundary = True
                break
            pos = text.find(q, pos + 1)
        return MatchScore(True, boundary, len(label))

    if not _is_subsequence(q, text):
        return None

    boundary = any(
        ch == q[0] and _at_boundary(text, i) and _is_subsequence(q[1:], text, i + 1)
        for i, ch in enumerate(text)
    )
    return MatchScore(False, boundary, len(label))


def rank(
    query: str,
    items: Iterable[T],
    label: Callable[[T], str] = str,
) -> list[T]:
    """Matching items, best first. A blank query returns everything in order."""
    items = list(items)
    if not query.strip():
        return items

    scored = []
    for item in items:
        score = match(query, label(item))
        if score is not None:
            scored.append((score.sort_key, item))
    # sort() is stable, so equal scores keep input order
    scored.sort(key=lambda pair: pair[0])
    return [item for _, item in scored]


def filter_palette(
    query: str,
    items: Sequence[tuple[str, str, str, str]] | None = None,
) -> list[tuple[str, str, str, str]]:
    """Palette entries ranked by their id."""
    if items is None:
        items = PALETTE_ITEMS
    return rank(query, items, label=lambda item: item[1])


def closest(query: str, names: Iterable[str]) -> Optional[str]:
    """Best "did you mean" candidate, or None if nothing is close enough.

    A candidate must match at a word boundary and the shorter of the two
    strings must cover at least half of the longer. Both directions are
    tried so that extra letters ("stopp") and missing ones ("serch") work.
    """
    q = query.strip().lower()
    if not q:
        return None

    best: Optional[tuple[tuple[bool, bool, int], str]] = None
    for name in names:
        candidates = []
        forward = match(q, name)
        if forward is not None and forward.boundary and len(q) * 2 >= len(name):
            candidates.append(forward)
        backward = match(name, q)
        if backward is not None and backward.boundary and len(name) * 2 >= len(q):
            candidates.append(MatchScore(backward.contiguous, True, len(name)))
        for score in candidates:
            if best is None or score.sort_key < best[0]:
                best = (score.sort_key, name)
    return best[1] if best else None
