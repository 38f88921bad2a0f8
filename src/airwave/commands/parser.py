"""
Slash-command parsing.

Turns one line of input (`/filter country=US tag=news`) into an Action.
Bad input raises ParseError carrying a usage line and, for unknown
commands, a "did you mean" suggestion.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from airwave.actions import (
    Action,
    ClearFilters,
    Filter,
    Help,
    ListFavorites,
    PauseToggle,
    Play,
    PlaySelector,
    Quit,
    Search,
    SelectedStation,
    Sort,
    StationIndex,
    StationName,
    Stop,
    ToggleFavorite,
    Volume,
)
from airwave.core.errors import AirwaveError
from airwave.domain.stations.models import FILTER_KEYS, Station, StationFilters, StationSort
from airwave.utils.parsers import parse_command as split_command

from .palette import closest


@dataclass(frozen=True)
class CommandSpec:
    name: str
    aliases: tuple[str, ...]
    usage: str
    description: str


COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("search", (), "/search <text>", "Search stations by name"),
    CommandSpec(
        "filter",
        (),
        "/filter key=value ... (keys: " + ", ".join(FILTER_KEYS) + ")",
        "Set search filters",
    ),
    CommandSpec("clear-filters", ("clear",), "/clear-filters", "Remove all filters"),
    CommandSpec("sort", (), "/sort name|votes|clicks|bitrate", "Change result order"),
    CommandSpec("favorites", ("favs",), "/favorites", "List favorite stations"),
    CommandSpec("play", (), "/play [selected|<n>|<name>]", "Play a station"),
    CommandSpec("stop", (), "/stop", "Stop playback"),
    CommandSpec("pause", ("resume",), "/pause", "Pause or resume playback"),
    CommandSpec(
        "fav",
        ("favorite", "unfav", "unfavorite"),
        "/fav",
        "Toggle favorite on the selected station",
    ),
    CommandSpec("volume", ("vol",), "/volume <0-100>", "Set playback volume"),
    CommandSpec("help", ("h",), "/help", "Show this help"),
    CommandSpec("quit", ("q", "exit"), "/quit", "Quit Airwave"),
)

_BY_NAME: dict[str, CommandSpec] = {}
for _spec in COMMANDS:
    _BY_NAME[_spec.name] = _spec
    for _alias in _spec.aliases:
        _BY_NAME[_alias] = _spec


class ParseError(AirwaveError):
    """Input could not be turned into an Action."""

    def __init__(self, command: str, reason: str, suggestion: Optional[str] = None):
        self.command = command
        self.reason = reason
        self.suggestion = suggestion
        super().__init__(self.message)

    @property
    def usage(self) -> Optional[str]:
        spec = _BY_NAME.get(self.command)
        return spec.usage if spec else None

    @property
    def message(self) -> str:
        text = f"/{self.command}: {self.reason}" if self.command else self.reason
        if self.suggestion:
            text += f" (did you mean /{self.suggestion}?)"
        elif self.usage:
            text += f" (usage: {self.usage})"
        return text


class ValidationError(ParseError):
    """A recognised argument has an unacceptable value."""

    def __init__(self, command: str, field: str, reason: str):
        self.field = field
        super().__init__(command, f"{field}: {reason}")


class SelectorError(AirwaveError):
    """A /play selector does not resolve to a station."""

    pass


class NothingLoadedError(SelectorError):
    def __init__(self):
        super().__init__("no stations loaded; search first")


class IndexOutOfRangeError(SelectorError):
    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"no station #{index} (results have {count})")


class NoMatchError(SelectorError):
    def __init__(self, fragment: str):
        self.fragment = fragment
        super().__init__(f"no station matching '{fragment}'")


def help_text() -> str:
    """Command summary shown by /help."""
    lines = ["Commands:"]
    for spec in COMMANDS:
        aliases = f" ({', '.join('/' + a for a in spec.aliases)})" if spec.aliases else ""
        lines.append(f"  {spec.usage:<36} {spec.description}{aliases}")
    lines.append("Keys: Tab focus, Ctrl+P palette, / command, Up/Down select, Enter run, Esc close")
    return "\n".join(lines)


def _no_args(command: str, args: Sequence[str]) -> None:
    if args:
        raise ParseError(command, "takes no arguments")


def _parse_filters(command: str, args: Sequence[str]) -> StationFilters:
    if not args:
        raise ParseError(command, "expected at least one key=value")

    values: dict[str, object] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        key = key.strip().lower()
        if not sep:
            raise ParseError(command, f"expected key=value, got '{arg}'")
        if key not in FILTER_KEYS:
            raise ParseError(command, f"unknown filter '{key}'")
        if key in values:
            raise ParseError(command, f"duplicate filter '{key}'")
        value = value.strip()
        if not value:
            raise ValidationError(command, key, "value must not be empty")
        if key == "min_bitrate":
            if not value.isdigit():
                raise ValidationError(command, key, "must be a non-negative integer")
            values[key] = int(value)
        else:
            values[key] = value
    return StationFilters(**values)


def _parse_play_selector(args: Sequence[str]) -> PlaySelector:
    if not args:
        return SelectedStation()
    text = " ".join(args).strip()
    if text.lower() == "selected":
        return SelectedStation()
    if text.isdigit():
        return StationIndex(int(text))
    return StationName(text)


def _parse_volume(command: str, args: Sequence[str]) -> int:
    if len(args) != 1:
        raise ParseError(command, "expected one value")
    if not args[0].isdigit() or int(args[0]) > 100:
        raise ValidationError(command, "volume", "must be an integer from 0 to 100")
    return int(args[0])


def parse_command(line: str) -> Action:
    """Parse one slash command.

    Raises:
        ParseError: Unknown command, missing or malformed arguments
        ValidationError: Argument present but invalid
    """
    name, args = split_command(line)
    if not name:
        raise ParseError("", "empty command")

    spec = _BY_NAME.get(name)
    if spec is None:
        suggestion = closest(name, [s.name for s in COMMANDS])
        raise ParseError(name, "unknown command", suggestion=suggestion)

    command = spec.name
    if command == "search":
        if not args:
            raise ParseError(command, "expected search text")
        return Search(" ".join(args))
    if command == "filter":
        return Filter(_parse_filters(command, args))
    if command == "sort":
        if len(args) != 1:
            raise ParseError(command, "expected one sort key")
        try:
            return Sort(StationSort.parse(args[0]))
        except ValueError as e:
            raise ParseError(command, str(e)) from e
    if command == "play":
        return Play(_parse_play_selector(args))
    if command == "volume":
        return Volume(_parse_volume(command, args))

    _no_args(command, args)
    simple: dict[str, Action] = {
        "clear-filters": ClearFilters(),
        "favorites": ListFavorites(),
        "stop": Stop(),
        "pause": PauseToggle(),
        "fav": ToggleFavorite(),
        "help": Help(),
        "quit": Quit(),
    }
    return simple[command]


def resolve_play_selector(
    selector: PlaySelector,
    results: Sequence[Station],
    selected_index: int,
) -> Station:
    """Find the station a /play selector refers to.

    Raises:
        NothingLoadedError: No results to choose from
        IndexOutOfRangeError: 1-based index outside the results
        NoMatchError: No station name contains the fragment
    """
    if not results:
        raise NothingLoadedError()

    if isinstance(selector, SelectedStation):
        index = min(max(selected_index, 0), len(results) - 1)
        return results[index]

    if isinstance(selector, StationIndex):
        if not 1 <= selector.index <= len(results):
            raise IndexOutOfRangeError(selector.index, len(results))
        return results[selector.index - 1]

    fragment = selector.fragment.lower()
    for station in results:
        if fragment in station.name.lower():
            return station
    raise NoMatchError(selector.fragment)
