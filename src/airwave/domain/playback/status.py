"""Playback state values shared by the adapter and the app state."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PlaybackState(Enum):
    STOPPED = "stopped"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class PlaybackStatus:
    """Adapter state plus an optional human-readable message."""

    state: PlaybackState = PlaybackState.STOPPED
    message: Optional[str] = None

    @classmethod
    def error(cls, message: str) -> "PlaybackStatus":
        return cls(PlaybackState.ERROR, message)

    @property
    def is_active(self) -> bool:
        """True while a stream is loaded (playing or paused)."""
        return self.state in (PlaybackState.PLAYING, PlaybackState.PAUSED)

    def label(self) -> str:
        if self.state is PlaybackState.ERROR and self.message:
            return f"error: {self.message}"
        return self.state.value


STOPPED = PlaybackStatus()
