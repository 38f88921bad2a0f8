"""
Playback domain - VLC control.

Exports:
- PlaybackAdapter: state machine over one player session
- Transports: RcSocketTransport, HttpTransport
- Process: PlayerLauncher, PlayerProcess
"""

from .adapter import PlaybackAdapter, validate_stream_url
from .process import PlayerLauncher, PlayerProcess, build_vlc_command
from .status import PlaybackState, PlaybackStatus
from .transports import (
    HttpTransport,
    RcSocketTransport,
    Transport,
    percent_to_vlc_volume,
)

__all__ = [
    "PlaybackAdapter",
    "validate_stream_url",
    "PlayerLauncher",
    "PlayerProcess",
    "build_vlc_command",
    "PlaybackState",
    "PlaybackStatus",
    "HttpTransport",
    "RcSocketTransport",
    "Transport",
    "percent_to_vlc_volume",
]
