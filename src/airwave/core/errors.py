"""Exception hierarchy for Airwave.

Command-line parse errors live with the parser (airwave.commands.parser);
everything that crosses an I/O boundary is defined here.
"""


class AirwaveError(Exception):
    """Base exception for Airwave."""

    pass


class ConfigError(AirwaveError):
    """Raised when a configuration value cannot be used."""

    pass


class PersistenceError(AirwaveError):
    """Raised when the favorites file cannot be read or written."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class DiscoveryError(AirwaveError):
    """Base exception for station discovery failures."""

    pass


class DiscoveryTimeoutError(DiscoveryError):
    """Raised when the station catalog does not answer in time."""

    pass


class DiscoveryNetworkError(DiscoveryError):
    """Raised on connection failures or error status codes."""

    pass


class MalformedResponseError(DiscoveryError):
    """Raised when the station catalog returns something we cannot parse."""

    pass


class PlaybackError(AirwaveError):
    """Base exception for playback failures."""

    pass


class TransportError(PlaybackError):
    """Raised when a control command cannot be delivered or is rejected."""

    pass


class ConnectionLostError(TransportError):
    """Raised when the control connection to the player is gone."""

    pass


class PlayerLaunchError(PlaybackError):
    """Raised when the external player process cannot be started."""

    pass
