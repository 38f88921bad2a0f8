"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML + environment)
- Log output (Loguru)
- Console management (Rich)
- The shared exception hierarchy
"""

from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_favorites_path,
    create_default_config,
)
from .console import get_console, safe_print
from .errors import (
    AirwaveError,
    ConfigError,
    PersistenceError,
    DiscoveryError,
    PlaybackError,
    TransportError,
    ConnectionLostError,
    PlayerLaunchError,
)
from .output import get_log_file_path, setup_loguru

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_favorites_path",
    "create_default_config",
    # Console
    "get_console",
    "safe_print",
    # Errors
    "AirwaveError",
    "ConfigError",
    "PersistenceError",
    "DiscoveryError",
    "PlaybackError",
    "TransportError",
    "ConnectionLostError",
    "PlayerLaunchError",
    # Output
    "get_log_file_path",
    "setup_loguru",
]
