"""
Configuration management for Airwave
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .errors import ConfigError

VALID_PLAYBACK_MODES = ("rc", "http")
VALID_SORT_KEYS = ("name", "votes", "clicks", "bitrate")

DEFAULT_DISCOVERY_BASE = "https://de1.api.radio-browser.info"


@dataclass
class PlaybackConfig:
    """Configuration for the external VLC player."""

    mode: str = "rc"  # 'rc' | 'http'
    spawn_player: bool = True  # False = attach to an already running VLC
    vlc_binary: str = "cvlc"
    rc_host: str = "127.0.0.1"
    rc_port: int = 4212
    http_base_url: str = "http://127.0.0.1:8080"
    http_password: str = "airwave"
    request_timeout: float = 2.0
    ready_timeout: float = 5.0
    shutdown_timeout: float = 1.0
    volume: Optional[int] = None  # 0-100, None leaves VLC's default


@dataclass
class DiscoveryConfig:
    """Configuration for the radio-browser station catalog."""

    base_url: str = DEFAULT_DISCOVERY_BASE
    timeout_ms: int = 3000
    retries: int = 2
    limit: int = 50
    offline: bool = False  # Use the built-in sample catalog


@dataclass
class FiltersConfig:
    """Default station filters applied at startup."""

    country: Optional[str] = None
    language: Optional[str] = None
    tag: Optional[str] = None
    codec: Optional[str] = None
    min_bitrate: Optional[int] = None


@dataclass
class DefaultsConfig:
    """Startup defaults for searching."""

    sort: str = "votes"
    filters: FiltersConfig = field(default_factory=FiltersConfig)


@dataclass
class FavoritesConfig:
    """Configuration for the favorites file."""

    path: Optional[str] = None  # default: <data dir>/favorites.json


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # default: <data dir>/airwave.log


@dataclass
class Config:
    """Main configuration object."""

    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    favorites: FavoritesConfig = field(default_factory=FavoritesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "airwave"
    return Path.home() / ".config" / "airwave"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in project root by looking for pyproject.toml.

    Used during development so a checkout's config.toml wins over the
    user's global one.

    Returns:
        Path to config.toml in project root, or None if not found
    """
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            return config_path if config_path.exists() else None
    return None


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. AIRWAVE_CONFIG environment variable
    2. Project root (detected via pyproject.toml) - for development
    3. Current working directory
    4. XDG_CONFIG_HOME/airwave (or ~/.config/airwave)
    """
    explicit = os.environ.get("AIRWAVE_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "airwave"
    return Path.home() / ".local" / "share" / "airwave"


def get_favorites_path(config: Config) -> Path:
    """Resolve the favorites file location."""
    if config.favorites.path:
        return Path(config.favorites.path).expanduser()
    return get_data_dir() / "favorites.json"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Airwave Configuration

[playback]
# How to talk to VLC: "rc" (remote-control socket) or "http" (web interface)
mode = "rc"

# Start VLC ourselves; set false to attach to a VLC you launched
spawn_player = true
vlc_binary = "cvlc"

# RC interface address
rc_host = "127.0.0.1"
rc_port = 4212

# HTTP interface address and password
http_base_url = "http://127.0.0.1:8080"
http_password = "airwave"

# Seconds
request_timeout = 2.0
ready_timeout = 5.0
shutdown_timeout = 1.0

# Initial volume (0-100)
# volume = 60

[discovery]
base_url = "https://de1.api.radio-browser.info"
timeout_ms = 3000
retries = 2
limit = 50

# Use the built-in sample stations instead of the network
offline = false

[defaults]
# name, votes, clicks or bitrate
sort = "votes"

[defaults.filters]
# country = "US"
# language = "english"
# tag = "jazz"
# codec = "mp3"
# min_bitrate = 128

[favorites]
# path = "~/.local/share/airwave/favorites.json"

[logging]
# DEBUG, INFO, WARNING, ERROR, CRITICAL
level = "INFO"
# log_file = "/tmp/airwave.log"
"""


def _non_empty(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_mode(value: str, source: str) -> str:
    mode = str(value).strip().lower()
    if mode not in VALID_PLAYBACK_MODES:
        raise ConfigError(
            f"invalid playback mode '{value}' in {source} (expected rc or http)"
        )
    return mode


def _parse_sort(value: str, source: str) -> str:
    sort = str(value).strip().lower()
    if sort not in VALID_SORT_KEYS:
        raise ConfigError(
            f"invalid sort '{value}' in {source} "
            f"(expected {', '.join(VALID_SORT_KEYS)})"
        )
    return sort


def _parse_int(value: Any, source: str, minimum: int = 0) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid integer '{value}' in {source}") from None
    if number < minimum:
        raise ConfigError(f"{source} must be >= {minimum}, got {number}")
    return number


def _parse_float(value: Any, source: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid number '{value}' in {source}") from None
    if number <= 0:
        raise ConfigError(f"{source} must be positive, got {number}")
    return number


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def apply_toml_data(config: Config, toml_data: dict[str, Any]) -> Config:
    """Merge parsed TOML sections into config.

    Unknown sections and keys are ignored.

    Raises:
        ConfigError: If a known key holds an unusable value
    """
    if "playback" in toml_data:
        data = toml_data["playback"]
        pb = config.playback
        if "mode" in data:
            pb.mode = _parse_mode(data["mode"], "[playback] mode")
        pb.spawn_player = _parse_bool(data.get("spawn_player", pb.spawn_player))
        pb.vlc_binary = data.get("vlc_binary", pb.vlc_binary)
        pb.rc_host = data.get("rc_host", pb.rc_host)
        if "rc_port" in data:
            pb.rc_port = _parse_int(data["rc_port"], "[playback] rc_port", 1)
        pb.http_base_url = data.get("http_base_url", pb.http_base_url).rstrip("/")
        pb.http_password = data.get("http_password", pb.http_password)
        for key in ("request_timeout", "ready_timeout", "shutdown_timeout"):
            if key in data:
                setattr(pb, key, _parse_float(data[key], f"[playback] {key}"))
        if "volume" in data:
            pb.volume = min(_parse_int(data["volume"], "[playback] volume"), 100)

    if "discovery" in toml_data:
        data = toml_data["discovery"]
        dc = config.discovery
        dc.base_url = data.get("base_url", dc.base_url).rstrip("/")
        if "timeout_ms" in data:
            dc.timeout_ms = _parse_int(data["timeout_ms"], "[discovery] timeout_ms", 1)
        if "retries" in data:
            dc.retries = _parse_int(data["retries"], "[discovery] retries")
        if "limit" in data:
            dc.limit = _parse_int(data["limit"], "[discovery] limit", 1)
        dc.offline = _parse_bool(data.get("offline", dc.offline))

    if "defaults" in toml_data:
        data = toml_data["defaults"]
        if "sort" in data:
            config.defaults.sort = _parse_sort(data["sort"], "[defaults] sort")
        filters = data.get("filters", {})
        fc = config.defaults.filters
        for key in ("country", "language", "tag", "codec"):
            if key in filters:
                setattr(fc, key, _non_empty(filters[key]))
        if "min_bitrate" in filters:
            fc.min_bitrate = _parse_int(
                filters["min_bitrate"], "[defaults.filters] min_bitrate"
            )

    if "favorites" in toml_data:
        config.favorites.path = _non_empty(toml_data["favorites"].get("path"))

    if "logging" in toml_data:
        data = toml_data["logging"]
        config.logging.level = str(data.get("level", config.logging.level)).upper()
        config.logging.log_file = _non_empty(data.get("log_file"))

    return config


def apply_env_overrides(config: Config, environ: Optional[dict[str, str]] = None) -> Config:
    """Layer AIRWAVE_* environment variables on top of file values.

    Raises:
        ConfigError: If a variable holds an unusable value
    """
    env = os.environ if environ is None else environ
    pb = config.playback
    dc = config.discovery
    fc = config.defaults.filters

    if "AIRWAVE_PLAYBACK_MODE" in env:
        pb.mode = _parse_mode(env["AIRWAVE_PLAYBACK_MODE"], "AIRWAVE_PLAYBACK_MODE")
    if "AIRWAVE_SPAWN_PLAYER" in env:
        pb.spawn_player = _parse_bool(env["AIRWAVE_SPAWN_PLAYER"])
    if "AIRWAVE_VLC_BINARY" in env:
        pb.vlc_binary = env["AIRWAVE_VLC_BINARY"]
    if "AIRWAVE_VLC_RC_HOST" in env:
        pb.rc_host = env["AIRWAVE_VLC_RC_HOST"]
    if "AIRWAVE_VLC_RC_PORT" in env:
        pb.rc_port = _parse_int(env["AIRWAVE_VLC_RC_PORT"], "AIRWAVE_VLC_RC_PORT", 1)
    if "AIRWAVE_VLC_HTTP_BASE" in env:
        pb.http_base_url = env["AIRWAVE_VLC_HTTP_BASE"].rstrip("/")
    if "AIRWAVE_VLC_HTTP_PASSWORD" in env:
        pb.http_password = env["AIRWAVE_VLC_HTTP_PASSWORD"]

    if "AIRWAVE_RADIO_BROWSER_BASE" in env:
        dc.base_url = env["AIRWAVE_RADIO_BROWSER_BASE"].rstrip("/")
    if "AIRWAVE_RADIO_BROWSER_TIMEOUT_MS" in env:
        dc.timeout_ms = _parse_int(
            env["AIRWAVE_RADIO_BROWSER_TIMEOUT_MS"], "AIRWAVE_RADIO_BROWSER_TIMEOUT_MS", 1
        )
    if "AIRWAVE_RADIO_BROWSER_MAX_RETRIES" in env:
        dc.retries = _parse_int(
            env["AIRWAVE_RADIO_BROWSER_MAX_RETRIES"], "AIRWAVE_RADIO_BROWSER_MAX_RETRIES"
        )
    if "AIRWAVE_OFFLINE" in env:
        dc.offline = _parse_bool(env["AIRWAVE_OFFLINE"])

    if "AIRWAVE_DEFAULT_SORT" in env:
        config.defaults.sort = _parse_sort(env["AIRWAVE_DEFAULT_SORT"], "AIRWAVE_DEFAULT_SORT")
    for key in ("country", "language", "tag", "codec"):
        var = f"AIRWAVE_DEFAULT_FILTER_{key.upper()}"
        if var in env:
            setattr(fc, key, _non_empty(env[var]))
    if "AIRWAVE_DEFAULT_FILTER_MIN_BITRATE" in env:
        fc.min_bitrate = _parse_int(
            env["AIRWAVE_DEFAULT_FILTER_MIN_BITRATE"], "AIRWAVE_DEFAULT_FILTER_MIN_BITRATE"
        )

    if "AIRWAVE_FAVORITES_PATH" in env:
        config.favorites.path = _non_empty(env["AIRWAVE_FAVORITES_PATH"])
    if "AIRWAVE_LOG_LEVEL" in env:
        config.logging.level = env["AIRWAVE_LOG_LEVEL"].upper()

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables (AIRWAVE_*) override TOML values.

    Raises:
        ConfigError: If a value in the file or environment is invalid
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()
    config = Config()

    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config())
            logger.info(f"Created default configuration at: {config_path}")
        except OSError as e:
            logger.warning(f"Could not create default config at {config_path}: {e}")
        return apply_env_overrides(config)

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        return apply_env_overrides(config)

    apply_toml_data(config, toml_data)
    logger.info(f"Loaded configuration from {config_path}")
    return apply_env_overrides(config)
