"""
Airwave - interactive mode.

Wires config, logging, favorites, discovery and playback together and
hands control to the blessed UI. The player process is released on every
exit path: normal quit, Ctrl+C, SIGTERM/SIGHUP and interpreter exit.
"""

import atexit
import signal
from typing import Optional

from loguru import logger

from airwave.core import (
    ConfigError,
    PersistenceError,
    get_favorites_path,
    get_log_file_path,
    load_config,
    safe_print,
    setup_loguru,
)
from airwave.core.config import Config
from airwave.dispatcher import initial_state
from airwave.domain.favorites import FavoritesStore
from airwave.domain.playback import PlaybackAdapter
from airwave.domain.stations import RadioBrowserCatalog, StaticCatalog, StationCatalog
from airwave.runtime import EffectRunner


def build_catalog(config: Config) -> StationCatalog:
    if config.discovery.offline:
        logger.info("Offline mode: using built-in sample stations")
        return StaticCatalog()
    return RadioBrowserCatalog(
        config.discovery.base_url,
        timeout=config.discovery.timeout_ms / 1000,
        retries=config.discovery.retries,
    )


def install_cleanup(runner: EffectRunner) -> None:
    """Make sure the player dies with us."""
    atexit.register(runner.close)

    def on_signal(signum, frame) -> None:
        # interactive_mode's finally does the cleanup
        if runner.closed:
            logger.info(f"Received signal {signum} while shutting down, ignoring")
            return
        logger.info(f"Received signal {signum}, shutting down")
        raise SystemExit(128 + signum)

    for name in ("SIGTERM", "SIGHUP"):
        signum = getattr(signal, name, None)
        if signum is not None:
            signal.signal(signum, on_signal)


def interactive_mode() -> int:
    """Run the interactive client.

    Returns:
        Process exit code
    """
    try:
        config = load_config()
    except ConfigError as e:
        safe_print(f"❌ Invalid configuration: {e}", style="red")
        return 1

    setup_loguru(get_log_file_path(config), level=config.logging.level)
    logger.info(f"Starting Airwave (playback={config.playback.mode})")

    store = FavoritesStore(get_favorites_path(config))
    try:
        favorites = store.load()
    except PersistenceError as e:
        logger.error(f"Cannot load favorites: {e}")
        safe_print(f"❌ Cannot load favorites: {e}", style="red")
        safe_print("   Fix or remove the file and start again.", style="dim")
        return 1

    runner: Optional[EffectRunner] = None
    try:
        adapter = PlaybackAdapter.from_config(config.playback)
        runner = EffectRunner(adapter, build_catalog(config), store)
        install_cleanup(runner)

        from .ui.blessed import run_interactive_ui

        run_interactive_ui(runner, initial_state(config, tuple(favorites)))
    finally:
        if runner is not None:
            runner.close()

    logger.info("Airwave exited cleanly")
    safe_print("👋 Goodbye", style="cyan")
    return 0
