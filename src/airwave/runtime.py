"""
Effect runner.

Executes the effects returned by `dispatcher.reduce`. Playback and
discovery each get one worker thread so the UI loop never blocks on the
network or on VLC. Outcomes come back as actions on `results`, which the
UI loop drains and feeds to `reduce`.
"""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Iterator, Optional

from loguru import logger

from airwave.actions import (
    Action,
    CommandFailed,
    Effect,
    FavoritesSaveFailed,
    LookupStations,
    PlaybackUpdated,
    RunSearch,
    SaveFavorites,
    SearchCompleted,
    SearchFailed,
    SetVolume,
    ShutdownPlayback,
    StartPlayback,
    StopPlayback,
    SwitchPlayback,
    TogglePause,
)
from airwave.core.errors import DiscoveryError, PersistenceError, PlaybackError
from airwave.domain.favorites.store import FavoritesStore
from airwave.domain.playback.adapter import PlaybackAdapter
from airwave.domain.playback.status import PlaybackStatus
from airwave.domain.stations.catalog import StationCatalog
from airwave.domain.stations.models import Station


class EffectRunner:
    """Runs effects and posts their outcomes as actions."""

    def __init__(
        self,
        adapter: PlaybackAdapter,
        catalog: StationCatalog,
        favorites: FavoritesStore,
        results: Optional["queue.Queue[Action]"] = None,
    ):
        self.adapter = adapter
        self.catalog = catalog
        self.favorites = favorites
        self.results: "queue.Queue[Action]" = results if results is not None else queue.Queue()

        self._playback = ThreadPoolExecutor(max_workers=1, thread_name_prefix="airwave-playback")
        self._discovery = ThreadPoolExecutor(max_workers=1, thread_name_prefix="airwave-discovery")
        self._latest_seq = 0
        self._seq_lock = threading.Lock()
        self._health_pending = threading.Event()
        self._closed = False
        self._close_lock = threading.Lock()

        # Station the playback worker is currently acting on
        self._station: Optional[Station] = None
        adapter.add_listener(self._on_status)

    @property
    def closed(self) -> bool:
        return self._closed

    # Plumbing -----------------------------------------------------------

    def _post(self, action: Action) -> None:
        self.results.put(action)

    def _on_status(self, status: PlaybackStatus) -> None:
        self._post(PlaybackUpdated(status, self._station))

    def _guarded(self, name: str, job: Callable[[], None]) -> Callable[[], None]:
        def run() -> None:
            try:
                job()
            except Exception as e:
                logger.exception(f"Background job '{name}' failed")
                self._post(CommandFailed(f"{name} failed: {e}"))

        return run

    def drain(self) -> Iterator[Action]:
        """Yield every action posted so far without blocking."""
        while True:
            try:
                yield self.results.get_nowait()
            except queue.Empty:
                return

    # Effects ------------------------------------------------------------

    def run(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            self.submit(effect)

    def submit(self, effect: Effect) -> None:
        """Dispatch one effect to the right worker."""
        if self._closed:
            logger.debug(f"Runner closed, ignoring {effect!r}")
            return

        if isinstance(effect, RunSearch):
            self._note_seq(effect.seq)
            self._discovery.submit(
                self._guarded("search", lambda: self._search(effect))
            )
        elif isinstance(effect, LookupStations):
            self._note_seq(effect.seq)
            self._discovery.submit(
                self._guarded("favorites lookup", lambda: self._lookup(effect))
            )
        elif isinstance(effect, (StartPlayback, SwitchPlayback)):
            self._playback.submit(self._guarded("play", lambda: self._play(effect)))
        elif isinstance(effect, StopPlayback):
            self._playback.submit(self._guarded("stop", self.adapter.stop))
        elif isinstance(effect, TogglePause):
            self._playback.submit(self._guarded("pause", self.adapter.pause_toggle))
        elif isinstance(effect, SetVolume):
            self._playback.submit(
                self._guarded("volume", lambda: self.adapter.set_volume(effect.level))
            )
        elif isinstance(effect, SaveFavorites):
            self._save_favorites(effect)
        elif isinstance(effect, ShutdownPlayback):
            self.close()
        else:
            raise TypeError(f"Unhandled effect: {effect!r}")

    def _note_seq(self, seq: int) -> None:
        with self._seq_lock:
            self._latest_seq = max(self._latest_seq, seq)

    def _superseded(self, seq: int) -> bool:
        with self._seq_lock:
            return seq < self._latest_seq

    def _search(self, effect: RunSearch) -> None:
        if self._superseded(effect.seq):
            logger.debug(f"Skipping superseded search seq={effect.seq}")
            return
        try:
            stations = self.catalog.search(effect.query)
        except DiscoveryError as e:
            logger.warning(f"Search failed: {e}")
            self._post(SearchFailed(effect.seq, str(e)))
            return
        self._post(SearchCompleted(effect.seq, tuple(stations)))

    def _lookup(self, effect: LookupStations) -> None:
        if self._superseded(effect.seq):
            logger.debug(f"Skipping superseded lookup seq={effect.seq}")
            return
        try:
            stations = self.catalog.lookup(effect.ids)
        except DiscoveryError as e:
            logger.warning(f"Favorites lookup failed: {e}")
            self._post(SearchFailed(effect.seq, str(e)))
            return
        self._post(SearchCompleted(effect.seq, tuple(stations)))

    def _play(self, effect: StartPlayback | SwitchPlayback) -> None:
        previous = self._station
        self._station = effect.station
        try:
            if isinstance(effect, SwitchPlayback):
                self.adapter.switch(effect.station.url)
            else:
                self.adapter.play(effect.station.url)
        except PlaybackError as e:
            # URL rejected before anything was sent
            self._station = previous
            self._post(CommandFailed(f"Cannot play {effect.station.name}: {e}"))

    def _save_favorites(self, effect: SaveFavorites) -> None:
        try:
            self.favorites.save(effect.ids)
        except PersistenceError as e:
            logger.error(f"Favorites save failed: {e}")
            self._post(FavoritesSaveFailed(str(e)))

    def poll(self) -> None:
        """Schedule a player liveness check unless one is already queued."""
        if self._closed or self._health_pending.is_set():
            return
        self._health_pending.set()

        def check() -> None:
            try:
                self.adapter.check_health()
            finally:
                self._health_pending.clear()

        self._playback.submit(self._guarded("health check", check))

    # Shutdown -----------------------------------------------------------

    def close(self) -> None:
        """Finish queued playback work, then shut the player down. Idempotent."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        logger.info("Shutting down effect runner")
        self._discovery.shutdown(wait=False, cancel_futures=True)
        self._playback.shutdown(wait=True)
        self.adapter.shutdown()
