"""
Playback adapter: a state machine driving an external VLC process.

States: STOPPED, LOADING, PLAYING, PAUSED, ERROR.

Operations never raise for transport or process failures; they move the
adapter to ERROR and return the resulting status. The only exception is
an unusable stream URL, which is rejected before any state change.

All operations hold one lock, so a play issued while another is loading
waits for it to finish.
"""

import threading
import time
from typing import Callable, Optional

from loguru import logger

from airwave.core.config import PlaybackConfig
from airwave.core.errors import ConnectionLostError, PlaybackError, TransportError

from .process import PlayerLauncher, PlayerProcess
from .status import STOPPED, PlaybackState, PlaybackStatus
from .transports import HttpTransport, RcSocketTransport, Transport

StatusListener = Callable[[PlaybackStatus], None]

READY_POLL_INTERVAL = 0.1


def validate_stream_url(url: str) -> str:
    """Reject URLs that would corrupt a line-oriented control channel.

    Raises:
        PlaybackError: If the URL is empty, padded with whitespace or
            contains control characters
    """
    if not url or url != url.strip() or any(ord(c) < 32 or ord(c) == 127 for c in url):
        raise PlaybackError("invalid stream URL characters detected")
    return url


class PlaybackAdapter:
    """Owns the playback session: transport plus optional player process."""

    def __init__(
        self,
        transport: Transport,
        launcher: Optional[PlayerLauncher] = None,
        ready_timeout: float = 5.0,
        shutdown_timeout: float = 1.0,
        volume: Optional[int] = None,
        poll_interval: float = READY_POLL_INTERVAL,
    ):
        self.transport = transport
        self.launcher = launcher
        self.ready_timeout = ready_timeout
        self.shutdown_timeout = shutdown_timeout
        self.poll_interval = poll_interval

        self._lock = threading.RLock()
        self._status = STOPPED
        self._process: Optional[PlayerProcess] = None
        self._session_open = False
        self._current_url: Optional[str] = None
        self._volume = volume
        self._listeners: list[StatusListener] = []

    @classmethod
    def from_config(cls, config: PlaybackConfig) -> "PlaybackAdapter":
        """Build an adapter with the transport and launcher the config asks for."""
        transport: Transport
        if config.mode == "http":
            transport = HttpTransport(
                config.http_base_url, config.http_password, config.request_timeout
            )
        else:
            transport = RcSocketTransport(
                config.rc_host, config.rc_port, config.request_timeout
            )
        launcher = PlayerLauncher(config) if config.spawn_player else None
        return cls(
            transport,
            launcher=launcher,
            ready_timeout=config.ready_timeout,
            shutdown_timeout=config.shutdown_timeout,
            volume=config.volume,
        )

    # State --------------------------------------------------------------

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def current_url(self) -> Optional[str]:
        return self._current_url

    @property
    def process(self) -> Optional[PlayerProcess]:
        return self._process

    @property
    def has_session(self) -> bool:
        return self._session_open

    def add_listener(self, listener: StatusListener) -> None:
        """Register a callback invoked on every state transition."""
        self._listeners.append(listener)

    def _set_status(self, status: PlaybackStatus) -> PlaybackStatus:
        if status != self._status:
            if status.state is PlaybackState.ERROR:
                logger.error(f"Playback error: {status.message}")
            else:
                logger.info(f"Playback {self._status.state.value} -> {status.state.value}")
        self._status = status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Playback status listener failed")
        return status

    def _fail(self, error: Exception) -> PlaybackStatus:
        return self._set_status(PlaybackStatus.error(str(error)))

    # Session ------------------------------------------------------------

    def _process_alive(self) -> bool:
        return self._process is not None and self._process.is_alive()

    def _ensure_session(self) -> None:
        """Spawn (if configured) and connect, waiting for VLC to answer.

        Raises:
            PlaybackError: If the player cannot be started or never answers
        """
        if self._session_open and (self.launcher is None or self._process_alive()):
            return

        self._teardown_session()
        try:
            if self.launcher is not None:
                self._process = self.launcher.spawn()
            self._connect_with_retry()
        except PlaybackError:
            self._teardown_session()
            raise

        self._session_open = True
        if self._volume is not None:
            self.transport.set_volume(self._volume)

    def _connect_with_retry(self) -> None:
        deadline = time.monotonic() + self.ready_timeout
        while True:
            try:
                self.transport.connect()
                return
            except TransportError as e:
                if self._process is not None and not self._process.is_alive():
                    raise PlaybackError(
                        f"player exited during startup (code {self._process.returncode})"
                    ) from e
                if time.monotonic() >= deadline:
                    raise TransportError(
                        f"player did not become ready within {self.ready_timeout:g}s: {e}"
                    ) from e
            time.sleep(self.poll_interval)

    def _teardown_session(self) -> None:
        self.transport.close()
        self._session_open = False
        if self._process is not None:
            self._process.terminate(self.shutdown_timeout)
            self._process = None

    # Operations ---------------------------------------------------------

    def play(self, url: str) -> PlaybackStatus:
        """Start playing `url`, creating the session if needed.

        From PLAYING or PAUSED this is a switch.

        Raises:
            PlaybackError: If the URL is rejected by validate_stream_url
        """
        validate_stream_url(url)
        with self._lock:
            if self._status.is_active:
                return self.switch(url)

            self._set_status(PlaybackStatus(PlaybackState.LOADING))
            try:
                self._ensure_session()
                self.transport.add(url)
            except PlaybackError as e:
                self._current_url = None
                return self._fail(e)

            self._current_url = url
            return self._set_status(PlaybackStatus(PlaybackState.PLAYING))

    def switch(self, url: str) -> PlaybackStatus:
        """Replace the current stream: clear, then add.

        Raises:
            PlaybackError: If the URL is rejected by validate_stream_url
        """
        validate_stream_url(url)
        with self._lock:
            if not self._status.is_active:
                return self.play(url)

            self._set_status(PlaybackStatus(PlaybackState.LOADING))
            try:
                self.transport.clear()
            except TransportError as e:
                return self._fail(e)

            # Playlist is empty from here on
            self._current_url = None
            try:
                self.transport.add(url)
            except TransportError as e:
                return self._fail(e)

            self._current_url = url
            return self._set_status(PlaybackStatus(PlaybackState.PLAYING))

    def pause_toggle(self) -> PlaybackStatus:
        """PLAYING <-> PAUSED. No-op in any other state."""
        with self._lock:
            if not self._status.is_active:
                return self._status

            target = (
                PlaybackState.PAUSED
                if self._status.state is PlaybackState.PLAYING
                else PlaybackState.PLAYING
            )
            try:
                if target is PlaybackState.PAUSED:
                    self.transport.pause()
                else:
                    self.transport.resume()
            except TransportError as e:
                return self._fail(e)
            return self._set_status(PlaybackStatus(target))

    def stop(self) -> PlaybackStatus:
        """Stop playback.

        Ends in STOPPED unless the player is still reachable and refuses to
        stop, which is an ERROR. A player or connection that is already
        gone counts as stopped.
        """
        with self._lock:
            if self._status.state is PlaybackState.STOPPED:
                return self._status

            if self._session_open:
                try:
                    self.transport.stop()
                except ConnectionLostError as e:
                    logger.warning(f"Stop failed, dropping session: {e}")
                    self._teardown_session()
                except TransportError as e:
                    if self.launcher is None or self._process_alive():
                        return self._fail(e)
                    logger.debug(f"Stop ignored, player already gone: {e}")
                    self._teardown_session()

            self._current_url = None
            return self._set_status(STOPPED)

    def set_volume(self, percent: int) -> PlaybackStatus:
        """Set volume 0-100. Applied now if connected, else on next session."""
        percent = max(0, min(100, percent))
        with self._lock:
            self._volume = percent
            if not self._session_open:
                return self._status
            try:
                self.transport.set_volume(percent)
            except TransportError as e:
                if self._status.state in (
                    PlaybackState.LOADING,
                    PlaybackState.PLAYING,
                    PlaybackState.PAUSED,
                ):
                    return self._fail(e)
                logger.warning(f"Volume change failed: {e}")
            return self._status

    def check_health(self) -> PlaybackStatus:
        """Detect a player process that died underneath us."""
        with self._lock:
            if self._process is None or self._process.is_alive():
                return self._status

            code = self._process.returncode
            self._teardown_session()
            if self._status.state in (
                PlaybackState.LOADING,
                PlaybackState.PLAYING,
                PlaybackState.PAUSED,
            ):
                self._current_url = None
                return self._set_status(
                    PlaybackStatus.error(f"player exited unexpectedly (code {code})")
                )
            logger.info(f"Idle player exited (code {code})")
            return self._status

    def shutdown(self) -> None:
        """Quit VLC and release everything. Idempotent."""
        with self._lock:
            quit_sent = False
            if self._session_open:
                try:
                    self.transport.quit()
                    quit_sent = self.transport.exits_on_quit
                except TransportError as e:
                    logger.debug(f"Quit command failed during shutdown: {e}")
            if quit_sent and self._process is not None:
                self._process.wait_or_kill(self.shutdown_timeout)
                self._process = None
            self._teardown_session()
            self._current_url = None
            if self._status != STOPPED:
                self._set_status(STOPPED)
            logger.info("Playback shut down")
