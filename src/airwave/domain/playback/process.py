"""
VLC process lifecycle.

Spawns VLC with a control interface enabled and guarantees it can be
stopped again: after a quit command it gets a bounded wait to exit by
itself, then terminate, another bounded wait, then kill.
"""

import subprocess
from typing import Optional, Sequence
from urllib.parse import urlparse

from loguru import logger

from airwave.core.config import PlaybackConfig
from airwave.core.errors import PlayerLaunchError


def build_vlc_command(config: PlaybackConfig) -> list[str]:
    """Build the VLC argv for the configured control interface."""
    cmd = [config.vlc_binary]
    if config.mode == "http":
        host, port = _split_http_base(config.http_base_url)
        cmd += [
            "--intf",
            "http",
            "--http-host",
            host,
            "--http-port",
            str(port),
            "--http-password",
            config.http_password,
        ]
    else:
        cmd += ["--intf", "rc", "--rc-host", f"{config.rc_host}:{config.rc_port}"]
    cmd += ["--no-video", "--quiet"]
    return cmd


def _split_http_base(base_url: str) -> tuple[str, int]:
    parsed = urlparse(base_url)
    return parsed.hostname or "127.0.0.1", parsed.port or 8080


class PlayerProcess:
    """Handle to a running player process."""

    def __init__(self, popen: subprocess.Popen):
        self._popen = popen

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._popen.poll()

    def is_alive(self) -> bool:
        return self._popen.poll() is None

    def terminate(self, timeout: float = 1.0) -> None:
        """Stop the process, escalating to kill after `timeout` seconds.

        Safe to call on a process that already exited.
        """
        if not self.is_alive():
            self._popen.wait()
            return

        logger.debug(f"Terminating player pid={self.pid}")
        try:
            self._popen.terminate()
            self._popen.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Player pid={self.pid} ignored terminate, killing")
            self._popen.kill()
            self._popen.wait(timeout=timeout)
        except OSError as e:
            # Already reaped
            logger.debug(f"Terminate failed for pid={self.pid}: {e}")

    def wait_or_kill(self, timeout: float = 1.0) -> None:
        """Give the process `timeout` seconds to exit on its own, then terminate it."""
        try:
            self._popen.wait(timeout=timeout)
            logger.debug(f"Player pid={self.pid} exited (code {self._popen.returncode})")
        except subprocess.TimeoutExpired:
            logger.warning(f"Player pid={self.pid} still running after quit, terminating")
            self.terminate(timeout)

    def __enter__(self) -> "PlayerProcess":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.terminate()


class PlayerLauncher:
    """Starts the external player.

    `command` overrides the argv built from config (used by tests).
    """

    def __init__(self, config: PlaybackConfig, command: Optional[Sequence[str]] = None):
        self.config = config
        self.command = list(command) if command else build_vlc_command(config)

    def spawn(self) -> PlayerProcess:
        """Start the player with stdio detached from the terminal.

        Raises:
            PlayerLaunchError: If the executable is missing or cannot start
        """
        logger.info(f"Starting player: {' '.join(self.command)}")
        try:
            popen = subprocess.Popen(
                self.command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            raise PlayerLaunchError(
                f"'{self.command[0]}' not found on PATH; install VLC"
            ) from e
        except (subprocess.SubprocessError, OSError) as e:
            raise PlayerLaunchError(f"failed to start '{self.command[0]}': {e}") from e

        logger.info(f"Player started (pid={popen.pid})")
        return PlayerProcess(popen)
