"""Fixtures for playback tests: a fake VLC rc server and child-process launchers."""

import socket
import sys
import threading
import time
from typing import Callable, Optional

import pytest

from airwave.core.config import PlaybackConfig
from airwave.domain.playback.process import PlayerLauncher, PlayerProcess

GREETING = b"VLC media player 3.0.18 Vetinari\nCommand Line Interface initialized. Type `help' for help.\n> "


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll until predicate() is true or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class FakeRcServer:
    """A TCP server speaking enough of VLC's rc protocol for the adapter.

    Every received line is recorded. Commands whose first word is in
    `reject` get an error reply. The first `hang_ups` connections are
    dropped after reading one command, without replying.
    """

    def __init__(self, hang_ups: int = 0):
        self.lines: list[str] = []
        self.reject: set[str] = set()
        self.connections = 0
        self.hang_ups = hang_ups
        self._running = True
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen()
        self._listener.settimeout(0.05)
        self.host, self.port = self._listener.getsockname()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while self._running:
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            self.connections += 1
            threading.Thread(
                target=self._handle,
                args=(conn, self.connections <= self.hang_ups),
                daemon=True,
            ).start()

    def _handle(self, conn: socket.socket, hang_up: bool) -> None:
        conn.settimeout(0.05)
        buffer = b""
        with conn:
            conn.sendall(GREETING)
            while self._running:
                try:
                    chunk = conn.recv(4096)
                except socket.timeout:
                    continue
                except OSError:
                    return
                if not chunk:
                    return
                buffer += chunk
                while b"\n" in buffer:
                    raw, buffer = buffer.split(b"\n", 1)
                    line = raw.decode().strip()
                    if hang_up:
                        return
                    self.lines.append(line)
                    if line == "quit":
                        return
                    if line.split(" ", 1)[0] in self.reject:
                        conn.sendall(b"Error: command rejected\n> ")
                    else:
                        conn.sendall(b"> ")

    def close(self) -> None:
        self._running = False
        self._listener.close()
        self._thread.join(timeout=1)


class RecordingLauncher(PlayerLauncher):
    """Launcher running an arbitrary command and remembering what it spawned."""

    def __init__(self, command: list[str]):
        super().__init__(PlaybackConfig(), command=command)
        self.spawned: list[PlayerProcess] = []

    def spawn(self) -> PlayerProcess:
        process = super().spawn()
        self.spawned.append(process)
        return process


SLEEPER = [sys.executable, "-c", "import time; time.sleep(30)"]


@pytest.fixture
def wait() -> Callable[..., bool]:
    return wait_for


@pytest.fixture
def rc_server():
    server = FakeRcServer()
    yield server
    server.close()


@pytest.fixture
def make_rc_server():
    """Factory for servers with non-default behaviour."""
    servers: list[FakeRcServer] = []

    def factory(**kwargs) -> FakeRcServer:
        server = FakeRcServer(**kwargs)
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.close()


@pytest.fixture
def unused_port() -> int:
    """A local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def make_launcher():
    """Factory for launchers running a Python child; children are reaped on teardown."""
    launchers: list[RecordingLauncher] = []

    def factory(code: Optional[str] = None) -> RecordingLauncher:
        command = SLEEPER if code is None else [sys.executable, "-c", code]
        launcher = RecordingLauncher(command)
        launchers.append(launcher)
        return launcher

    yield factory
    for launcher in launchers:
        for process in launcher.spawned:
            process.terminate(0.5)
