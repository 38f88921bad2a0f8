"""Shared test fixtures."""

import pytest

from airwave.core.errors import ConnectionLostError, TransportError


class FakeTransport:
    """In-memory transport recording every command.

    Commands named in `fail_on` raise TransportError instead, or
    ConnectionLostError when also listed in `lost_on`.
    """

    exits_on_quit = True

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.lost_on: set[str] = set()

    def _record(self, name: str, *args) -> None:
        if name in self.fail_on:
            if name in self.lost_on:
                raise ConnectionLostError(f"{name} failed, connection lost")
            raise TransportError(f"{name} failed")
        self.calls.append((name, *args))

    def connect(self) -> None:
        self._record("connect")

    def clear(self) -> None:
        self._record("clear")

    def add(self, url: str) -> None:
        self._record("add", url)

    def stop(self) -> None:
        self._record("stop")

    def pause(self) -> None:
        self._record("pause")

    def resume(self) -> None:
        self._record("resume")

    def set_volume(self, percent: int) -> None:
        self._record("set_volume", percent)

    def quit(self) -> None:
        self._record("quit")

    def close(self) -> None:
        self.calls.append(("close",))

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
