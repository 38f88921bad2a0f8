"""
VLC control transports.

Both transports expose the same command set, so the adapter never knows
which VLC interface it is talking to:

- RcSocketTransport: VLC's line-oriented "rc" interface over TCP
- HttpTransport: VLC's HTTP interface (requests/status.json)
"""

import socket
from typing import Optional, Protocol

import requests
from loguru import logger

from airwave.core.errors import ConnectionLostError, TransportError

RC_PROMPT = b"> "
RC_REJECTION_PREFIXES = ("unknown command", "error")
RC_READ_CHUNK = 4096

# VLC's volume scale: 256 is 100%
VLC_VOLUME_FULL = 256


def percent_to_vlc_volume(percent: int) -> int:
    """Map 0-100 percent to VLC's 0-256 scale, rounding to nearest."""
    percent = max(0, min(100, percent))
    return (percent * VLC_VOLUME_FULL + 50) // 100


class Transport(Protocol):
    """Command channel to a running VLC instance.

    `exits_on_quit` says whether quit() makes VLC exit by itself.
    """

    exits_on_quit: bool

    def connect(self) -> None:
        ...

    def clear(self) -> None:
        ...

    def add(self, url: str) -> None:
        ...

    def stop(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...

    def set_volume(self, percent: int) -> None:
        ...

    def quit(self) -> None:
        ...

    def close(self) -> None:
        ...


class RcSocketTransport:
    """VLC rc interface over one persistent TCP connection.

    Each command is a newline-terminated line; VLC answers with zero or
    more lines followed by the "> " prompt. On an I/O failure the
    connection is re-opened once and the command retried.
    """

    exits_on_quit = True

    def __init__(self, host: str, port: int, timeout: float = 2.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock: Optional[socket.socket] = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        """Open the connection and consume the greeting.

        Raises:
            TransportError: If VLC is not listening
        """
        self.close()
        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise ConnectionLostError(
                f"cannot connect to VLC rc interface at {self.host}:{self.port}: {e}"
            ) from e

        self._sock = sock
        try:
            self._read_until_prompt()
        except OSError:
            # Some builds send no greeting until the first command
            logger.debug("No rc greeting received, continuing")
        logger.debug(f"Connected to VLC rc at {self.host}:{self.port}")

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None

    def _read_until_prompt(self) -> str:
        assert self._sock is not None
        buffer = b""
        while not buffer.endswith(RC_PROMPT):
            chunk = self._sock.recv(RC_READ_CHUNK)
            if not chunk:
                raise ConnectionResetError("VLC closed the rc connection")
            buffer += chunk
        return buffer[: -len(RC_PROMPT)].decode("utf-8", errors="replace")

    def _exchange(self, line: str) -> str:
        if self._sock is None:
            self.connect()
        assert self._sock is not None
        self._sock.sendall(f"{line}\n".encode("utf-8"))
        return self._read_until_prompt()

    def send(self, line: str) -> str:
        """Send one command and return VLC's response text.

        Raises:
            TransportError: On I/O failure after one reconnect, or if VLC
                rejects the command
        """
        logger.debug(f"rc> {line}")
        try:
            response = self._exchange(line)
        except (OSError, TransportError) as first:
            logger.warning(f"rc command '{line}' failed ({first}), reconnecting")
            self.close()
            try:
                response = self._exchange(line)
            except (OSError, TransportError) as e:
                self.close()
                raise ConnectionLostError(f"VLC rc command '{line}' failed: {e}") from e

        for response_line in response.splitlines():
            text = response_line.strip().lower()
            if text.startswith(RC_REJECTION_PREFIXES):
                raise TransportError(f"VLC rejected '{line}': {response_line.strip()}")
        return response

    def clear(self) -> None:
        self.send("clear")

    def add(self, url: str) -> None:
        self.send(f"add {url}")

    def stop(self) -> None:
        self.send("stop")

    def pause(self) -> None:
        self.send("pause")

    def resume(self) -> None:
        # rc "pause" toggles; "play" only ever resumes
        self.send("play")

    def set_volume(self, percent: int) -> None:
        self.send(f"volume {percent_to_vlc_volume(percent)}")

    def quit(self) -> None:
        """Ask VLC to exit. VLC closes the socket, so no prompt is awaited."""
        if self._sock is None:
            return
        logger.debug("rc> quit")
        try:
            self._sock.sendall(b"quit\n")
        except OSError as e:
            raise ConnectionLostError(f"VLC rc command 'quit' failed: {e}") from e
        finally:
            self.close()


class HttpTransport:
    """VLC HTTP interface: one GET per command, no retries."""

    STATUS_PATH = "/requests/status.json"
    exits_on_quit = False

    def __init__(self, base_url: str, password: str, timeout: float = 2.0):
        self.base_url = base_url.rstrip("/")
        self.password = password
        self.timeout = timeout

    def _request(self, params: Optional[dict[str, str]] = None) -> dict:
        url = f"{self.base_url}{self.STATUS_PATH}"
        command = (params or {}).get("command", "status")
        logger.debug(f"http> {command} {params or {}}")
        try:
            response = requests.get(
                url,
                params=params,
                auth=("", self.password),
                timeout=self.timeout,
            )
        except requests.ConnectionError as e:
            raise ConnectionLostError(f"VLC http command '{command}' failed: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"VLC http command '{command}' failed: {e}") from e

        if response.status_code == 401:
            raise TransportError(
                "VLC http interface rejected the password "
                "(check playback.http_password)"
            )
        if response.status_code != 200:
            raise TransportError(
                f"VLC http command '{command}' returned HTTP {response.status_code}"
            )
        try:
            return response.json()
        except ValueError:
            # Commands succeed even when the status body is not JSON
            return {}

    def connect(self) -> None:
        self._request()
        logger.debug(f"Connected to VLC http at {self.base_url}")

    def clear(self) -> None:
        self._request({"command": "pl_empty"})

    def add(self, url: str) -> None:
        self._request({"command": "in_play", "input": url})

    def stop(self) -> None:
        self._request({"command": "pl_stop"})

    def pause(self) -> None:
        self._request({"command": "pl_forcepause"})

    def resume(self) -> None:
        self._request({"command": "pl_forceresume"})

    def set_volume(self, percent: int) -> None:
        self._request({"command": "volume", "val": str(percent_to_vlc_volume(percent))})

    def quit(self) -> None:
        # No quit over HTTP; the launcher ends the process
        self._request({"command": "pl_stop"})

    def close(self) -> None:
        pass
