"""Tests for spawning and stopping the player process."""

import sys
import time

import pytest

from airwave.core.config import PlaybackConfig
from airwave.core.errors import PlayerLaunchError
from airwave.domain.playback.process import PlayerLauncher, build_vlc_command

IGNORES_SIGTERM = (
    "import signal, time\n"
    "signal.signal(signal.SIGTERM, signal.SIG_IGN)\n"
    "time.sleep(30)\n"
)


class TestBuildVlcCommand:
    def test_rc_mode(self) -> None:
        config = PlaybackConfig(vlc_binary="vlc", rc_host="127.0.0.1", rc_port=5000)
        assert build_vlc_command(config) == [
            "vlc",
            "--intf",
            "rc",
            "--rc-host",
            "127.0.0.1:5000",
            "--no-video",
            "--quiet",
        ]

    def test_http_mode(self) -> None:
        config = PlaybackConfig(
            mode="http", http_base_url="http://localhost:9090", http_password="pw"
        )
        cmd = build_vlc_command(config)
        assert cmd[:3] == ["cvlc", "--intf", "http"]
        assert cmd[cmd.index("--http-host") + 1] == "localhost"
        assert cmd[cmd.index("--http-port") + 1] == "9090"
        assert cmd[cmd.index("--http-password") + 1] == "pw"


class TestPlayerProcess:
    """Tests for the spawn/terminate lifecycle."""

    def test_spawn_and_terminate(self, make_launcher) -> None:
        process = make_launcher().spawn()
        assert process.is_alive()
        assert process.returncode is None

        process.terminate(timeout=1.0)

        assert not process.is_alive()
        assert process.returncode is not None

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_kill_after_ignored_terminate(self, make_launcher) -> None:
        """A child ignoring SIGTERM is killed once the timeout passes."""
        process = make_launcher(IGNORES_SIGTERM).spawn()
        time.sleep(0.3)

        process.terminate(timeout=0.3)

        assert not process.is_alive()

    def test_terminate_after_exit_is_safe(self, make_launcher) -> None:
        process = make_launcher("pass").spawn()
        process._popen.wait(timeout=5)
        process.terminate()
        process.terminate()
        assert process.returncode == 0

    def test_context_manager(self, make_launcher) -> None:
        with make_launcher().spawn() as process:
            assert process.is_alive()
        assert not process.is_alive()

    def test_missing_binary(self) -> None:
        launcher = PlayerLauncher(PlaybackConfig(vlc_binary="airwave-missing-vlc"))
        with pytest.raises(PlayerLaunchError, match="airwave-missing-vlc"):
            launcher.spawn()
