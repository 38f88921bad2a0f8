"""Tests for command-line flag handling."""

import pytest

from airwave.cli import apply_args, build_parser
from airwave.core.config import Config, apply_env_overrides


class TestCli:
    def test_no_flags_sets_nothing(self) -> None:
        env: dict[str, str] = {}
        apply_args(build_parser().parse_args([]), env)
        assert env == {}

    def test_flags_become_environment(self) -> None:
        env: dict[str, str] = {}
        args = build_parser().parse_args(
            ["--mode", "http", "--offline", "--config", "/tmp/a.toml", "--log-level", "debug"]
        )

        apply_args(args, env)

        assert env == {
            "AIRWAVE_PLAYBACK_MODE": "http",
            "AIRWAVE_OFFLINE": "1",
            "AIRWAVE_CONFIG": "/tmp/a.toml",
            "AIRWAVE_LOG_LEVEL": "DEBUG",
        }

    def test_flags_override_config(self) -> None:
        """Flags flow through the normal environment override layer."""
        env: dict[str, str] = {}
        apply_args(build_parser().parse_args(["--mode", "http", "--offline"]), env)

        config = apply_env_overrides(Config(), env)

        assert config.playback.mode == "http"
        assert config.discovery.offline is True

    def test_invalid_mode_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--mode", "telnet"])
