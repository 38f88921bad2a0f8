"""Tests for configuration loading and environment overrides."""

import os
from pathlib import Path

import pytest

from airwave.core.config import (
    Config,
    apply_env_overrides,
    apply_toml_data,
    get_config_path,
    get_favorites_path,
    load_config,
)
from airwave.core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Strip AIRWAVE_* variables and point XDG dirs at tmp_path."""
    for name in list(os.environ):
        if name.startswith("AIRWAVE_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path


class TestLoadConfig:
    """Tests for reading config.toml."""

    def test_creates_default_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config" / "airwave" / "config.toml"

        config = load_config(path)

        assert path.exists()
        assert "[playback]" in path.read_text()
        assert config == Config()

    def test_default_file_parses_to_defaults(self, tmp_path: Path) -> None:
        """The generated file loads back to the built-in defaults."""
        path = tmp_path / "config.toml"
        load_config(path)
        assert load_config(path) == Config()

    def test_reads_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            """
[playback]
mode = "HTTP"
http_base_url = "http://localhost:9000/"
volume = 150

[discovery]
timeout_ms = 1500
offline = true

[defaults]
sort = "clicks"

[defaults.filters]
country = "US"
min_bitrate = 128
"""
        )

        config = load_config(path)

        assert config.playback.mode == "http"
        assert config.playback.http_base_url == "http://localhost:9000"
        assert config.playback.volume == 100
        assert config.discovery.timeout_ms == 1500
        assert config.discovery.offline is True
        assert config.defaults.sort == "clicks"
        assert config.defaults.filters.country == "US"
        assert config.defaults.filters.min_bitrate == 128

    def test_invalid_toml_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[playback\nmode = ")
        assert load_config(path) == Config()

    def test_invalid_mode_is_error(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[playback]\nmode = "telnet"\n')
        with pytest.raises(ConfigError, match="telnet"):
            load_config(path)

    def test_dotenv_in_config_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AIRWAVE_VLC_RC_PORT", raising=False)
        env_dir = tmp_path / "config" / "airwave"
        env_dir.mkdir(parents=True)
        (env_dir / ".env").write_text("AIRWAVE_VLC_RC_PORT=5555\n")
        path = tmp_path / "config.toml"
        path.write_text("")

        assert load_config(path).playback.rc_port == 5555


class TestEnvOverrides:
    """Tests for AIRWAVE_* variables."""

    def test_env_beats_file(self) -> None:
        config = apply_toml_data(Config(), {"playback": {"mode": "rc", "rc_port": 4000}})
        apply_env_overrides(
            config, {"AIRWAVE_PLAYBACK_MODE": "http", "AIRWAVE_VLC_RC_PORT": "4999"}
        )
        assert config.playback.mode == "http"
        assert config.playback.rc_port == 4999

    def test_discovery_variables(self) -> None:
        config = apply_env_overrides(
            Config(),
            {
                "AIRWAVE_RADIO_BROWSER_BASE": "https://rb.example/",
                "AIRWAVE_RADIO_BROWSER_TIMEOUT_MS": "900",
                "AIRWAVE_RADIO_BROWSER_MAX_RETRIES": "0",
                "AIRWAVE_OFFLINE": "yes",
            },
        )
        assert config.discovery.base_url == "https://rb.example"
        assert config.discovery.timeout_ms == 900
        assert config.discovery.retries == 0
        assert config.discovery.offline is True

    def test_default_filters(self) -> None:
        config = apply_env_overrides(
            Config(),
            {"AIRWAVE_DEFAULT_FILTER_TAG": "jazz", "AIRWAVE_DEFAULT_SORT": "NAME"},
        )
        assert config.defaults.filters.tag == "jazz"
        assert config.defaults.sort == "name"

    @pytest.mark.parametrize(
        "env",
        [
            {"AIRWAVE_PLAYBACK_MODE": "udp"},
            {"AIRWAVE_VLC_RC_PORT": "abc"},
            {"AIRWAVE_VLC_RC_PORT": "0"},
            {"AIRWAVE_DEFAULT_SORT": "loudness"},
        ],
    )
    def test_bad_values(self, env: dict[str, str]) -> None:
        with pytest.raises(ConfigError):
            apply_env_overrides(Config(), env)


class TestPaths:
    def test_explicit_config_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("AIRWAVE_CONFIG", str(tmp_path / "custom.toml"))
        assert get_config_path() == tmp_path / "custom.toml"

    def test_favorites_default_in_data_dir(self, tmp_path: Path) -> None:
        assert get_favorites_path(Config()) == tmp_path / "data" / "airwave" / "favorites.json"

    def test_favorites_configured(self, tmp_path: Path) -> None:
        config = Config()
        config.favorites.path = str(tmp_path / "favs.json")
        assert get_favorites_path(config) == tmp_path / "favs.json"
