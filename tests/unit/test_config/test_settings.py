"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ledbar.config.settings import (
    LoggingConfig,
    RemoteConfig,
    Settings,
    SupervisorConfig,
    load_settings,
)


class TestSettings:
    def test_default_settings(self) -> None:
        settings = Settings()
        assert settings.local.socket_path == "/tmp/waybar-led"
        assert settings.remote.transport == "websocket"
        assert settings.remote.poll_interval == 1.0
        assert settings.supervisor.backoff == 10.0
        assert settings.gate.ssid is None

    def test_log_file_defaults_next_to_socket(self) -> None:
        assert Settings().log_file == Path("/tmp/waybar-led.log")

    def test_log_file_override(self, tmp_path: Path) -> None:
        settings = Settings(logging=LoggingConfig(file=str(tmp_path / "x.log")))
        assert settings.log_file == tmp_path / "x.log"

    def test_logging_defaults(self) -> None:
        config = LoggingConfig()
        assert config.format == "[%(asctime)s] %(message)s"
        assert config.datefmt == "%Y-%m-%dT%H:%M:%S"

    def test_invalid_transport_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RemoteConfig(transport="carrier-pigeon")  # type: ignore[arg-type]

    def test_negative_backoff_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SupervisorConfig(backoff=-1)

    def test_load_settings_missing_file(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.local.socket_path == "/tmp/waybar-led"

    def test_load_settings_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "ledbar.yaml"
        path.write_text(
            "local:\n"
            "  socket_path: /tmp/other-led\n"
            "remote:\n"
            "  transport: http\n"
            "  http_base_url: http://10.0.0.5\n"
            "gate:\n"
            "  ssid: home-wifi\n"
        )
        settings = load_settings(path)
        assert settings.local.socket_path == "/tmp/other-led"
        assert settings.remote.transport == "http"
        assert settings.remote.http_base_url == "http://10.0.0.5"
        assert settings.gate.ssid == "home-wifi"
        assert settings.log_file == Path("/tmp/other-led.log")

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "ledbar.yaml"
        path.write_text("remote:\n  transport: websocket\n  timeout: 3\n")
        monkeypatch.setenv("LEDBAR_REMOTE__TRANSPORT", "http")
        settings = load_settings(path)
        assert settings.remote.transport == "http"
        assert settings.remote.timeout == 3.0
