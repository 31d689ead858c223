"""Tests for settings loading and logging setup."""

import sys
from pathlib import Path

import structlog

from botin.config import FetchConfig, ServerConfig, Settings, load_settings
from botin.utils.logging import _filter_sensitive, setup_logging
from botin.utils.platform import get_config_dir, get_data_dir, get_resources_dir


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.bot_name == "BotinEjemplo"
        assert settings.server == ServerConfig()
        assert settings.server.path == "/api/messages"
        assert settings.fetch.timeout is None

    def test_storage_dir_under_data_dir(self, tmp_path):
        settings = Settings(data_dir=str(tmp_path))
        assert settings.get_storage_dir() == tmp_path / "attachments"

    def test_explicit_storage_dir(self, tmp_path):
        settings = Settings(storage_dir=str(tmp_path / "uploads"))
        assert settings.get_storage_dir() == tmp_path / "uploads"

    def test_resources_dir_ships_greeting_image(self):
        assert (Settings().get_resources_dir() / "hola_032.jpg").is_file()

    def test_env_nested_override(self, monkeypatch):
        monkeypatch.setenv("BOTIN_SERVER__PORT", "8080")
        assert Settings().server.port == 8080


class TestLoadSettings:
    def test_yaml_overlay(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("bot_name: Otro\nfetch:\n  timeout: 5\n")
        settings = load_settings(path)
        assert settings.bot_name == "Otro"
        assert settings.fetch == FetchConfig(timeout=5)

    def test_overrides_win_over_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("log_level: INFO\nserver:\n  bind: 127.0.0.1\n")
        settings = load_settings(path, {"log_level": "DEBUG", "server": {"port": 9000}})
        assert settings.log_level == "DEBUG"
        assert settings.server.bind == "127.0.0.1"
        assert settings.server.port == 9000

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOTIN_CONFIG_DIR", str(tmp_path))
        settings = load_settings(Path(tmp_path / "nope.yaml"))
        assert settings.bot_name == "BotinEjemplo"


class TestLogging:
    def test_data_uri_truncated(self):
        event = {"event": "reply", "url": "data:image/png;base64," + "A" * 200}
        out = _filter_sensitive(None, "info", event)
        assert out["url"] == "data:image/png;base64,..."

    def test_tokens_redacted(self):
        event = {"event": "x", "header": "Authorization: Bearer abc.def"}
        out = _filter_sensitive(None, "info", event)
        assert "abc.def" not in out["header"]

    def test_setup_logging_configures_structlog(self):
        setup_logging("WARNING")
        assert structlog.is_configured()


class TestPlatformDirs:
    def test_env_override_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BOTIN_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("BOTIN_CONFIG_DIR", str(tmp_path / "conf"))
        assert get_data_dir() == tmp_path / "data"
        assert get_config_dir() == tmp_path / "conf"

    def test_xdg_dirs_on_linux(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.delenv("BOTIN_DATA_DIR", raising=False)
        monkeypatch.delenv("BOTIN_CONFIG_DIR", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
        assert get_data_dir() == tmp_path / "share" / "botin"
        assert get_config_dir() == tmp_path / "config" / "botin"

    def test_windows_falls_back_to_appdata(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "platform", "win32")
        monkeypatch.delenv("BOTIN_DATA_DIR", raising=False)
        monkeypatch.delenv("LOCALAPPDATA", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_data_dir() == tmp_path / "AppData" / "Local" / "botin"

    def test_greeting_image_is_a_real_jpeg(self):
        data = (get_resources_dir() / "hola_032.jpg").read_bytes()
        assert data[:3] == b"\xff\xd8\xff"
        assert data[-2:] == b"\xff\xd9"
        assert len(data) > 4096
