"""Tests for configuration loading module."""

import json
from pathlib import Path

import pytest

from paybadge.config import (
    ENV_VARS,
    ConfigError,
    load_config,
    load_from_env,
    load_from_json,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without PAYBADGE_* variables set."""
    for env_key, _ in ENV_VARS:
        monkeypatch.delenv(env_key, raising=False)


class TestLoadFromJson:
    """Tests for load_from_json function."""

    def test_valid_config(self, tmp_path: Path):
        """Load a valid config file with all fields specified."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "host": "127.0.0.1",
            "port": 8080,
            "exchange_rate_url": "https://rates.example.com",
            "request_timeout": 5,
            "cache_max_age": 600,
        }))

        values = load_from_json(str(config_file))

        assert values["host"] == "127.0.0.1"
        assert values["port"] == 8080
        assert values["cache_max_age"] == 600

    def test_unknown_keys_ignored(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"port": 8080, "theme": "dark"}))

        assert load_from_json(str(config_file)) == {"port": 8080}

    def test_missing_file_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file doesn't exist."""
        with pytest.raises(ConfigError, match="Config file not found"):
            load_from_json(str(tmp_path / "nonexistent.json"))

    def test_malformed_json_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file contains invalid JSON."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{ invalid json }")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_from_json(str(config_file))

    def test_non_object_raises_error(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text("[1, 2, 3]")

        with pytest.raises(ConfigError, match="must contain a JSON object"):
            load_from_json(str(config_file))


class TestLoadFromEnv:
    """Tests for load_from_env function."""

    def test_no_variables(self):
        assert load_from_env() == {}

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("PAYBADGE_HOST", "127.0.0.1")
        monkeypatch.setenv("PAYBADGE_EXCHANGE_RATE_URL", "https://rates.test")

        assert load_from_env() == {
            "host": "127.0.0.1",
            "exchange_rate_url": "https://rates.test",
        }

    def test_port_variable(self, monkeypatch):
        """PORT is honored for platform-assigned ports."""
        monkeypatch.setenv("PORT", "8000")

        assert load_from_env() == {"port": "8000"}

    def test_paybadge_port_wins(self, monkeypatch):
        monkeypatch.setenv("PORT", "8000")
        monkeypatch.setenv("PAYBADGE_PORT", "9000")

        assert load_from_env()["port"] == "9000"

    def test_empty_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("PAYBADGE_HOST", "")

        assert load_from_env() == {}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults(self):
        config = load_config()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.request_timeout == 10.0
        assert config.cache_max_age == 3600

    def test_env_values_coerced(self, monkeypatch):
        monkeypatch.setenv("PAYBADGE_PORT", "8080")
        monkeypatch.setenv("PAYBADGE_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv("PAYBADGE_CACHE_MAX_AGE", "60")

        config = load_config()

        assert config.port == 8080
        assert config.request_timeout == 2.5
        assert config.cache_max_age == 60

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch):
        """Environment variables take priority over the config file."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"host": "127.0.0.1", "port": 8080}))
        monkeypatch.setenv("PAYBADGE_PORT", "9090")

        config = load_config(str(config_file))

        assert config.host == "127.0.0.1"
        assert config.port == 9090

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("PAYBADGE_PORT", "abc")

        with pytest.raises(ConfigError, match="Invalid value for 'port' in environment"):
            load_config()

    def test_invalid_file_value(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"cache_max_age": True}))

        with pytest.raises(ConfigError, match="cache_max_age"):
            load_config(str(config_file))

    def test_port_out_of_range(self, monkeypatch):
        monkeypatch.setenv("PAYBADGE_PORT", "70000")

        with pytest.raises(ConfigError, match="Port out of range"):
            load_config()

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(str(tmp_path / "missing.json"))
