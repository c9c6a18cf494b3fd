"""Tests for .env loading."""

import os

import pytest
from pydantic import ValidationError

from sensor_ingest.config import load_config
from sensor_ingest.exceptions import ConfigError


REQUIRED = (
    "INFLUXDB_TOKEN=secret-token\n"
    "URL_DB=http://localhost:8086\n"
    "ORG_NAME=lab\n"
    "BUCKET_NAME=sensors\n"
)


def _write_env(tmp_path, text):
    path = tmp_path / ".env"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_required_keys_with_defaults(tmp_path):
    config = load_config(_write_env(tmp_path, REQUIRED))

    assert config.influxdb_token == "secret-token"
    assert config.url_db == "http://localhost:8086"
    assert config.org_name == "lab"
    assert config.bucket_name == "sensors"
    assert config.host == "0.0.0.0"
    assert config.port == 8080
    assert config.log_dir == "logs"
    assert config.log_level == "INFO"


def test_load_optional_keys(tmp_path):
    path = _write_env(tmp_path, REQUIRED + "PORT=9090\nLOG_DIR=/var/log/ingest\nLOG_LEVEL=debug\n")

    config = load_config(path)

    assert config.port == 9090
    assert config.log_dir == "/var/log/ingest"
    assert config.log_level == "DEBUG"


def test_load_does_not_touch_environment(tmp_path, monkeypatch):
    monkeypatch.delenv("INFLUXDB_TOKEN", raising=False)

    load_config(_write_env(tmp_path, REQUIRED))

    assert "INFLUXDB_TOKEN" not in os.environ


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.env")


@pytest.mark.parametrize("key", ["INFLUXDB_TOKEN", "URL_DB", "ORG_NAME", "BUCKET_NAME"])
def test_missing_required_key_is_fatal(tmp_path, key):
    text = "".join(line + "\n" for line in REQUIRED.splitlines() if not line.startswith(key + "="))

    with pytest.raises(ConfigError, match=key):
        load_config(_write_env(tmp_path, text))


def test_blank_required_key_is_fatal(tmp_path):
    text = REQUIRED.replace("ORG_NAME=lab", "ORG_NAME=   ")

    with pytest.raises(ConfigError, match="ORG_NAME"):
        load_config(_write_env(tmp_path, text))


@pytest.mark.parametrize("extra", ["PORT=abc\n", "PORT=70000\n", "LOG_LEVEL=chatty\n"])
def test_invalid_optional_value_is_fatal(tmp_path, extra):
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(_write_env(tmp_path, REQUIRED + extra))


def test_config_is_immutable(tmp_path):
    config = load_config(_write_env(tmp_path, REQUIRED))

    with pytest.raises(ValidationError):
        config.bucket_name = "other"
