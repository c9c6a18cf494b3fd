"""
Configuration
=============

Loads the service settings from a local .env file.

REQUIRED KEYS:
    INFLUXDB_TOKEN: Access token for the InfluxDB API
    URL_DB:         InfluxDB endpoint (e.g. http://localhost:8086)
    ORG_NAME:       InfluxDB organization
    BUCKET_NAME:    Bucket the measurements are written to

OPTIONAL KEYS:
    HOST:      Interface to listen on (default: 0.0.0.0)
    PORT:      TCP port to listen on (default: 8080)
    LOG_DIR:   Directory for the per-start log files (default: logs)
    LOG_LEVEL: Logging level name (default: INFO)

The file is read with python-dotenv's `dotenv_values`, so nothing leaks into
os.environ. A missing file or a missing/blank required key is fatal.
"""

import logging
from pathlib import Path
from typing import Union

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sensor_ingest.exceptions import ConfigError


DEFAULT_ENV_FILE = ".env"

# .env key -> Config field
REQUIRED_KEYS = {
    "INFLUXDB_TOKEN": "influxdb_token",
    "URL_DB": "url_db",
    "ORG_NAME": "org_name",
    "BUCKET_NAME": "bucket_name",
}

OPTIONAL_KEYS = {
    "HOST": "host",
    "PORT": "port",
    "LOG_DIR": "log_dir",
    "LOG_LEVEL": "log_level",
}


class Config(BaseModel):
    """
    Immutable service configuration.

    Loaded once when the process starts and shared for its whole lifetime.
    """
    model_config = ConfigDict(frozen=True)

    influxdb_token: str = Field(..., min_length=1, description="InfluxDB access token")
    url_db: str = Field(..., min_length=1, description="InfluxDB endpoint URL")
    org_name: str = Field(..., min_length=1, description="InfluxDB organization")
    bucket_name: str = Field(..., min_length=1, description="Target bucket")

    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=8080, ge=1, le=65535, description="Listen port")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level: {value}")
        return value


def load_config(env_file: Union[str, Path] = DEFAULT_ENV_FILE) -> Config:
    """
    Read and validate the .env file.

    Args:
        env_file: Path to the key/value file

    Returns:
        The frozen Config

    Raises:
        ConfigError: The file doesn't exist, a required key is missing or
                     blank, or an optional value is invalid (e.g. PORT=abc)
    """
    path = Path(env_file)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    values = dotenv_values(path)

    missing = [key for key in REQUIRED_KEYS if not (values.get(key) or "").strip()]
    if missing:
        raise ConfigError(f"Missing configuration keys in {path}: {', '.join(missing)}")

    settings = {field: values[key].strip() for key, field in REQUIRED_KEYS.items()}
    for key, field in OPTIONAL_KEYS.items():
        value = (values.get(key) or "").strip()
        if value:
            settings[field] = value

    try:
        return Config(**settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
