"""
Exceptions
==========

Every error the ingest service raises on purpose lives here.

- ConfigError:           the .env file or one of its keys is missing (fatal at startup)
- MalformedPayload:      the sensor sent a `data` string we can't parse (HTTP 400)
- MeasurementWriteError: InfluxDB rejected or never received the write (logged only)
"""


class ConfigError(Exception):
    """Configuration could not be loaded. The process should not start."""


class MalformedPayload(ValueError):
    """
    The telemetry string doesn't match "<ts>|<hum>|<temp>|<x>,<y>,<z>".

    Attributes:
        payload: The sanitized string that failed to parse
        reason:  Human-readable description of what was wrong
    """

    def __init__(self, payload: str, reason: str):
        self.payload = payload
        self.reason = reason
        super().__init__(f"error parsing data: {reason}")


class MeasurementWriteError(Exception):
    """The blocking write to InfluxDB failed."""
