"""
Telemetry Parser
================

Turns the `data` string a sensor node posts into numbers.

THE FORMAT:
----------
    <unix_ts>|<humidity>|<temperature>|<x>,<y>,<z>

    e.g. "1700000000|55.2|21.4|0.01,0.02,9.81"

    - 4 pipe-separated segments (anything after the 4th is ignored)
    - the 4th segment is the accelerometer, 3 comma-separated values
      (again, anything after the 3rd is ignored)

WHAT COUNTS AS BAD INPUT:
------------------------
- Not enough segments or accelerometer components
- A field that isn't a number (or is nan/inf)

Both raise MalformedPayload, which the router turns into a 400.

The string should already be sanitized (see utils.validation.sanitize_payload).
"""

import logging
import math
import re

from sensor_ingest.exceptions import MalformedPayload
from sensor_ingest.models import TelemetryReading

logger = logging.getLogger(__name__)


FIELD_SEPARATOR = "|"
AXIS_SEPARATOR = ","
FIELD_COUNT = 4
AXIS_COUNT = 3

# Plain ASCII decimal only: no "1_000", no non-Latin digits, no "nan"/"inf"
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
FLOAT_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _to_int(payload: str, name: str, raw: str) -> int:
    if not INTEGER_PATTERN.fullmatch(raw):
        raise MalformedPayload(payload, f"{name} is not an integer: {raw!r}")
    return int(raw)


def _to_float(payload: str, name: str, raw: str) -> float:
    if not FLOAT_PATTERN.fullmatch(raw):
        raise MalformedPayload(payload, f"{name} is not a number: {raw!r}")
    value = float(raw)
    if not math.isfinite(value):
        raise MalformedPayload(payload, f"{name} is not a finite number: {raw!r}")
    return value


def parse_telemetry(data: str) -> TelemetryReading:
    """
    Parse a sanitized telemetry string.

    Args:
        data: e.g. "1700000000|55.2|21.4|0.01,0.02,9.81"

    Returns:
        TelemetryReading with timestamp, humidity, temperature, x, y, z

    Raises:
        MalformedPayload: Wrong number of segments or a non-numeric field
    """
    logger.info(f"incoming data: {data}")

    fields = data.split(FIELD_SEPARATOR)
    if len(fields) < FIELD_COUNT:
        raise MalformedPayload(
            data, f"expected {FIELD_COUNT} '|'-separated fields, got {len(fields)}"
        )

    axes = fields[3].split(AXIS_SEPARATOR)
    if len(axes) < AXIS_COUNT:
        raise MalformedPayload(
            data, f"expected {AXIS_COUNT} ','-separated accelerometer values, got {len(axes)}"
        )

    reading = TelemetryReading(
        timestamp=_to_int(data, "timestamp", fields[0]),
        humidity=_to_float(data, "humidity", fields[1]),
        temperature=_to_float(data, "temperature", fields[2]),
        x=_to_float(data, "x", axes[0]),
        y=_to_float(data, "y", axes[1]),
        z=_to_float(data, "z", axes[2]),
    )

    logger.info(
        f"Timestamp: {reading.timestamp}, Humidity: {reading.humidity:f}, "
        f"Temperature: {reading.temperature:f}, "
        f"Accelerometer: {reading.x:f}, {reading.y:f}, {reading.z:f}"
    )
    return reading
