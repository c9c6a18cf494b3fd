"""
Services Package
================

These are the "workers" that do the actual work.

- parse_telemetry:   Turns a `data` string into a TelemetryReading
- build_points:      Turns a reading into the air + accelerometer records
- MeasurementWriter: Sends those records to InfluxDB
"""

from .telemetry_parser import parse_telemetry
from .influx_writer import MeasurementWriter, build_points

__all__ = [
    "parse_telemetry",
    "MeasurementWriter",
    "build_points",
]
