"""
Models Package
==============

Import from here instead of the individual files.

Example:
    from sensor_ingest.models import TelemetryReading, UNKNOWN_NODE
"""

from .telemetry import (
    UNKNOWN_NODE,
    TelemetrySubmission,
    TelemetryReading,
    IngestResponse,
)

__all__ = [
    "UNKNOWN_NODE",
    "TelemetrySubmission",
    "TelemetryReading",
    "IngestResponse",
]
