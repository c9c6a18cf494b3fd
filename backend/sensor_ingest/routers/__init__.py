"""
Routers Package
===============

The telemetry router serves GET / (liveness) and POST /api (sensor readings).
Its writer comes in through get_measurement_writer.
"""

from .telemetry import router as telemetry_router, get_measurement_writer

__all__ = [
    "telemetry_router",
    "get_measurement_writer",
]
