"""
Utility modules for the sensor ingest backend.
"""

from sensor_ingest.utils.validation import (
    sanitize_payload,
    is_blank,
)

__all__ = [
    "sanitize_payload",
    "is_blank",
]
