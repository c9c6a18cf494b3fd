"""
Input Sanitizing Utilities
==========================

Helpers for cleaning up what sensor nodes send us before we parse it.
"""

import re


# Any whitespace (space, tab, CR, LF, unicode spaces) and NUL bytes.
# Some firmware pads the buffer with \x00 before posting it.
_STRIP_PATTERN = re.compile(r"[\s\x00]+")


def sanitize_payload(data: str) -> str:
    """
    Strip all whitespace and NUL characters from a telemetry string.

    Running it twice gives the same result as running it once.

    Args:
        data: Raw `data` field from the request

    Returns:
        The payload with nothing but the meaningful characters left

    Example:
        >>> sanitize_payload(" 1700000000 | 55.2|21.4|0.01, 0.02,9.81\\r\\n\\x00")
        '1700000000|55.2|21.4|0.01,0.02,9.81'
    """
    return _STRIP_PATTERN.sub("", data)


def is_blank(value) -> bool:
    """True if value is None or only whitespace."""
    return value is None or not str(value).strip()
