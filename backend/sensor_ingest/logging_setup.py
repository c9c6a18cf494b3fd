"""
Logging Setup
=============

Every process start gets its own log file, named after the start time:

    logs/2026-10-19_14-03-22.log

All loggers (ours and uvicorn's) end up in that one file.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_FILE_TIME_FORMAT = "%Y-%m-%d_%H-%M-%S"


def log_file_path(log_dir: Union[str, Path], started_at: datetime) -> Path:
    """Where the log file for a process started at `started_at` goes."""
    return Path(log_dir) / f"{started_at.strftime(LOG_FILE_TIME_FORMAT)}.log"


def configure_logging(
    log_dir: Union[str, Path],
    level: str = "INFO",
    started_at: Optional[datetime] = None,
) -> Path:
    """
    Send all logging to a new timestamped file.

    Args:
        log_dir: Directory for log files (created if missing)
        level: Root logger level name
        started_at: Process start time (default: now, local time)

    Returns:
        Path of the log file

    Raises:
        OSError: The directory or file can't be created
    """
    path = log_file_path(log_dir, started_at or datetime.now())
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
    logging.captureWarnings(True)
    return path
