"""Shared fixtures for the sensor ingest tests."""

import logging
import threading

import pytest
from fastapi.testclient import TestClient

from sensor_ingest.main import create_app


VALID_DATA = "1700000000|55.2|21.4|0.01,0.02,9.81"


class FakeWriter:
    """Stands in for MeasurementWriter; remembers every write call."""

    def __init__(self, error=None):
        self.calls = []
        self.closed = False
        self.error = error
        self._lock = threading.Lock()

    def write(self, points):
        with self._lock:
            self.calls.append(list(points))
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


@pytest.fixture
def writer():
    return FakeWriter()


@pytest.fixture
def client(writer):
    with TestClient(create_app(writer)) as test_client:
        yield test_client


@pytest.fixture
def restore_logging():
    """Undo configure_logging(): drop its file handler and put the level back."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
