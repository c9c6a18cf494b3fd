"""Allows `python -m sensor_ingest`."""

from sensor_ingest.main import run

if __name__ == "__main__":
    run()
