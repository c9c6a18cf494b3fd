"""
Sensor Telemetry Ingest - Backend API
=====================================
FastAPI application that receives sensor readings and writes them to InfluxDB.

ARCHITECTURE:
    [Sensor nodes] --POST /api (form)--> [This Backend] --blocking write--> [InfluxDB]

ENDPOINTS:
    GET  /     -> "Welcome"
    POST /api  -> {"status": "ok"}

    Anything else is a 404, including a known path with the wrong method.

HOW TO RUN:
    # Install
    pip install -e .

    # Create the config (see config.py for all keys)
    cat > .env <<EOF
    INFLUXDB_TOKEN=...
    URL_DB=http://localhost:8086
    ORG_NAME=my-org
    BUCKET_NAME=sensors
    EOF

    # Run the server (logs go to logs/<start time>.log)
    sensor-ingest
    # or: python -m sensor_ingest

    # Use another config file
    SENSOR_INGEST_ENV_FILE=/etc/sensor-ingest.env sensor-ingest
"""

import logging
import os
import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sensor_ingest import __version__
from sensor_ingest.config import DEFAULT_ENV_FILE, load_config
from sensor_ingest.exceptions import ConfigError
from sensor_ingest.logging_setup import LOG_FORMAT, configure_logging
from sensor_ingest.routers import telemetry_router
from sensor_ingest.services import MeasurementWriter

logger = logging.getLogger(__name__)


ENV_FILE_VARIABLE = "SENSOR_INGEST_ENV_FILE"

NOT_FOUND_BODY = "404 not found."
METHOD_NOT_SUPPORTED_BODY = "Method is not supported."

# Stopping the service with either of these is a normal closure
STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    STARTUP:
        Nothing to build - the writer was handed to create_app().

    SHUTDOWN:
        Close the writer (and with it the InfluxDB client).
    """
    logger.info("Sensor ingest API started")

    yield  # Application runs here

    writer = app.state.measurement_writer
    if writer is not None:
        writer.close()
    logger.info("Shutdown complete")


# =============================================================================
# ERROR RESPONSES
# =============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Plain-text errors, and 404 instead of 405.

    Sensor firmware only looks at the status code, and historically any
    unsupported method got a 404.
    """
    if exc.status_code == 405:
        logger.info(f"{request.method} {request.url.path}: method not supported")
        return PlainTextResponse(METHOD_NOT_SUPPORTED_BODY, status_code=404)
    if exc.status_code == 404:
        logger.info(f"{request.method} {request.url.path}: not found")
        return PlainTextResponse(NOT_FOUND_BODY, status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(writer: MeasurementWriter) -> FastAPI:
    """
    Build the app around a writer.

    Args:
        writer: Anything with write(points) and close(); the app closes it
                on shutdown

    Returns:
        The FastAPI application, ready for uvicorn (or TestClient)
    """
    app = FastAPI(
        title="Sensor Telemetry Ingest API",
        description="Receives humidity, temperature and accelerometer readings "
                    "from sensor nodes and writes them to InfluxDB.",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.measurement_writer = writer
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(telemetry_router)
    return app


# =============================================================================
# PROCESS ENTRY POINT
# =============================================================================

class StopRequested(Exception):
    """A stop signal reached the process."""


def _raise_stop_requested(signum, frame):
    raise StopRequested(signal.Signals(signum).name)


def _fatal(message: str) -> None:
    """Log to stderr (the log file may not exist yet) and exit."""
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    logger.critical(message)
    sys.exit(1)


def run(env_file: Optional[str] = None) -> None:
    """
    Start the service.

    1. Load the .env config (fatal if missing/incomplete)
    2. Open logs/<start time>.log and send all logging there
    3. Create the InfluxDB client + blocking writer
    4. Serve on HOST:PORT until stopped
    """
    env_file = env_file or os.getenv(ENV_FILE_VARIABLE, DEFAULT_ENV_FILE)

    try:
        config = load_config(env_file)
    except ConfigError as e:
        _fatal(str(e))

    try:
        log_path = configure_logging(config.log_dir, config.log_level)
    except OSError as e:
        _fatal(f"Cannot open log file in {config.log_dir}: {e}")

    print(f"Logging to {log_path}")

    writer = MeasurementWriter.from_config(config)
    app = create_app(writer)

    logger.info(f"Server started on port {config.port}")

    # uvicorn re-raises the stop signal it caught into these after shutdown
    previous_handlers = {sig: signal.signal(sig, _raise_stop_requested) for sig in STOP_SIGNALS}
    try:
        # log_config=None keeps uvicorn's loggers flowing into our log file
        uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    except StopRequested as e:
        logger.info(f"Received {e}")
    except SystemExit as e:
        # uvicorn exits on its own when it can't bind
        logger.critical(f"Server closed unexpectedly (exit code {e.code})")
        raise
    except Exception:
        logger.critical("Server closed unexpectedly with error:", exc_info=True)
        sys.exit(1)
    finally:
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)

    logger.info("Server closed under request")


if __name__ == "__main__":
    run()
