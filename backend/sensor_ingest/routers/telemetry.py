"""
Telemetry API Router
====================

The two doors into the service.

ALL ENDPOINTS:
-------------
GET  /     - Liveness check, answers "Welcome"
POST /api  - A sensor node reports a reading

HOW POST /api WORKS:
-------------------
1. Read `node` and `data` from the body (URL-encoded OR multipart, see below)
2. Strip whitespace/NUL from `data`
3. Parse it into a TelemetryReading (bad data = 400, nothing written)
4. Build the air + accelerometer points and write them to InfluxDB
5. Answer {"status": "ok"}

Heads up: a failed InfluxDB write is only logged. The node still gets a 200,
so battery-powered devices don't sit there retrying.

TWO BODY ENCODINGS:
------------------
Different firmware posts differently:
- multipart/form-data            -> multipart form parser
- anything else (usually
  application/x-www-form-urlencoded,
  sometimes no content type at all) -> body decoded as URL-encoded form

If a field isn't in the body we fall back to the query string.
"""

import logging
from typing import Dict, Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic_core import PydanticSerializationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from sensor_ingest.exceptions import MalformedPayload, MeasurementWriteError
from sensor_ingest.models import UNKNOWN_NODE, IngestResponse, TelemetrySubmission
from sensor_ingest.services import build_points, parse_telemetry
from sensor_ingest.utils import is_blank, sanitize_payload

logger = logging.getLogger(__name__)


router = APIRouter(tags=["telemetry"])

MULTIPART_CONTENT_TYPE = "multipart/form-data"

BAD_REQUEST_BODY = "400 - Bad request data"
SERVER_ERROR_BODY = "500 - Something bad happened!"


class FormDecodeError(ValueError):
    """The request body couldn't be read as a form."""


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================
# The writer is handed to create_app() at startup and kept on app.state.
# Tests swap in a fake by building the app with their own writer.

def get_measurement_writer(request: Request):
    """Get the MeasurementWriter the app was built with."""
    writer = getattr(request.app.state, "measurement_writer", None)
    if writer is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return writer


# =============================================================================
# FORM READING
# =============================================================================

async def _read_multipart_fields(request: Request) -> Dict[str, str]:
    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as e:
        raise FormDecodeError(f"invalid multipart body: {e}") from e

    # File parts aren't form values
    fields = {}
    for key, value in form.multi_items():
        if isinstance(value, str):
            fields.setdefault(key, value)
    return fields


async def _read_urlencoded_fields(request: Request) -> Dict[str, str]:
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormDecodeError(f"body is not valid UTF-8: {e}") from e

    fields = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        fields.setdefault(key, value)
    return fields


async def read_submission(request: Request) -> TelemetrySubmission:
    """
    Pull `node` and `data` out of the request.

    Raises:
        FormDecodeError: The body doesn't decode on its encoding's path
    """
    content_type = request.headers.get("content-type", "")
    if content_type.lower().startswith(MULTIPART_CONTENT_TYPE):
        fields = await _read_multipart_fields(request)
    else:
        fields = await _read_urlencoded_fields(request)

    def field(name: str) -> Optional[str]:
        if name in fields:
            return fields[name]
        return request.query_params.get(name)

    node = field("node")
    return TelemetrySubmission(
        node=UNKNOWN_NODE if is_blank(node) else node,
        data=field("data") or "",
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/", response_class=PlainTextResponse, summary="Welcome")
async def welcome():
    """Liveness check."""
    return "Welcome"


@router.post("/api", summary="Ingest a telemetry reading")
async def ingest_telemetry(request: Request, writer=Depends(get_measurement_writer)):
    """
    A sensor node reports one reading.

    Send us (form or multipart):
    - data: "<unix_ts>|<humidity>|<temperature>|<x>,<y>,<z>"
    - node: Who you are (optional, defaults to "unknown")

    Example:
        curl -X POST http://localhost:8080/api \\
             -d node=greenhouse-1 \\
             -d "data=1700000000|55.2|21.4|0.01,0.02,9.81"
    """
    logger.debug(f"Request headers: {dict(request.headers)}")

    try:
        submission = await read_submission(request)
    except FormDecodeError as e:
        logger.error(f"Error parsing form: {e}")
        return PlainTextResponse(BAD_REQUEST_BODY, status_code=400)

    node = submission.node
    data = sanitize_payload(submission.data)

    try:
        reading = parse_telemetry(data)
    except MalformedPayload as e:
        logger.error(f"Error: {e} (node={node}, data={data!r})")
        return PlainTextResponse(BAD_REQUEST_BODY, status_code=400)

    points = build_points(reading, node)

    # Blocking call; run it off the event loop
    try:
        await run_in_threadpool(writer.write, points)
    except MeasurementWriteError as e:
        logger.error(f"{e} (node={node}, data={data!r})")

    try:
        body = IngestResponse().model_dump_json()
    except PydanticSerializationError:
        logger.exception("Failed to serialize ingest response")
        return PlainTextResponse(SERVER_ERROR_BODY, status_code=500)

    return Response(content=body, media_type="application/json")
