"""
Telemetry Models
================
Pydantic models for what sensor nodes send us and what we send back.

- TelemetrySubmission: the two form fields of one POST /api request
- TelemetryReading:    the six numbers parsed out of the `data` field
- IngestResponse:      the JSON body returned on success
"""

from pydantic import BaseModel, Field


# Used when a node doesn't tell us who it is
UNKNOWN_NODE = "unknown"


class TelemetrySubmission(BaseModel):
    """
    One ingestion request, straight from the form.

    Example form body:
        node=greenhouse-1&data=1700000000|55.2|21.4|0.01,0.02,9.81
    """
    node: str = Field(default=UNKNOWN_NODE, description="Sensor node identifier")
    data: str = Field(default="", description="Raw pipe-delimited telemetry string")


class TelemetryReading(BaseModel):
    """
    A parsed telemetry line.

    Wire format:
        "<unix_ts>|<humidity>|<temperature>|<x>,<y>,<z>"
    """
    timestamp: int = Field(..., description="Seconds since the unix epoch")
    humidity: float = Field(..., description="Relative humidity %")
    temperature: float = Field(..., description="Temperature in Celsius")
    x: float = Field(..., description="Accelerometer X axis")
    y: float = Field(..., description="Accelerometer Y axis")
    z: float = Field(..., description="Accelerometer Z axis")


class IngestResponse(BaseModel):
    """Body of a successful POST /api."""
    status: str = "ok"
