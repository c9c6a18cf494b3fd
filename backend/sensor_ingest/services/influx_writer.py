"""
InfluxDB Measurement Writer
===========================

Sends parsed telemetry to InfluxDB.

THE DATA FLOW:
-------------
    TelemetryReading + node
            |
            | build_points()
            v
    [air point]  [accelerometer point]
            |
            | one blocking write call
            v
    [InfluxDB bucket]

Each submission becomes exactly two points:

    air,location=<node> humidity=<h>,temperature=<t> <ts>
    accelerometer,location=<node> x=<x>,y=<y>,z=<z> <ts>

Both go out in a single write so they either land together or the whole call
fails. There's no batching, no queue, no retry - the write API is created
with SYNCHRONOUS options, so write() doesn't return until InfluxDB answers.
"""

import logging
from typing import List

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS
from influxdb_client.rest import ApiException
from urllib3.exceptions import HTTPError

from sensor_ingest.config import Config
from sensor_ingest.exceptions import MeasurementWriteError
from sensor_ingest.models import TelemetryReading

logger = logging.getLogger(__name__)


AIR_MEASUREMENT = "air"
ACCELEROMETER_MEASUREMENT = "accelerometer"
LOCATION_TAG = "location"


def build_points(reading: TelemetryReading, node: str) -> List[Point]:
    """
    Build the two outbound records for one submission.

    Args:
        reading: Parsed telemetry
        node: Sensor node identifier, stored as the `location` tag

    Returns:
        [air point, accelerometer point], both stamped with the reading's
        timestamp at second precision
    """
    air = (
        Point(AIR_MEASUREMENT)
        .tag(LOCATION_TAG, node)
        .field("humidity", reading.humidity)
        .field("temperature", reading.temperature)
        .time(reading.timestamp, WritePrecision.S)
    )
    accelerometer = (
        Point(ACCELEROMETER_MEASUREMENT)
        .tag(LOCATION_TAG, node)
        .field("x", reading.x)
        .field("y", reading.y)
        .field("z", reading.z)
        .time(reading.timestamp, WritePrecision.S)
    )
    return [air, accelerometer]


class MeasurementWriter:
    """
    Wraps one long-lived InfluxDB client and its blocking write API.

    HOW TO USE:
    ----------
    writer = MeasurementWriter.from_config(config)

    try:
        writer.write(build_points(reading, "greenhouse-1"))
    except MeasurementWriteError as e:
        logger.error(e)

    writer.close()  # at shutdown

    One instance is shared by every request; the client library handles its
    own connection safety.
    """

    def __init__(self, client: InfluxDBClient, bucket: str, org: str):
        """
        Args:
            client: An InfluxDBClient (owned by this writer from now on)
            bucket: Bucket to write into
            org: Organization that owns the bucket
        """
        self.client = client
        self.bucket = bucket
        self.org = org
        self.write_api = client.write_api(write_options=SYNCHRONOUS)

    @classmethod
    def from_config(cls, config: Config) -> "MeasurementWriter":
        """Create the InfluxDB client from the loaded configuration."""
        client = InfluxDBClient(
            url=config.url_db,
            token=config.influxdb_token,
            org=config.org_name,
        )
        logger.info(f"InfluxDB client created for {config.url_db} (bucket={config.bucket_name})")
        return cls(client, bucket=config.bucket_name, org=config.org_name)

    def write(self, points: List[Point]) -> None:
        """
        Write the points in a single blocking call.

        Raises:
            MeasurementWriteError: InfluxDB rejected the write or couldn't be reached
        """
        try:
            self.write_api.write(bucket=self.bucket, org=self.org, record=points)
        except (ApiException, HTTPError, OSError) as e:
            raise MeasurementWriteError(f"Failed to write {len(points)} points to {self.bucket}: {e}") from e

    def close(self) -> None:
        """Flush and close the write API and the client."""
        self.write_api.close()
        self.client.close()
        logger.info("InfluxDB client closed")
