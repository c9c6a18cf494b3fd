"""
Sensor Telemetry Ingest
=======================

Receives sensor readings over HTTP and forwards them to InfluxDB.

HOW IT'S ORGANIZED:
------------------
- models/          = Data structures (what does a reading look like?)
- services/        = Workers (parse the data string, write to InfluxDB)
- routers/         = API endpoints (the doors into our app)
- utils/           = Small helpers (payload sanitizing)
- config.py        = .env loading
- logging_setup.py = One log file per process start
- main.py          = Puts it all together and starts the server
"""

__version__ = "1.0.0"
