"""OpenTelemetry wiring for the evidence governance service."""

from evidence_governance.telemetry.setup import (
    init_telemetry,
    instrument_app,
    instrument_engine,
    shutdown_telemetry,
)

__all__ = ["init_telemetry", "instrument_app", "instrument_engine", "shutdown_telemetry"]
