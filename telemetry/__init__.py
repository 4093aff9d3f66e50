"""Telemetry module."""

from .monitor import LatencyStats, TelemetryMonitor, TelemetrySnapshot

__all__ = ["LatencyStats", "TelemetryMonitor", "TelemetrySnapshot"]
