"""Telemetry tracking for per-frame latency and pipeline health."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict


@dataclass
class LatencyStats:
    p50_ms: float
    p95_ms: float
    max_ms: float


@dataclass
class TelemetrySnapshot:
    frames: int
    invalid_frames: int
    outliers: int
    evictions: int
    low_confidence: int
    latency: LatencyStats

    def to_dict(self) -> Dict[str, float]:
        return {
            "frames": self.frames,
            "invalid_frames": self.invalid_frames,
            "outliers": self.outliers,
            "evictions": self.evictions,
            "low_confidence": self.low_confidence,
            "latency_p50_ms": self.latency.p50_ms,
            "latency_p95_ms": self.latency.p95_ms,
            "latency_max_ms": self.latency.max_ms,
        }


@dataclass
class TelemetryMonitor:
    max_samples: int = 1000
    frames: int = 0
    invalid_frames: int = 0
    latency_samples_ms: Deque[float] = field(default_factory=deque)

    def __post_init__(self) -> None:
        self.latency_samples_ms = deque(self.latency_samples_ms, maxlen=self.max_samples)

    def record_latency_ms(self, value: float) -> None:
        self.latency_samples_ms.append(value)

    def record_frame(self, latency_ms: float, valid: bool = True) -> None:
        self.frames += 1
        if not valid:
            self.invalid_frames += 1
        self.record_latency_ms(latency_ms)

    def reset(self) -> None:
        self.frames = 0
        self.invalid_frames = 0
        self.latency_samples_ms.clear()

    def summarize(self) -> LatencyStats:
        if not self.latency_samples_ms:
            return LatencyStats(p50_ms=0.0, p95_ms=0.0, max_ms=0.0)
        values = sorted(self.latency_samples_ms)
        max_ms = values[-1]
        p50_ms = values[int(0.5 * (len(values) - 1))]
        p95_ms = values[int(0.95 * (len(values) - 1))]
        return LatencyStats(p50_ms=p50_ms, p95_ms=p95_ms, max_ms=max_ms)

    def snapshot(self, outliers: int = 0, evictions: int = 0, low_confidence: int = 0) -> TelemetrySnapshot:
        """Combine frame counters with smoother counters supplied by the caller."""
        return TelemetrySnapshot(
            frames=self.frames,
            invalid_frames=self.invalid_frames,
            outliers=outliers,
            evictions=evictions,
            low_confidence=low_confidence,
            latency=self.summarize(),
        )
