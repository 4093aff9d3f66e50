"""Per-keypoint temporal smoothing: outlier gate, EMA, Kalman blend, rate limit.

Each stage damps a different failure mode. The outlier gate drops isolated
spikes, the EMA/Kalman blend removes continuous micro-jitter, and the
displacement clamp bounds sudden large jumps. Stage order is fixed.
"""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Optional, Tuple

import numpy as np

from configs.settings import SmoothingConfig
from contracts import Keypoint, KeypointLabel, Pose, clamp_unit
from log_config.logger import get_logger
from track.kalman import KeypointKalmanFilter

logger = get_logger(__name__)

Point2D = Tuple[float, float]


@dataclass(frozen=True)
class HistorySample:
    x: float
    y: float
    confidence: float


@dataclass
class SmoothingState:
    """Filter memory for one keypoint label within one tracking session."""

    position: Point2D
    ema: Point2D
    kalman: KeypointKalmanFilter
    visibility: float
    last_update_ns: int
    history: Deque[HistorySample] = field(default_factory=deque)
    std_dev: Point2D = (0.0, 0.0)


@dataclass
class SmootherCounters:
    accepted: int = 0
    outliers: int = 0
    low_confidence: int = 0
    evictions: int = 0


class KeypointSmoother:
    """Stabilizes a stream of per-frame keypoints for one tracking session.

    Not thread-safe: one writer per instance.
    """

    def __init__(
        self,
        config: Optional[SmoothingConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = config or SmoothingConfig()
        self._clock = clock or time.monotonic_ns
        self._states: Dict[KeypointLabel, SmoothingState] = {}
        self.counters = SmootherCounters()

    @property
    def _stale_after_ns(self) -> int:
        return self.config.stale_after_ms * 1_000_000

    def tracked_labels(self) -> Tuple[KeypointLabel, ...]:
        return tuple(label for label in KeypointLabel if label in self._states)

    def state_for(self, label: KeypointLabel) -> Optional[SmoothingState]:
        return self._states.get(KeypointLabel(label))

    def reset(self) -> None:
        self._states.clear()

    def _new_state(self, x: float, y: float, confidence: float, now_ns: int) -> SmoothingState:
        return SmoothingState(
            position=(x, y),
            ema=(x, y),
            kalman=KeypointKalmanFilter(
                initial_x=x,
                initial_y=y,
                process_noise=self.config.process_noise,
                measurement_noise=self.config.measurement_noise,
            ),
            visibility=confidence,
            last_update_ns=now_ns,
            history=deque(maxlen=self.config.history_size),
        )

    def _evict_if_stale(self, label: KeypointLabel, now_ns: int) -> None:
        state = self._states.get(label)
        if state is not None and now_ns - state.last_update_ns > self._stale_after_ns:
            del self._states[label]
            self.counters.evictions += 1
            logger.debug(f"Evicted stale smoothing state for {label.value}")

    def prune_stale(self, now_ns: Optional[int] = None) -> None:
        """Drop every state not updated within the staleness window."""
        now_ns = self._clock() if now_ns is None else now_ns
        for label in list(self._states):
            self._evict_if_stale(label, now_ns)

    @staticmethod
    def _emit(position: Point2D, visibility: float) -> Keypoint:
        return Keypoint(
            x=clamp_unit(position[0]),
            y=clamp_unit(position[1]),
            visibility=clamp_unit(visibility),
        )

    def update(
        self,
        label: KeypointLabel,
        x: float,
        y: float,
        confidence: float,
        delta_time: float = 1.0,
        now_ns: Optional[int] = None,
    ) -> Optional[Keypoint]:
        """Feed one observation for a label and return its stabilized estimate.

        Args:
            label: Keypoint label
            x, y: Observed normalized position
            confidence: Detection confidence in [0, 1]
            delta_time: Time since the previous update, in the units of the
                Kalman velocity (frames by default)
            now_ns: Monotonic timestamp; defaults to the smoother clock

        Returns:
            Smoothed keypoint, or None when the observation is unusable and
            there is no prior estimate for the label
        """
        label = KeypointLabel(label)
        now_ns = self._clock() if now_ns is None else now_ns
        cfg = self.config

        self._evict_if_stale(label, now_ns)
        state = self._states.get(label)

        if not (math.isfinite(x) and math.isfinite(y)):
            if state is None:
                return None
            return self._emit(state.position, state.visibility)

        if not math.isfinite(confidence):
            confidence = 0.0

        if confidence < cfg.min_confidence:
            self.counters.low_confidence += 1
            if state is None:
                return self._emit((x, y), confidence)
            state.last_update_ns = now_ns
            return self._emit(state.position, confidence)

        if state is None:
            state = self._new_state(x, y, confidence, now_ns)
            self._states[label] = state

        state.history.append(HistorySample(x, y, confidence))
        samples = np.array([(s.x, s.y) for s in state.history], dtype=np.float64)
        mean_x, mean_y = samples.mean(axis=0)
        std_x, std_y = samples.std(axis=0)
        state.std_dev = (float(std_x), float(std_y))

        threshold = cfg.outlier_threshold
        is_outlier = abs(x - mean_x) > threshold * std_x or abs(y - mean_y) > threshold * std_y

        if is_outlier:
            # Sample stays in history so a persistent shift eventually moves the mean
            self.counters.outliers += 1
            logger.debug(f"Outlier rejected for {label.value}: ({x:.3f}, {y:.3f})")
            new_position = state.ema
        else:
            self.counters.accepted += 1
            alpha = cfg.ema_factor * confidence
            ema_x = alpha * x + (1.0 - alpha) * state.ema[0]
            ema_y = alpha * y + (1.0 - alpha) * state.ema[1]
            state.ema = (ema_x, ema_y)

            smoothed_x, smoothed_y = ema_x, ema_y
            if cfg.enable_kalman:
                state.kalman.predict(delta_time)
                kf_x, kf_y = state.kalman.update(x, y)
                blend = cfg.kalman_blend
                smoothed_x = (1.0 - blend) * smoothed_x + blend * float(kf_x)
                smoothed_y = (1.0 - blend) * smoothed_y + blend * float(kf_y)

            new_position = self._limit_change(state.position, (smoothed_x, smoothed_y))

        state.position = new_position
        state.visibility = max(state.visibility * cfg.visibility_decay, confidence)
        state.last_update_ns = now_ns

        return self._emit(state.position, state.visibility)

    def _limit_change(self, previous: Point2D, proposed: Point2D) -> Point2D:
        dx = proposed[0] - previous[0]
        dy = proposed[1] - previous[1]
        distance = math.hypot(dx, dy)
        max_change = self.config.max_change
        if distance <= max_change:
            return proposed
        ratio = max_change / distance
        return (previous[0] + dx * ratio, previous[1] + dy * ratio)

    def smooth_pose(
        self,
        pose: Pose,
        delta_time: float = 1.0,
        now_ns: Optional[int] = None,
    ) -> Pose:
        """Smooth every present keypoint of a frame; absent labels stay absent."""
        now_ns = self._clock() if now_ns is None else now_ns
        smoothed: Dict[KeypointLabel, Optional[Keypoint]] = {}
        for label, keypoint in pose.items():
            smoothed[label] = self.update(
                label,
                keypoint.x,
                keypoint.y,
                keypoint.visibility,
                delta_time=delta_time,
                now_ns=now_ns,
            )
        self.prune_stale(now_ns)
        return Pose.from_keypoints(smoothed)

    def smoothed_pose(self) -> Pose:
        """Current stable estimate for every tracked label."""
        return Pose.from_keypoints(
            {label: self._emit(state.position, state.visibility) for label, state in self._states.items()}
        )
