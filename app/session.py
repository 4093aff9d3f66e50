"""Pose session: the per-user pipeline that hosts drive once per analyzed frame.

Frame flow is correct -> smooth -> validate -> match. A session owns its
smoother state and telemetry; independent sessions share nothing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional

from calib import (
    CalibrationRepository,
    KeyValueStore,
    auto_calibrate_from_pose,
    correct_pose,
    is_stale,
)
from configs.settings import AppConfig
from contracts import (
    CalibrationProfile,
    IssueCode,
    MatchResult,
    Pose,
    PoseTemplate,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from exceptions import TemplateNotFoundError
from log_config.logger import get_logger, log_performance
from matching import BUILTIN_TEMPLATES, PoseMatcher, get_template
from telemetry import TelemetryMonitor, TelemetrySnapshot
from track import KeypointSmoother
from validation import PoseValidator

logger = get_logger(__name__)


@dataclass(frozen=True)
class FrameResult:
    frame_index: int
    corrected: Pose
    smoothed: Pose
    validation: ValidationResult
    match: Optional[MatchResult]
    latency_ms: float


class PoseSession:
    """Stateful pose pipeline for one subject.

    Not thread-safe: one writer per session.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        profile: Optional[CalibrationProfile] = None,
        templates: Optional[Mapping[str, PoseTemplate]] = None,
        clock: Optional[Callable[[], int]] = None,
        repository: Optional[CalibrationRepository] = None,
    ) -> None:
        self.config = config or AppConfig()
        self._repository = repository
        if profile is None:
            profile = repository.load() if repository is not None else CalibrationProfile()
        self._profile = profile
        self.templates: Mapping[str, PoseTemplate] = BUILTIN_TEMPLATES if templates is None else templates

        self._clock = clock or time.monotonic_ns
        self.smoother = KeypointSmoother(self.config.smoothing, clock=self._clock)
        self.validator = PoseValidator(self.config.validation)
        self.matcher = PoseMatcher(self.config.matching)
        self.telemetry = TelemetryMonitor(max_samples=self.config.telemetry.max_samples)
        self._frame_index = 0

    @classmethod
    def from_store(
        cls,
        store: KeyValueStore,
        config: Optional[AppConfig] = None,
        **kwargs,
    ) -> "PoseSession":
        """Build a session whose calibration is loaded from and saved to ``store``."""
        config = config or AppConfig()
        repository = CalibrationRepository(store, key=config.calibration.store_key)
        return cls(config=config, repository=repository, **kwargs)

    @property
    def profile(self) -> CalibrationProfile:
        return self._profile

    def process_frame(
        self,
        pose: Pose,
        template_id: Optional[str] = None,
        delta_time: float = 1.0,
        now_ns: Optional[int] = None,
    ) -> FrameResult:
        """Run one frame through the pipeline.

        Args:
            pose: Raw keypoints from the detector
            template_id: Template to match against; unknown ids are logged
                and produce no match
            delta_time: Time since the previous frame for the Kalman model
            now_ns: Monotonic timestamp; defaults to the session clock

        Returns:
            FrameResult
        """
        start = time.perf_counter()
        now_ns = self._clock() if now_ns is None else now_ns

        if self.config.calibration.apply_correction:
            corrected = correct_pose(pose, self._profile)
        else:
            corrected = pose
        smoothed = self.smoother.smooth_pose(corrected, delta_time=delta_time, now_ns=now_ns)

        validation = self.validator.validate(smoothed, raw_pose=pose)
        if is_stale(self._profile, max_age_days=self.config.calibration.max_age_days):
            validation = replace(validation, issues=validation.issues + (
                ValidationIssue(
                    code=IssueCode.STALE_CALIBRATION,
                    severity=Severity.INFO,
                    message="Camera calibration is out of date; consider recalibrating",
                ),
            ))

        match = None
        if template_id is not None:
            try:
                template = get_template(self.templates, template_id)
            except TemplateNotFoundError as e:
                logger.warning(str(e))
            else:
                match = self.matcher.match(smoothed, template)

        latency_ms = (time.perf_counter() - start) * 1000.0
        self.telemetry.record_frame(latency_ms, valid=validation.is_valid)
        log_performance("process_frame", latency_ms, threshold_ms=self.config.telemetry.latency_warn_ms)

        result = FrameResult(
            frame_index=self._frame_index,
            corrected=corrected,
            smoothed=smoothed,
            validation=validation,
            match=match,
            latency_ms=latency_ms,
        )
        self._frame_index += 1
        return result

    def recalibrate(self, pose: Pose) -> CalibrationProfile:
        """Estimate a new profile from a reference pose and adopt it.

        Smoothing state is cleared since the corrected coordinates shift.
        """
        profile = auto_calibrate_from_pose(pose)
        self._profile = profile
        self.smoother.reset()
        if self._repository is not None:
            self._repository.save(profile)
        logger.info("Adopted new calibration profile; smoothing state cleared")
        return profile

    def reset(self) -> None:
        """Forget all temporal state; calibration is kept."""
        self.smoother.reset()
        self.telemetry.reset()
        self._frame_index = 0

    def telemetry_summary(self) -> TelemetrySnapshot:
        counters = self.smoother.counters
        return self.telemetry.snapshot(
            outliers=counters.outliers,
            evictions=counters.evictions,
            low_confidence=counters.low_confidence,
        )
