"""Heuristic calibration estimates derived from a single observed pose."""

from __future__ import annotations

import math
import time
from dataclasses import replace
from enum import Enum
from typing import List, Optional

from contracts import CalibrationProfile, KeypointLabel, Pose
from log_config.logger import get_logger

logger = get_logger(__name__)

# Horizontal baseline (normalized) used to turn a shoulder height difference into an angle
SKEW_BASELINE = 0.1
AUTO_CALIBRATION_QUALITY = 75.0
EXPECTED_WIDTH_RATIO = (0.9, 1.1)


class CalibrationHint(str, Enum):
    SLIGHT_TILT = "slight_tilt"
    STRONG_TILT = "strong_tilt"
    ASPECT_DISTORTION = "aspect_distortion"
    LENS_DISTORTION = "lens_distortion"


def _width_ratio(pose: Pose) -> Optional[float]:
    """Hip width over shoulder width, or None when not measurable."""
    left_shoulder = pose.get(KeypointLabel.LEFT_SHOULDER)
    right_shoulder = pose.get(KeypointLabel.RIGHT_SHOULDER)
    left_hip = pose.get(KeypointLabel.LEFT_HIP)
    right_hip = pose.get(KeypointLabel.RIGHT_HIP)
    if not (left_shoulder and right_shoulder and left_hip and right_hip):
        return None
    shoulder_width = abs(right_shoulder.x - left_shoulder.x)
    if shoulder_width == 0.0:
        return None
    hip_width = abs(right_hip.x - left_hip.x)
    return hip_width / shoulder_width


def auto_calibrate_from_pose(pose: Pose, now: Optional[float] = None) -> CalibrationProfile:
    """Estimate skew and aspect correction from shoulders and hips.

    This is a one-shot estimate starting from the default profile, not an
    iterative refinement of an existing one.

    Args:
        pose: Observed (uncorrected) pose
        now: Calibration timestamp in epoch seconds (defaults to time.time())

    Returns:
        New calibration profile with quality 75
    """
    profile = CalibrationProfile()
    sensor_skew = 0.0
    camera_tilt = profile.camera_tilt
    aspect = profile.aspect_ratio_correction

    left_shoulder = pose.get(KeypointLabel.LEFT_SHOULDER)
    right_shoulder = pose.get(KeypointLabel.RIGHT_SHOULDER)
    if left_shoulder and right_shoulder:
        y_diff = right_shoulder.y - left_shoulder.y
        sensor_skew = math.degrees(math.atan2(y_diff, SKEW_BASELINE))
        camera_tilt = (camera_tilt[0], sensor_skew)

    ratio = _width_ratio(pose)
    if ratio is not None and ratio > 0.0:
        low, high = EXPECTED_WIDTH_RATIO
        if ratio < low or ratio > high:
            aspect = 1.0 / ratio

    profile = replace(
        profile,
        sensor_skew=sensor_skew,
        camera_tilt=camera_tilt,
        aspect_ratio_correction=aspect,
        calibration_quality=AUTO_CALIBRATION_QUALITY,
        calibration_date=time.time() if now is None else now,
    )
    logger.info(
        f"Auto-calibrated from pose: skew={profile.sensor_skew:.2f}deg, "
        f"aspect={profile.aspect_ratio_correction:.3f}"
    )
    return profile


def detect_calibration_hints(pose: Pose) -> List[CalibrationHint]:
    """Pose-derived signs that the camera needs calibrating."""
    hints: List[CalibrationHint] = []

    left_shoulder = pose.get(KeypointLabel.LEFT_SHOULDER)
    right_shoulder = pose.get(KeypointLabel.RIGHT_SHOULDER)
    if left_shoulder and right_shoulder:
        y_diff = abs(left_shoulder.y - right_shoulder.y)
        if 0.05 < y_diff < 0.1:
            hints.append(CalibrationHint.SLIGHT_TILT)
        elif y_diff >= 0.1:
            hints.append(CalibrationHint.STRONG_TILT)

    ratio = _width_ratio(pose)
    if ratio is not None and (ratio < 0.7 or ratio > 1.3):
        hints.append(CalibrationHint.ASPECT_DISTORTION)

    # A straight arm should extrapolate linearly from shoulder through elbow
    left_elbow = pose.get(KeypointLabel.LEFT_ELBOW)
    left_wrist = pose.get(KeypointLabel.LEFT_WRIST)
    if left_shoulder and left_elbow and left_wrist:
        expected_wrist_x = left_shoulder.x + (left_elbow.x - left_shoulder.x) * 2.0
        if abs(left_wrist.x - expected_wrist_x) > 0.1:
            hints.append(CalibrationHint.LENS_DISTORTION)

    return hints
