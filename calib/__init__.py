"""Calibration module."""

from .auto_calibrate import CalibrationHint, auto_calibrate_from_pose, detect_calibration_hints
from .corrector import (
    apply_calibration,
    correct_aspect_ratio,
    correct_distortion,
    correct_keypoint,
    correct_pose,
    correct_skew,
)
from .quality import (
    CalibrationFlag,
    CalibrationIssue,
    CalibrationReport,
    calibration_recommendations,
    is_stale,
    validate_calibration,
)
from .store import CalibrationRepository, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "CalibrationFlag",
    "CalibrationHint",
    "CalibrationIssue",
    "CalibrationReport",
    "CalibrationRepository",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "apply_calibration",
    "auto_calibrate_from_pose",
    "calibration_recommendations",
    "correct_aspect_ratio",
    "correct_distortion",
    "correct_keypoint",
    "correct_pose",
    "correct_skew",
    "detect_calibration_hints",
    "is_stale",
    "validate_calibration",
]
