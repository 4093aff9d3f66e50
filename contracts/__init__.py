"""Shared data contracts for the pose guide pipeline."""

from .types import (
    CRITICAL_LABELS,
    SYMMETRY_PAIRS,
    Adjustment,
    CalibrationProfile,
    Direction,
    IssueCode,
    Keypoint,
    KeypointLabel,
    MatchResult,
    Pose,
    PoseTemplate,
    QualityTier,
    Severity,
    Urgency,
    ValidationIssue,
    ValidationResult,
    clamp_unit,
)

__all__ = [
    "CRITICAL_LABELS",
    "SYMMETRY_PAIRS",
    "Adjustment",
    "CalibrationProfile",
    "Direction",
    "IssueCode",
    "Keypoint",
    "KeypointLabel",
    "MatchResult",
    "Pose",
    "PoseTemplate",
    "QualityTier",
    "Severity",
    "Urgency",
    "ValidationIssue",
    "ValidationResult",
    "clamp_unit",
]
