"""Pose validation and quality assessment."""

from .pose_validator import (
    PoseValidator,
    QualityMetrics,
    ensure_pose_quality,
    pose_quality_metrics,
    quality_tier,
    validate_pose,
)

__all__ = [
    "PoseValidator",
    "QualityMetrics",
    "ensure_pose_quality",
    "pose_quality_metrics",
    "quality_tier",
    "validate_pose",
]
