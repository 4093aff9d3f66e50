"""Temporal keypoint tracking and smoothing."""

from .kalman import KeypointKalmanFilter
from .smoother import KeypointSmoother, SmootherCounters, SmoothingState
from .stability import calculate_pose_stability

__all__ = [
    "KeypointKalmanFilter",
    "KeypointSmoother",
    "SmootherCounters",
    "SmoothingState",
    "calculate_pose_stability",
]
