"""Point corrections for systematic lens and sensor bias.

Corrections operate on normalized image coordinates around the image centre
(0.5, 0.5) and are composed in a fixed order: distortion, skew, aspect ratio.
Temporal filtering downstream assumes points are already unbiased.
"""

from __future__ import annotations

import math
from typing import Tuple

from contracts import CalibrationProfile, Keypoint, Pose

Point2D = Tuple[float, float]

CENTER = (0.5, 0.5)
ASPECT_TOLERANCE = 0.01


def correct_distortion(point: Point2D, profile: CalibrationProfile) -> Point2D:
    """Undo radial barrel/pincushion distortion."""
    x, y = point
    cx, cy = CENTER

    # Normalize to [-1, 1] around the centre
    nx = (x - cx) * 2.0
    ny = (y - cy) * 2.0

    r2 = nx * nx + ny * ny
    barrel_factor = 1.0 + profile.barrel_distortion * r2
    pincushion_factor = 1.0 - profile.pincushion_distortion * r2
    denominator = barrel_factor * pincushion_factor or 1.0

    nx /= denominator
    ny /= denominator

    return (nx / 2.0 + cx, ny / 2.0 + cy)


def correct_skew(point: Point2D, profile: CalibrationProfile) -> Point2D:
    """Rotate the point about the image centre by -sensor_skew degrees."""
    if profile.sensor_skew == 0.0:
        return point
    x, y = point
    cx, cy = CENTER
    angle = math.radians(-profile.sensor_skew)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = x - cx
    dy = y - cy
    return (dx * cos_a - dy * sin_a + cx, dx * sin_a + dy * cos_a + cy)


def correct_aspect_ratio(point: Point2D, profile: CalibrationProfile) -> Point2D:
    """Scale y by the aspect correction when it deviates from 1 by 1% or more."""
    correction = profile.aspect_ratio_correction
    if abs(correction - 1.0) < ASPECT_TOLERANCE:
        return point
    return (point[0], point[1] * correction)


def apply_calibration(point: Point2D, profile: CalibrationProfile) -> Point2D:
    """Full correction chain: distortion -> skew -> aspect ratio."""
    corrected = correct_distortion(point, profile)
    corrected = correct_skew(corrected, profile)
    corrected = correct_aspect_ratio(corrected, profile)
    return corrected


def correct_keypoint(keypoint: Keypoint, profile: CalibrationProfile) -> Keypoint:
    """Correct one keypoint and clamp it back into the unit square.

    Keypoints with non-numeric coordinates are returned untouched so that
    validation can report them.
    """
    if not keypoint.is_finite:
        return keypoint
    x, y = apply_calibration((keypoint.x, keypoint.y), profile)
    return Keypoint(x=x, y=y, visibility=keypoint.visibility).clamped()


def correct_pose(pose: Pose, profile: CalibrationProfile) -> Pose:
    """Apply the correction chain to every present keypoint of a pose."""
    return Pose.from_keypoints(
        {label: correct_keypoint(keypoint, profile) for label, keypoint in pose.items()}
    )
