"""Calibration profile quality checks."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from contracts import CalibrationProfile, QualityTier
from log_config.logger import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


class CalibrationFlag(str, Enum):
    BARREL_DISTORTION = "barrel_distortion"
    PINCUSHION_DISTORTION = "pincushion_distortion"
    SENSOR_SKEW = "sensor_skew"
    ASPECT_RATIO = "aspect_ratio"
    STALE = "stale"
    LOW_QUALITY = "low_quality"


@dataclass(frozen=True)
class CalibrationIssue:
    flag: CalibrationFlag
    message: str
    tier: QualityTier  # best tier still reachable with this issue present


@dataclass(frozen=True)
class CalibrationReport:
    is_valid: bool
    quality: QualityTier
    issues: Tuple[CalibrationIssue, ...]

    def has_flag(self, flag: CalibrationFlag) -> bool:
        return any(issue.flag is flag for issue in self.issues)


def calibration_age_days(profile: CalibrationProfile, now: Optional[float] = None) -> float:
    now = time.time() if now is None else now
    return (now - profile.calibration_date) / SECONDS_PER_DAY


def is_stale(profile: CalibrationProfile, max_age_days: float = 30.0, now: Optional[float] = None) -> bool:
    return calibration_age_days(profile, now) > max_age_days


def validate_calibration(
    profile: CalibrationProfile,
    now: Optional[float] = None,
    max_age_days: float = 30.0,
) -> CalibrationReport:
    """Check a profile for out-of-range parameters, staleness and low quality.

    Each check is independent. The tier is the worst one triggered; a later
    check never upgrades an earlier verdict.

    Args:
        profile: Profile to check
        now: Current time in epoch seconds (defaults to time.time())
        max_age_days: Age after which the profile counts as stale

    Returns:
        CalibrationReport with tier and issues
    """
    issues: List[CalibrationIssue] = []

    if abs(profile.barrel_distortion) > 0.3:
        issues.append(CalibrationIssue(
            CalibrationFlag.BARREL_DISTORTION,
            f"Barrel distortion {profile.barrel_distortion:.2f} outside normal range",
            QualityTier.POOR,
        ))
    if abs(profile.pincushion_distortion) > 0.3:
        issues.append(CalibrationIssue(
            CalibrationFlag.PINCUSHION_DISTORTION,
            f"Pincushion distortion {profile.pincushion_distortion:.2f} outside normal range",
            QualityTier.POOR,
        ))

    if abs(profile.sensor_skew) > 5.0:
        issues.append(CalibrationIssue(
            CalibrationFlag.SENSOR_SKEW,
            f"Sensor skew {profile.sensor_skew:.1f} degrees is too large",
            QualityTier.FAIR,
        ))

    if profile.aspect_ratio_correction < 0.9 or profile.aspect_ratio_correction > 1.1:
        issues.append(CalibrationIssue(
            CalibrationFlag.ASPECT_RATIO,
            f"Aspect ratio correction {profile.aspect_ratio_correction:.3f} outside [0.9, 1.1]",
            QualityTier.FAIR,
        ))

    age_days = calibration_age_days(profile, now)
    if age_days > max_age_days:
        issues.append(CalibrationIssue(
            CalibrationFlag.STALE,
            f"Calibration is {age_days:.0f} days old (limit {max_age_days:.0f})",
            QualityTier.GOOD,
        ))

    if profile.calibration_quality < 50:
        issues.append(CalibrationIssue(
            CalibrationFlag.LOW_QUALITY,
            f"Calibration quality {profile.calibration_quality:.0f} below 50",
            QualityTier.POOR,
        ))
    elif profile.calibration_quality < 70:
        issues.append(CalibrationIssue(
            CalibrationFlag.LOW_QUALITY,
            f"Calibration quality {profile.calibration_quality:.0f} below 70",
            QualityTier.FAIR,
        ))

    quality = QualityTier.worst(QualityTier.EXCELLENT, *(issue.tier for issue in issues))
    if issues:
        logger.debug(f"Calibration check: {quality.value} with {len(issues)} issue(s)")

    return CalibrationReport(
        is_valid=quality is not QualityTier.POOR,
        quality=quality,
        issues=tuple(issues),
    )


def calibration_recommendations(profile: CalibrationProfile) -> List[str]:
    """Suggested operator actions for a profile."""
    recommendations: List[str] = []

    if abs(profile.barrel_distortion) > 0.2:
        recommendations.append("Recalibrate lens distortion settings")

    if abs(profile.sensor_skew) > 2.0:
        recommendations.append(f"Adjust camera angle by {profile.sensor_skew:.1f} degrees")

    if abs(profile.aspect_ratio_correction - 1.0) > 0.1:
        recommendations.append("Check the sensor aspect ratio setting")

    tilt_x, tilt_y = profile.camera_tilt
    if abs(tilt_x) > 3.0 or abs(tilt_y) > 3.0:
        recommendations.append("Level the camera")

    if profile.calibration_quality < 60:
        recommendations.append("Run camera calibration again for best accuracy")

    return recommendations
