"""Pose validation: completeness, visibility, coordinate range, and anatomy."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Set

from configs.settings import ValidationConfig
from contracts import (
    CRITICAL_LABELS,
    IssueCode,
    KeypointLabel,
    Pose,
    QualityTier,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from log_config.logger import get_logger
from validation.anatomy import check_anatomical_consistency, detect_pose_anomalies

logger = get_logger(__name__)

MISSING_CRITICAL_IMPACT = 0.4
LOW_VISIBILITY_IMPACT = 0.3
NON_NUMERIC_IMPACT = 0.5
OUT_OF_RANGE_IMPACT = 0.2


@dataclass(frozen=True)
class QualityMetrics:
    completeness: float  # share of the 17 labels present with visibility > 0
    visibility: float  # mean visibility of present keypoints
    stability: float  # 1 - 0.15 per anatomical inconsistency
    overall: float


def quality_tier(issues: List[ValidationIssue], confidence: float) -> QualityTier:
    """Map issues and aggregate confidence to a tier (first match wins)."""
    critical = sum(1 for issue in issues if issue.severity is Severity.CRITICAL)
    warnings = sum(1 for issue in issues if issue.severity is Severity.WARNING)

    if critical > 0 or confidence < 0.3:
        return QualityTier.POOR
    if warnings <= 2 and confidence >= 0.7:
        return QualityTier.EXCELLENT
    if warnings <= 4 and confidence >= 0.5:
        return QualityTier.GOOD
    return QualityTier.FAIR


class PoseValidator:
    """Decides whether a pose is trustworthy enough to drive feedback."""

    def __init__(self, config: Optional[ValidationConfig] = None):
        self.config = config or ValidationConfig()
        self._issues: List[ValidationIssue] = []

    def validate(
        self,
        pose: Pose,
        strict: Optional[bool] = None,
        raw_pose: Optional[Pose] = None,
    ) -> ValidationResult:
        """Validate a pose.

        Args:
            pose: Pose to validate (normally the smoothed pose)
            strict: Treat out-of-range coordinates as critical; defaults to
                the configured value
            raw_pose: Unprocessed input frame; when given, coordinate checks
                run on it so range violations fixed downstream are still
                reported

        Returns:
            ValidationResult
        """
        strict = self.config.strict if strict is None else strict
        self._issues = []

        coordinate_pose = raw_pose if raw_pose is not None else pose
        # Non-numeric labels are reported as invalid coordinates, not as missing
        non_numeric = {label for label, kp in coordinate_pose.items() if not kp.is_finite}

        self._validate_completeness(pose, exclude=non_numeric)
        self._validate_visibility(pose)
        self._validate_coordinates(coordinate_pose, strict)

        finite_pose = _finite_only(pose)
        self._issues.extend(check_anatomical_consistency(finite_pose, self.config))
        self._issues.extend(detect_pose_anomalies(finite_pose, self.config))

        total_impact = sum(issue.confidence_impact for issue in self._issues)
        confidence = max(0.0, 1.0 - total_impact)
        quality = quality_tier(self._issues, confidence)
        critical = sum(1 for issue in self._issues if issue.severity is Severity.CRITICAL)

        result = ValidationResult(
            is_valid=critical == 0,
            confidence=confidence,
            issues=tuple(self._issues),
            quality=quality,
        )

        if quality is QualityTier.POOR:
            logger.warning(f"Pose quality poor: {critical} critical issue(s), confidence {confidence:.2f}")
        return result

    def _validate_completeness(self, pose: Pose, exclude: Set[KeypointLabel] = frozenset()) -> None:
        missing = [
            label.value for label in CRITICAL_LABELS
            if pose.get(label) is None and label not in exclude
        ]
        if missing:
            self._issues.append(ValidationIssue(
                code=IssueCode.MISSING_KEYPOINT,
                severity=Severity.CRITICAL,
                message=f"Missing critical keypoints: {', '.join(missing)}",
                affected_parts=tuple(missing),
                confidence_impact=MISSING_CRITICAL_IMPACT * len(missing),
            ))

    def _validate_visibility(self, pose: Pose) -> None:
        low_visibility: List[str] = []
        for label, keypoint in pose.items():
            visibility = keypoint.visibility
            if math.isfinite(visibility) and visibility >= self.config.min_visibility:
                continue
            if label in CRITICAL_LABELS:
                self._issues.append(ValidationIssue(
                    code=IssueCode.LOW_VISIBILITY,
                    severity=Severity.CRITICAL,
                    message=f"{label.value} visibility too low",
                    affected_parts=(label.value,),
                    confidence_impact=LOW_VISIBILITY_IMPACT,
                ))
            else:
                low_visibility.append(label.value)

        if low_visibility:
            self._issues.append(ValidationIssue(
                code=IssueCode.LOW_VISIBILITY,
                severity=Severity.WARNING,
                message=f"Low visibility: {', '.join(low_visibility)}",
                affected_parts=tuple(low_visibility),
            ))

    def _validate_coordinates(self, pose: Pose, strict: bool) -> None:
        for label, keypoint in pose.items():
            if not keypoint.is_finite:
                self._issues.append(ValidationIssue(
                    code=IssueCode.INVALID_COORDINATE,
                    severity=Severity.CRITICAL,
                    message=f"{label.value} coordinates are not numbers",
                    affected_parts=(label.value,),
                    confidence_impact=NON_NUMERIC_IMPACT,
                ))
                continue

            if not keypoint.in_range:
                self._issues.append(ValidationIssue(
                    code=IssueCode.INVALID_COORDINATE,
                    severity=Severity.CRITICAL if strict else Severity.WARNING,
                    message=f"{label.value} out of range (x: {keypoint.x:.2f}, y: {keypoint.y:.2f})",
                    affected_parts=(label.value,),
                    confidence_impact=OUT_OF_RANGE_IMPACT,
                ))


def _finite_only(pose: Pose) -> Pose:
    return Pose.from_keypoints({label: kp for label, kp in pose.items() if kp.is_finite})


def validate_pose(
    pose: Pose,
    strict: bool = False,
    config: Optional[ValidationConfig] = None,
) -> ValidationResult:
    """Convenience wrapper around PoseValidator."""
    return PoseValidator(config).validate(pose, strict=strict)


def ensure_pose_quality(
    pose: Pose,
    min_tier: QualityTier = QualityTier.GOOD,
    config: Optional[ValidationConfig] = None,
) -> Pose:
    """Return a repaired pose only if repair lifts it to ``min_tier``.

    Repair clamps coordinates and visibilities into [0, 1] and drops
    non-numeric keypoints, then re-validates once. A failed repair returns
    the original pose unchanged.
    """
    validator = PoseValidator(config)
    current = validator.validate(pose)
    if current.quality.rank >= min_tier.rank:
        return pose

    repaired = pose.clamped()
    revalidated = validator.validate(repaired)
    if revalidated.quality.rank >= min_tier.rank:
        logger.debug(f"Pose repaired from {current.quality.value} to {revalidated.quality.value}")
        return repaired
    return pose


def pose_quality_metrics(pose: Pose, config: Optional[ValidationConfig] = None) -> QualityMetrics:
    """Summary quality figures for dashboards and pose ranking."""
    config = config or ValidationConfig()
    total = len(KeypointLabel)
    present = [kp for _, kp in pose.items()]

    completeness = sum(1 for kp in present if kp.visibility > 0) / total

    visibilities = [kp.visibility for kp in present if math.isfinite(kp.visibility)]
    visibility = sum(visibilities) / len(visibilities) if visibilities else 0.0

    anatomical = check_anatomical_consistency(_finite_only(pose), config)
    stability = max(0.0, 1.0 - len(anatomical) * 0.15)

    overall = completeness * 0.4 + visibility * 0.3 + stability * 0.3
    return QualityMetrics(
        completeness=completeness,
        visibility=visibility,
        stability=stability,
        overall=overall,
    )
