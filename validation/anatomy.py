"""Anatomical consistency and anomaly heuristics for a single pose."""

from __future__ import annotations

from typing import List

from configs.settings import ValidationConfig
from contracts import IssueCode, KeypointLabel, Pose, Severity, ValidationIssue

L = KeypointLabel

ARMS = (
    ("left", L.LEFT_SHOULDER, L.LEFT_ELBOW, L.LEFT_WRIST),
    ("right", L.RIGHT_SHOULDER, L.RIGHT_ELBOW, L.RIGHT_WRIST),
)


def check_anatomical_consistency(pose: Pose, config: ValidationConfig) -> List[ValidationIssue]:
    """Shoulder level, forearm/upper-arm ratio, and torso alignment."""
    issues: List[ValidationIssue] = []

    left_shoulder = pose.get(L.LEFT_SHOULDER)
    right_shoulder = pose.get(L.RIGHT_SHOULDER)
    if left_shoulder and right_shoulder:
        y_diff = abs(left_shoulder.y - right_shoulder.y)
        if y_diff > config.shoulder_tilt_max:
            issues.append(ValidationIssue(
                code=IssueCode.INCONSISTENT_GEOMETRY,
                severity=Severity.WARNING,
                message=f"Shoulder height difference too large ({y_diff * 100:.1f}%)",
                affected_parts=(L.LEFT_SHOULDER.value, L.RIGHT_SHOULDER.value),
            ))

    for side, shoulder_label, elbow_label, wrist_label in ARMS:
        shoulder = pose.get(shoulder_label)
        elbow = pose.get(elbow_label)
        wrist = pose.get(wrist_label)
        if not (shoulder and elbow and wrist):
            continue
        upper_arm = shoulder.distance_to(elbow)
        forearm = elbow.distance_to(wrist)
        ratio = forearm / (upper_arm or 1.0)
        if ratio > config.limb_ratio_max or ratio < config.limb_ratio_min:
            issues.append(ValidationIssue(
                code=IssueCode.ANATOMICAL_ANOMALY,
                severity=Severity.WARNING,
                message=f"Abnormal {side} arm proportion (ratio {ratio:.2f})",
                affected_parts=(shoulder_label.value, elbow_label.value, wrist_label.value),
            ))

    left_hip = pose.get(L.LEFT_HIP)
    right_hip = pose.get(L.RIGHT_HIP)
    if left_shoulder and right_shoulder and left_hip and right_hip:
        shoulder_center = (left_shoulder.x + right_shoulder.x) / 2.0
        hip_center = (left_hip.x + right_hip.x) / 2.0
        offset = abs(shoulder_center - hip_center)
        if offset > config.torso_offset_max:
            issues.append(ValidationIssue(
                code=IssueCode.INCONSISTENT_GEOMETRY,
                severity=Severity.INFO,
                message=f"Torso off the centre line ({offset * 100:.1f}%)",
                affected_parts=(
                    L.LEFT_SHOULDER.value,
                    L.RIGHT_SHOULDER.value,
                    L.LEFT_HIP.value,
                    L.RIGHT_HIP.value,
                ),
            ))

    return issues


def detect_pose_anomalies(pose: Pose, config: ValidationConfig) -> List[ValidationIssue]:
    """Likely misdetections: raised wrists and implausible torso heights."""
    issues: List[ValidationIssue] = []

    for side, shoulder_label, elbow_label, wrist_label in ARMS:
        shoulder = pose.get(shoulder_label)
        elbow = pose.get(elbow_label)
        wrist = pose.get(wrist_label)
        if not (shoulder and elbow and wrist):
            continue
        if wrist.y < elbow.y and wrist.y < shoulder.y:
            issues.append(ValidationIssue(
                code=IssueCode.ANATOMICAL_ANOMALY,
                severity=Severity.WARNING,
                message=f"Unusual {side} wrist position (likely misdetection)",
                affected_parts=(wrist_label.value,),
            ))

    nose = pose.get(L.NOSE)
    left_hip = pose.get(L.LEFT_HIP)
    right_hip = pose.get(L.RIGHT_HIP)
    if nose and left_hip and right_hip:
        hip_y = (left_hip.y + right_hip.y) / 2.0
        torso_height = hip_y - nose.y
        parts = (L.NOSE.value, L.LEFT_HIP.value, L.RIGHT_HIP.value)
        if torso_height < config.torso_height_min:
            issues.append(ValidationIssue(
                code=IssueCode.ANATOMICAL_ANOMALY,
                severity=Severity.WARNING,
                message="Torso too short (possibly face only)",
                affected_parts=parts,
            ))
        elif torso_height > config.torso_height_max:
            issues.append(ValidationIssue(
                code=IssueCode.ANATOMICAL_ANOMALY,
                severity=Severity.INFO,
                message="Torso unusually tall (possibly perspective)",
                affected_parts=parts,
            ))

    return issues
