"""Framing feedback: posture and placement problems visible in a single pose."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from contracts import KeypointLabel, Pose, Urgency

L = KeypointLabel


@dataclass(frozen=True)
class FramingIssue:
    issue: str
    severity: Urgency
    affected_parts: Tuple[str, ...]
    suggestion: str


def detect_framing_issues(pose: Pose) -> List[FramingIssue]:
    """Return framing problems, most severe first."""
    issues: List[FramingIssue] = []

    left_shoulder = pose.get(L.LEFT_SHOULDER)
    right_shoulder = pose.get(L.RIGHT_SHOULDER)
    if left_shoulder and right_shoulder:
        if abs(left_shoulder.y - right_shoulder.y) > 0.05:
            issues.append(FramingIssue(
                issue="shoulders not level",
                severity=Urgency.HIGH,
                affected_parts=("shoulders",),
                suggestion="Keep the shoulders level and relaxed",
            ))

        width = abs(right_shoulder.x - left_shoulder.x)
        if width < 0.12:
            issues.append(FramingIssue(
                issue="shoulders too narrow",
                severity=Urgency.MEDIUM,
                affected_parts=("shoulders",),
                suggestion="Open the shoulders",
            ))
        elif width > 0.25:
            issues.append(FramingIssue(
                issue="shoulders too wide",
                severity=Urgency.LOW,
                affected_parts=("shoulders",),
                suggestion="Bring the shoulders in slightly",
            ))

    left_elbow = pose.get(L.LEFT_ELBOW)
    right_elbow = pose.get(L.RIGHT_ELBOW)
    if left_elbow and right_elbow and left_shoulder and right_shoulder:
        left_spread = abs(left_elbow.x - left_shoulder.x)
        right_spread = abs(right_elbow.x - right_shoulder.x)
        if left_spread > 0.3 or right_spread > 0.3:
            issues.append(FramingIssue(
                issue="arms spread too wide",
                severity=Urgency.MEDIUM,
                affected_parts=("arms",),
                suggestion="Bring the arms closer to the body",
            ))

    nose = pose.get(L.NOSE)
    if nose:
        if nose.y < 0.15:
            issues.append(FramingIssue(
                issue="head too high in frame",
                severity=Urgency.HIGH,
                affected_parts=("head",),
                suggestion="Lower the head to leave headroom",
            ))
        elif nose.y > 0.4:
            issues.append(FramingIssue(
                issue="head too low in frame",
                severity=Urgency.MEDIUM,
                affected_parts=("head",),
                suggestion="Raise the head",
            ))

    issues.sort(key=lambda item: item.severity.rank)
    return issues
