"""Weighted distance scoring and adjustment generation against a target pose."""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

from contracts import Adjustment, Direction, Keypoint, KeypointLabel, Pose, Urgency
from matching.weights import BODY_PART_WEIGHTS, weight_for

DISTANCE_CAP = 0.3
ADJUSTMENT_MIN_DISTANCE = 0.05


def keypoint_error(observed: Keypoint, target: Keypoint, cap: float = DISTANCE_CAP) -> float:
    """Normalized error in [0, 1]; distances at or beyond ``cap`` saturate to 1."""
    return min(1.0, observed.distance_to(target) / cap)


def calculate_match_score(
    observed: Pose,
    target: Pose,
    weights: Optional[Dict[KeypointLabel, float]] = None,
    cap: float = DISTANCE_CAP,
) -> Tuple[float, int]:
    """Weighted mean error over labels present in both poses, as a 0-100 score.

    Returns:
        (score, compared_keypoints); no comparable labels scores 0
    """
    weights = BODY_PART_WEIGHTS if weights is None else weights
    weighted_error = 0.0
    total_weight = 0.0
    compared = 0

    for label, target_kp in target.items():
        observed_kp = observed.get(label)
        if observed_kp is None or not observed_kp.is_finite:
            continue
        weight = weight_for(label, weights)
        weighted_error += keypoint_error(observed_kp, target_kp, cap) * weight
        total_weight += weight
        compared += 1

    if compared == 0 or total_weight <= 0:
        return 0.0, 0

    avg_error = weighted_error / total_weight
    score = max(0.0, min(100.0, (1.0 - avg_error) * 100.0))
    return round(score, 2), compared


def _direction(dx: float, dy: float) -> Direction:
    if abs(dx) > abs(dy):
        return Direction.LEFT if dx < 0 else Direction.RIGHT
    return Direction.UP if dy < 0 else Direction.DOWN


def _urgency(weight: float, distance: float) -> Urgency:
    urgency = Urgency.LOW
    if weight >= 1.5 and distance > 0.1:
        urgency = Urgency.HIGH
    elif weight >= 1.0 and distance > 0.08:
        urgency = Urgency.MEDIUM
    # Large misses are always urgent, whatever the weight
    if distance > 0.15:
        urgency = Urgency.HIGH
    return urgency


def generate_adjustments(
    observed: Pose,
    target: Pose,
    weights: Optional[Dict[KeypointLabel, float]] = None,
    min_distance: float = ADJUSTMENT_MIN_DISTANCE,
) -> List[Adjustment]:
    """Moves that bring ``observed`` toward ``target``, most urgent first.

    Direction is the dominant axis of ``target - observed``; ties go to the
    vertical axis.
    """
    weights = BODY_PART_WEIGHTS if weights is None else weights
    adjustments: List[Adjustment] = []

    for label, target_kp in target.items():
        observed_kp = observed.get(label)
        if observed_kp is None or not observed_kp.is_finite:
            continue
        distance = observed_kp.distance_to(target_kp)
        if distance <= min_distance:
            continue

        weight = weight_for(label, weights)
        adjustments.append(Adjustment(
            label=label,
            direction=_direction(target_kp.x - observed_kp.x, target_kp.y - observed_kp.y),
            magnitude=int(math.floor(distance * 100 + 0.5)),
            urgency=_urgency(weight, distance),
            distance=distance,
            weight=weight,
        ))

    adjustments.sort(key=lambda adj: (adj.urgency.rank, -adj.magnitude))
    return adjustments
