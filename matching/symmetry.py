"""Left/right symmetry and pose difficulty."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from contracts import SYMMETRY_PAIRS, KeypointLabel, Pose

ASYMMETRY_THRESHOLD = 0.1
MAX_DIFFICULTY = 5


@dataclass(frozen=True)
class SymmetryResult:
    score: float  # 0-100
    asymmetrical_parts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DifficultyEstimate:
    difficulty: int  # 1-5
    factors: Tuple[str, ...] = ()


def calculate_symmetry(pose: Pose, threshold: float = ASYMMETRY_THRESHOLD) -> SymmetryResult:
    """Compare each left keypoint, mirrored about x = 0.5, with its right twin.

    Pairs with either side missing are skipped; a pose with no complete pair
    is treated as perfectly symmetric.
    """
    total_deviation = 0.0
    pair_count = 0
    asymmetrical: List[str] = []

    for left_label, right_label in SYMMETRY_PAIRS:
        left = pose.get(left_label)
        right = pose.get(right_label)
        if left is None or right is None or not (left.is_finite and right.is_finite):
            continue

        deviation = math.hypot((1.0 - left.x) - right.x, left.y - right.y)
        total_deviation += deviation
        pair_count += 1
        if deviation > threshold:
            asymmetrical.append(left_label.value.replace("left_", ""))

    if pair_count == 0:
        return SymmetryResult(score=100.0)

    avg_deviation = total_deviation / pair_count
    score = max(0.0, min(100.0, 100.0 - avg_deviation * 200.0))
    return SymmetryResult(score=round(score, 2), asymmetrical_parts=tuple(asymmetrical))


def estimate_difficulty(pose: Pose) -> DifficultyEstimate:
    """Rough 1-5 rating of how hard a pose is to hold."""
    factors: List[str] = []
    score = 1.0

    visible = sum(1 for _, kp in pose.items() if kp.visibility > 0.5)
    if visible > 10:
        score += 1.0
        factors.append("many body parts to control")

    if calculate_symmetry(pose).score < 70:
        score += 1.0
        factors.append("asymmetrical pose")

    for side in ("left", "right"):
        elbow = pose.get(KeypointLabel(f"{side}_elbow"))
        shoulder = pose.get(KeypointLabel(f"{side}_shoulder"))
        if elbow and shoulder and elbow.y < shoulder.y:
            score += 0.5
            factors.append(f"{side} arm raised")

    difficulty = min(MAX_DIFFICULTY, int(math.floor(score + 0.5)))
    return DifficultyEstimate(difficulty=difficulty, factors=tuple(factors))
