"""Body-part importance weights used by scoring and adjustments."""

from __future__ import annotations

from typing import Dict

from contracts import KeypointLabel

L = KeypointLabel

DEFAULT_WEIGHT = 1.0

# Face and torso anchors weigh most; unlisted labels fall back to DEFAULT_WEIGHT
BODY_PART_WEIGHTS: Dict[KeypointLabel, float] = {
    L.NOSE: 2.0,
    L.LEFT_EYE: 1.5,
    L.RIGHT_EYE: 1.5,
    L.LEFT_EAR: 1.0,
    L.RIGHT_EAR: 1.0,
    L.LEFT_SHOULDER: 1.8,
    L.RIGHT_SHOULDER: 1.8,
    L.LEFT_ELBOW: 1.2,
    L.RIGHT_ELBOW: 1.2,
    L.LEFT_WRIST: 1.0,
    L.RIGHT_WRIST: 1.0,
    L.LEFT_HIP: 1.5,
    L.RIGHT_HIP: 1.5,
    L.LEFT_KNEE: 0.8,
    L.RIGHT_KNEE: 0.8,
    L.LEFT_ANKLE: 0.5,
    L.RIGHT_ANKLE: 0.5,
}


def weight_for(label: KeypointLabel, weights: Dict[KeypointLabel, float] = BODY_PART_WEIGHTS) -> float:
    return weights.get(KeypointLabel(label), DEFAULT_WEIGHT)
