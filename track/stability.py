"""Pose stability over a window of frames."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

import numpy as np

from contracts import KeypointLabel, Pose


def calculate_pose_stability(history: Sequence[Pose]) -> Tuple[float, Dict[KeypointLabel, float]]:
    """Score how still each keypoint stayed across ``history``.

    Per-label stability is ``max(0, 1 - 10 * variance)`` where variance is the
    mean squared distance from the label's centroid. Labels seen in fewer
    than two frames are skipped.

    Returns:
        (overall, by_label); fewer than two frames scores 1.0 overall
    """
    if len(history) < 2:
        return 1.0, {}

    by_label: Dict[KeypointLabel, float] = {}
    for label in KeypointLabel:
        positions = [(kp.x, kp.y) for kp in (pose.get(label) for pose in history) if kp is not None]
        if len(positions) < 2:
            continue
        points = np.array(positions, dtype=np.float64)
        variance = float(np.mean(np.sum((points - points.mean(axis=0)) ** 2, axis=1)))
        by_label[label] = max(0.0, 1.0 - variance * 10.0)

    if not by_label:
        return 0.0, by_label
    overall = sum(by_label.values()) / len(by_label)
    return overall, by_label
