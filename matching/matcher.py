"""Pose matcher: score an observed pose against a template."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from configs.settings import MatchingConfig
from contracts import KeypointLabel, MatchResult, Pose, PoseTemplate
from log_config.logger import get_logger
from matching.scoring import calculate_match_score, generate_adjustments
from matching.symmetry import calculate_symmetry
from matching.weights import BODY_PART_WEIGHTS

logger = get_logger(__name__)


@dataclass(frozen=True)
class TemplateMatch:
    template: PoseTemplate
    result: MatchResult


class PoseMatcher:
    """Quantifies distance from a template and proposes corrective moves."""

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        weights: Optional[Dict[KeypointLabel, float]] = None,
    ):
        self.config = config or MatchingConfig()
        self.weights = BODY_PART_WEIGHTS if weights is None else weights

    def _matched_keypoints(self, observed: Pose, target: Pose) -> int:
        count = 0
        for label, target_kp in target.items():
            observed_kp = observed.get(label)
            if observed_kp is not None and observed_kp.is_finite:
                if observed_kp.distance_to(target_kp) <= self.config.match_threshold:
                    count += 1
        return count

    def match(self, observed: Pose, template: PoseTemplate) -> MatchResult:
        """Score ``observed`` against ``template``.

        Symmetry is measured on the observed pose.
        """
        target = template.target_pose
        score, compared = calculate_match_score(
            observed, target, self.weights, cap=self.config.distance_cap
        )
        adjustments = generate_adjustments(
            observed, target, self.weights, min_distance=self.config.adjustment_min_distance
        )
        symmetry = calculate_symmetry(observed, threshold=self.config.asymmetry_threshold)

        return MatchResult(
            score=score,
            adjustments=tuple(adjustments),
            symmetry_score=symmetry.score,
            asymmetrical_parts=symmetry.asymmetrical_parts,
            compared_keypoints=compared,
            matched_keypoints=self._matched_keypoints(observed, target),
        )

    def find_best_template(
        self,
        pose: Pose,
        catalog: Mapping[str, PoseTemplate],
    ) -> Optional[TemplateMatch]:
        """Highest-scoring template in ``catalog``; ties keep catalog order."""
        best: Optional[TemplateMatch] = None
        for template in catalog.values():
            result = self.match(pose, template)
            if best is None or result.score > best.result.score:
                best = TemplateMatch(template=template, result=result)

        if best is not None:
            logger.debug(f"Best template: {best.template.template_id} ({best.result.score:.1f})")
        return best


def find_best_template(
    pose: Pose,
    catalog: Mapping[str, PoseTemplate],
    config: Optional[MatchingConfig] = None,
) -> Optional[TemplateMatch]:
    return PoseMatcher(config).find_best_template(pose, catalog)
