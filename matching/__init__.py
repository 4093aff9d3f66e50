"""Pose matching against reference templates."""

from .framing import FramingIssue, detect_framing_issues
from .matcher import PoseMatcher, TemplateMatch, find_best_template
from .scoring import calculate_match_score, generate_adjustments, keypoint_error
from .symmetry import DifficultyEstimate, SymmetryResult, calculate_symmetry, estimate_difficulty
from .templates import BUILTIN_TEMPLATES, builtin_templates, get_template
from .weights import BODY_PART_WEIGHTS, DEFAULT_WEIGHT, weight_for

__all__ = [
    "BODY_PART_WEIGHTS",
    "BUILTIN_TEMPLATES",
    "DEFAULT_WEIGHT",
    "DifficultyEstimate",
    "FramingIssue",
    "PoseMatcher",
    "SymmetryResult",
    "TemplateMatch",
    "builtin_templates",
    "calculate_match_score",
    "calculate_symmetry",
    "detect_framing_issues",
    "estimate_difficulty",
    "find_best_template",
    "generate_adjustments",
    "get_template",
    "keypoint_error",
    "weight_for",
]
