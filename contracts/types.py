"""Core data contracts for keypoints, poses, calibration, validation, and matching."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from log_config.logger import get_logger

logger = get_logger(__name__)


class KeypointLabel(str, Enum):
    """The 17 canonical body landmarks, in canonical order."""

    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"


CRITICAL_LABELS: Tuple[KeypointLabel, ...] = (
    KeypointLabel.NOSE,
    KeypointLabel.LEFT_SHOULDER,
    KeypointLabel.RIGHT_SHOULDER,
)

# (left, right) pairs compared by mirror symmetry
SYMMETRY_PAIRS: Tuple[Tuple[KeypointLabel, KeypointLabel], ...] = (
    (KeypointLabel.LEFT_SHOULDER, KeypointLabel.RIGHT_SHOULDER),
    (KeypointLabel.LEFT_ELBOW, KeypointLabel.RIGHT_ELBOW),
    (KeypointLabel.LEFT_WRIST, KeypointLabel.RIGHT_WRIST),
    (KeypointLabel.LEFT_HIP, KeypointLabel.RIGHT_HIP),
    (KeypointLabel.LEFT_KNEE, KeypointLabel.RIGHT_KNEE),
    (KeypointLabel.LEFT_ANKLE, KeypointLabel.RIGHT_ANKLE),
)


def clamp_unit(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, value))


def _coerce_float(value: Any) -> float:
    # Non-numeric input becomes NaN so validation can report it.
    if isinstance(value, bool) or value is None:
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


@dataclass(frozen=True)
class Keypoint:
    """Normalized image-space landmark with detection confidence."""

    x: float
    y: float
    visibility: float = 0.0

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @property
    def in_range(self) -> bool:
        return self.is_finite and 0.0 <= self.x <= 1.0 and 0.0 <= self.y <= 1.0

    def distance_to(self, other: "Keypoint") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def clamped(self) -> "Keypoint":
        visibility = self.visibility if math.isfinite(self.visibility) else 0.0
        return Keypoint(
            x=clamp_unit(self.x),
            y=clamp_unit(self.y),
            visibility=clamp_unit(visibility),
        )

    @classmethod
    def from_value(cls, value: Any) -> "Keypoint":
        """Build a keypoint from a Keypoint, a mapping, or an (x, y[, v]) sequence."""
        if isinstance(value, Keypoint):
            return value
        if isinstance(value, Mapping):
            return cls(
                x=_coerce_float(value.get("x")),
                y=_coerce_float(value.get("y")),
                visibility=_coerce_float(value.get("visibility", 0.0)),
            )
        try:
            items = list(value)
        except TypeError:
            items = []
        if isinstance(value, (str, bytes)) or len(items) < 2:
            return cls(x=float("nan"), y=float("nan"), visibility=0.0)
        visibility = items[2] if len(items) > 2 else 0.0
        return cls(x=_coerce_float(items[0]), y=_coerce_float(items[1]), visibility=_coerce_float(visibility))

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "visibility": self.visibility}


@dataclass(frozen=True)
class Pose:
    """Closed record of the 17 canonical keypoints; absent means not observed."""

    nose: Optional[Keypoint] = None
    left_eye: Optional[Keypoint] = None
    right_eye: Optional[Keypoint] = None
    left_ear: Optional[Keypoint] = None
    right_ear: Optional[Keypoint] = None
    left_shoulder: Optional[Keypoint] = None
    right_shoulder: Optional[Keypoint] = None
    left_elbow: Optional[Keypoint] = None
    right_elbow: Optional[Keypoint] = None
    left_wrist: Optional[Keypoint] = None
    right_wrist: Optional[Keypoint] = None
    left_hip: Optional[Keypoint] = None
    right_hip: Optional[Keypoint] = None
    left_knee: Optional[Keypoint] = None
    right_knee: Optional[Keypoint] = None
    left_ankle: Optional[Keypoint] = None
    right_ankle: Optional[Keypoint] = None

    def get(self, label: KeypointLabel | str) -> Optional[Keypoint]:
        return getattr(self, KeypointLabel(label).value)

    def items(self) -> Iterator[Tuple[KeypointLabel, Keypoint]]:
        """Yield present keypoints in canonical label order."""
        for label in KeypointLabel:
            keypoint = self.get(label)
            if keypoint is not None:
                yield label, keypoint

    def present_labels(self) -> Tuple[KeypointLabel, ...]:
        return tuple(label for label, _ in self.items())

    def with_keypoint(self, label: KeypointLabel | str, keypoint: Optional[Keypoint]) -> "Pose":
        return replace(self, **{KeypointLabel(label).value: keypoint})

    def clamped(self) -> "Pose":
        """Return a copy with every coordinate and visibility clamped to [0, 1].

        Keypoints whose coordinates are not numbers are dropped.
        """
        values = {}
        for label, keypoint in self.items():
            values[label.value] = keypoint.clamped() if keypoint.is_finite else None
        return Pose(**values)

    @classmethod
    def from_keypoints(cls, keypoints: Mapping[KeypointLabel, Optional[Keypoint]]) -> "Pose":
        return cls(**{KeypointLabel(label).value: kp for label, kp in keypoints.items()})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pose":
        """Build a pose from a label-keyed mapping.

        Unknown labels are ignored; the label set is closed.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Optional[Keypoint]] = {}
        for key, value in data.items():
            if key not in known:
                logger.debug(f"Ignoring unknown keypoint label: {key!r}")
                continue
            values[key] = None if value is None else Keypoint.from_value(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {label.value: keypoint.to_dict() for label, keypoint in self.items()}


@dataclass(frozen=True)
class CalibrationProfile:
    """Systematic optical/sensor bias of one camera. The default is the identity."""

    barrel_distortion: float = 0.0
    pincushion_distortion: float = 0.0
    chromatic_aberration: float = 0.0
    sensor_skew: float = 0.0  # degrees
    aspect_ratio_correction: float = 1.0
    camera_tilt: Tuple[float, float] = (0.0, 0.0)  # degrees (x, y)
    camera_offset: Tuple[float, float] = (0.0, 0.0)
    fov_horizontal: float = 70.0
    fov_vertical: float = 50.0
    calibration_quality: float = 70.0  # 0-100
    calibration_date: float = field(default_factory=time.time)  # epoch seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "barrel_distortion": self.barrel_distortion,
            "pincushion_distortion": self.pincushion_distortion,
            "chromatic_aberration": self.chromatic_aberration,
            "sensor_skew": self.sensor_skew,
            "aspect_ratio_correction": self.aspect_ratio_correction,
            "camera_tilt": list(self.camera_tilt),
            "camera_offset": list(self.camera_offset),
            "fov_horizontal": self.fov_horizontal,
            "fov_vertical": self.fov_vertical,
            "calibration_quality": self.calibration_quality,
            "calibration_date": self.calibration_date,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CalibrationProfile":
        """Build a profile from stored values merged over the defaults."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                continue
            if key in ("camera_tilt", "camera_offset"):
                values[key] = (float(value[0]), float(value[1]))
            else:
                values[key] = float(value)
        return cls(**values)


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class IssueCode(str, Enum):
    MISSING_KEYPOINT = "missing_keypoint"
    LOW_VISIBILITY = "low_visibility"
    INVALID_COORDINATE = "invalid_coordinate"
    ANATOMICAL_ANOMALY = "anatomical_anomaly"
    INCONSISTENT_GEOMETRY = "inconsistent_geometry"
    STALE_CALIBRATION = "stale_calibration"


class QualityTier(str, Enum):
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    @classmethod
    def worst(cls, *tiers: "QualityTier") -> "QualityTier":
        return min(tiers, key=lambda tier: tier.rank)


_TIER_RANK = {
    QualityTier.POOR: 0,
    QualityTier.FAIR: 1,
    QualityTier.GOOD: 2,
    QualityTier.EXCELLENT: 3,
}


@dataclass(frozen=True)
class ValidationIssue:
    code: IssueCode
    severity: Severity
    message: str
    affected_parts: Tuple[str, ...] = ()
    confidence_impact: float = 0.0


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    confidence: float
    issues: Tuple[ValidationIssue, ...]
    quality: QualityTier

    @property
    def critical_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is Severity.CRITICAL)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is Severity.WARNING)

    def issues_with_code(self, code: IssueCode) -> Tuple[ValidationIssue, ...]:
        return tuple(issue for issue in self.issues if issue.code is code)


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Urgency(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _URGENCY_RANK[self]


# Sort key: high first
_URGENCY_RANK = {
    Urgency.HIGH: 0,
    Urgency.MEDIUM: 1,
    Urgency.LOW: 2,
}


@dataclass(frozen=True)
class Adjustment:
    label: KeypointLabel
    direction: Direction
    magnitude: int  # distance in hundredths of the frame
    urgency: Urgency
    distance: float
    weight: float


@dataclass(frozen=True)
class MatchResult:
    score: float  # 0-100
    adjustments: Tuple[Adjustment, ...]
    symmetry_score: float  # 0-100
    asymmetrical_parts: Tuple[str, ...] = ()
    compared_keypoints: int = 0
    matched_keypoints: int = 0  # compared keypoints within the match threshold


@dataclass(frozen=True)
class PoseTemplate:
    """Reference pose to guide a subject toward. Never mutated by the pipeline."""

    template_id: str
    name: str
    target_pose: Pose
    difficulty: int = 1
    description: str = ""
    category: str = "general"
    tips: Tuple[str, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 1 <= self.difficulty <= 5:
            raise ValueError(f"Template difficulty must be in [1, 5], got {self.difficulty}")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
