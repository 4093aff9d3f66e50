"""Built-in pose template catalog."""

from __future__ import annotations

from typing import Dict, Mapping, Tuple

from contracts import Keypoint, Pose, PoseTemplate
from exceptions import TemplateNotFoundError

_Point = Tuple[float, float, float]


def _pose(**points: _Point) -> Pose:
    return Pose.from_dict({label: Keypoint(*point) for label, point in points.items()})


def _template(
    template_id: str,
    name: str,
    description: str,
    difficulty: int,
    tips: Tuple[str, ...],
    **points: _Point,
) -> PoseTemplate:
    return PoseTemplate(
        template_id=template_id,
        name=name,
        target_pose=_pose(**points),
        difficulty=difficulty,
        description=description,
        category=template_id.split("_", 1)[0],
        tips=tips,
    )


_TEMPLATES = (
    _template(
        "portrait_natural", "Natural stance", "Relaxed, natural standing pose", 1,
        ("Relax the shoulders", "Let the hands hang naturally", "Turn the body slightly"),
        nose=(0.5, 0.22, 1.0),
        left_shoulder=(0.42, 0.4, 1.0), right_shoulder=(0.58, 0.4, 1.0),
        left_elbow=(0.38, 0.52, 0.9), right_elbow=(0.62, 0.52, 0.9),
        left_wrist=(0.35, 0.65, 0.85), right_wrist=(0.65, 0.65, 0.85),
        left_hip=(0.44, 0.68, 0.95), right_hip=(0.56, 0.68, 0.95),
    ),
    _template(
        "portrait_elegant", "Elegant gesture", "One hand touching the hair", 2,
        ("Left hand lightly in the hair", "Right hand resting naturally", "Tilt the head a little"),
        nose=(0.48, 0.2, 1.0),
        left_shoulder=(0.4, 0.38, 1.0), right_shoulder=(0.58, 0.38, 1.0),
        left_elbow=(0.32, 0.48, 0.9), right_elbow=(0.65, 0.5, 0.9),
        left_wrist=(0.28, 0.35, 0.85), right_wrist=(0.7, 0.62, 0.85),
        left_hip=(0.43, 0.66, 0.95), right_hip=(0.55, 0.66, 0.95),
    ),
    _template(
        "portrait_dynamic", "Dynamic", "Arms spread wide, full of energy", 3,
        ("Open both arms", "Show confidence", "Smile"),
        nose=(0.5, 0.2, 1.0),
        left_shoulder=(0.38, 0.38, 1.0), right_shoulder=(0.62, 0.38, 1.0),
        left_elbow=(0.28, 0.38, 0.9), right_elbow=(0.72, 0.38, 0.9),
        left_wrist=(0.18, 0.35, 0.85), right_wrist=(0.82, 0.35, 0.85),
        left_hip=(0.42, 0.66, 0.95), right_hip=(0.58, 0.66, 0.95),
    ),
    _template(
        "casual_lean", "Casual lean", "Leaning back slightly, at ease", 2,
        ("Lean back a little", "One hand in a pocket", "Keep the expression relaxed"),
        nose=(0.52, 0.25, 1.0),
        left_shoulder=(0.4, 0.42, 1.0), right_shoulder=(0.6, 0.42, 1.0),
        left_elbow=(0.35, 0.55, 0.9), right_elbow=(0.65, 0.5, 0.9),
        left_wrist=(0.32, 0.68, 0.8), right_wrist=(0.68, 0.62, 0.85),
        left_hip=(0.45, 0.7, 0.95), right_hip=(0.57, 0.7, 0.95),
    ),
    _template(
        "casual_sitting", "Seated", "Sitting upright with hands on the knees", 2,
        ("Keep the upper body straight", "Hands on the knees", "Legs together or crossed"),
        nose=(0.5, 0.25, 1.0),
        left_shoulder=(0.4, 0.42, 1.0), right_shoulder=(0.6, 0.42, 1.0),
        left_elbow=(0.38, 0.58, 0.9), right_elbow=(0.62, 0.58, 0.9),
        left_wrist=(0.35, 0.75, 0.85), right_wrist=(0.65, 0.75, 0.85),
        left_hip=(0.42, 0.72, 0.95), right_hip=(0.58, 0.72, 0.95),
        left_knee=(0.4, 0.85, 0.8), right_knee=(0.6, 0.85, 0.8),
    ),
    _template(
        "artistic_side", "Side profile", "Body turned 45 degrees to show the outline", 3,
        ("Turn the body 45 degrees", "Face the camera", "Show the body line"),
        nose=(0.55, 0.22, 1.0),
        left_shoulder=(0.45, 0.38, 1.0), right_shoulder=(0.62, 0.38, 1.0),
        left_elbow=(0.38, 0.5, 0.9), right_elbow=(0.68, 0.48, 0.9),
        left_wrist=(0.32, 0.65, 0.85), right_wrist=(0.75, 0.58, 0.85),
        left_hip=(0.43, 0.66, 0.95), right_hip=(0.58, 0.66, 0.95),
    ),
    _template(
        "artistic_triangle", "Triangle", "Arms forming triangles, a classic composition", 2,
        ("Hands on the waist", "Stable classic composition", "Works well for full-body shots"),
        nose=(0.5, 0.2, 1.0),
        left_shoulder=(0.38, 0.38, 1.0), right_shoulder=(0.62, 0.38, 1.0),
        left_elbow=(0.32, 0.52, 0.9), right_elbow=(0.68, 0.52, 0.9),
        left_wrist=(0.28, 0.7, 0.85), right_wrist=(0.72, 0.7, 0.85),
        left_hip=(0.42, 0.68, 0.95), right_hip=(0.58, 0.68, 0.95),
    ),
    _template(
        "couple_close", "Close together", "Two people close, showing intimacy", 2,
        ("Stand close", "Heads slightly together", "Show the connection"),
        nose=(0.4, 0.25, 1.0),
        left_shoulder=(0.32, 0.42, 1.0), right_shoulder=(0.48, 0.42, 1.0),
    ),
    _template(
        "couple_back_to_back", "Back to back", "Standing back to back", 3,
        ("Stand back to back", "Both look at the camera", "Show personality"),
        nose=(0.35, 0.22, 1.0),
        left_shoulder=(0.28, 0.4, 1.0), right_shoulder=(0.42, 0.4, 1.0),
    ),
)

BUILTIN_TEMPLATES: Mapping[str, PoseTemplate] = {template.template_id: template for template in _TEMPLATES}


def builtin_templates() -> Dict[str, PoseTemplate]:
    """Fresh copy of the built-in catalog, safe for callers to extend."""
    return dict(BUILTIN_TEMPLATES)


def get_template(catalog: Mapping[str, PoseTemplate], template_id: str) -> PoseTemplate:
    """Look up a template by id.

    Raises:
        TemplateNotFoundError: If ``template_id`` is not in the catalog
    """
    try:
        return catalog[template_id]
    except KeyError:
        raise TemplateNotFoundError(f"Unknown pose template: {template_id!r}", template_id=template_id)
