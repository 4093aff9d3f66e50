"""Load host-supplied pose template catalogs from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from jsonschema import Draft7Validator

from contracts import KeypointLabel, Pose, PoseTemplate
from exceptions import InvalidTemplateError
from log_config.logger import get_logger

logger = get_logger(__name__)

_KEYPOINT_SCHEMA = {
    "type": "object",
    "required": ["x", "y"],
    "additionalProperties": False,
    "properties": {
        "x": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "y": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "visibility": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
}

TEMPLATE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["templates"],
    "properties": {
        "templates": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["name", "pose"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "description": {"type": "string"},
                    "category": {"type": "string"},
                    "difficulty": {"type": "integer", "minimum": 1, "maximum": 5},
                    "tips": {"type": "array", "items": {"type": "string"}},
                    "metadata": {"type": "object"},
                    "pose": {
                        "type": "object",
                        "minProperties": 1,
                        "additionalProperties": False,
                        "properties": {label.value: _KEYPOINT_SCHEMA for label in KeypointLabel},
                    },
                },
            },
        },
    },
}


def template_from_dict(template_id: str, data: Mapping[str, Any]) -> PoseTemplate:
    pose = Pose.from_dict(data["pose"])
    return PoseTemplate(
        template_id=template_id,
        name=data["name"],
        target_pose=pose,
        difficulty=int(data.get("difficulty", 1)),
        description=data.get("description", ""),
        category=data.get("category", "general"),
        tips=tuple(data.get("tips", ())),
        metadata=dict(data.get("metadata", {})),
    )


def load_template_catalog(path: Path) -> Dict[str, PoseTemplate]:
    """Load a ``templates:`` mapping of id -> template definition.

    Raises:
        InvalidTemplateError: If the file is missing, unparsable, or fails
            schema validation
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidTemplateError(f"Failed to read template catalog {path}: {e}")
    except yaml.YAMLError as e:
        raise InvalidTemplateError(f"Failed to parse template catalog {path}: {e}")

    errors = sorted(Draft7Validator(TEMPLATE_SCHEMA).iter_errors(data), key=lambda e: list(e.path))
    if errors:
        messages = [f"{'.'.join(str(p) for p in error.path) or '<root>'}: {error.message}" for error in errors]
        for message in messages:
            logger.error(f"Template catalog error: {message}")
        raise InvalidTemplateError(f"Template catalog {path} is invalid: {messages[0]}")

    catalog = {
        template_id: template_from_dict(template_id, entry)
        for template_id, entry in data["templates"].items()
    }
    logger.info(f"Loaded {len(catalog)} pose template(s) from {path}")
    return catalog
