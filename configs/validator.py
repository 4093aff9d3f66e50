"""Configuration validation using JSON Schema."""

from __future__ import annotations

from typing import Any, Dict

import jsonschema
from jsonschema import Draft7Validator, validators

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

_UNIT = {"type": "number", "minimum": 0.0, "maximum": 1.0}

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "smoothing": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "ema_factor": {**_UNIT, "default": 0.3},
                "min_confidence": {**_UNIT, "default": 0.3},
                "max_change": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 1.5, "default": 0.15},
                "outlier_threshold": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 10.0, "default": 3.0},
                "enable_kalman": {"type": "boolean", "default": True},
                "process_noise": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 10.0, "default": 0.01},
                "measurement_noise": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 10.0, "default": 0.1},
                "kalman_blend": {**_UNIT, "default": 0.5},
                "history_size": {"type": "integer", "minimum": 2, "maximum": 100, "default": 10},
                "visibility_decay": {**_UNIT, "default": 0.9},
                "stale_after_ms": {"type": "integer", "minimum": 1, "maximum": 60000, "default": 2000},
            },
        },
        "validation": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "strict": {"type": "boolean", "default": False},
                "min_visibility": {**_UNIT, "default": 0.3},
                "shoulder_tilt_max": {**_UNIT, "default": 0.15},
                "limb_ratio_min": {"type": "number", "minimum": 0.0, "default": 0.3},
                "limb_ratio_max": {"type": "number", "minimum": 0.0, "default": 2.0},
                "torso_offset_max": {**_UNIT, "default": 0.1},
                "torso_height_min": {**_UNIT, "default": 0.2},
                "torso_height_max": {**_UNIT, "default": 0.6},
            },
        },
        "matching": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "distance_cap": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 1.5, "default": 0.3},
                "adjustment_min_distance": {**_UNIT, "default": 0.05},
                "asymmetry_threshold": {**_UNIT, "default": 0.1},
                "match_threshold": {**_UNIT, "default": 0.15},
            },
        },
        "calibration": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "max_age_days": {"type": "number", "exclusiveMinimum": 0.0, "default": 30.0},
                "store_key": {"type": "string", "minLength": 1, "default": "camera-calibration"},
                "apply_correction": {"type": "boolean", "default": True},
            },
        },
        "telemetry": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "latency_warn_ms": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 5000, "default": 20.0},
                "max_samples": {"type": "integer", "minimum": 1, "maximum": 100000, "default": 1000},
            },
        },
    },
}


def extend_with_default(validator_class):
    """Extend JSON Schema validator to set default values."""
    validate_properties = validator_class.VALIDATORS["properties"]

    def set_defaults(validator, properties, instance, schema):
        if isinstance(instance, dict):
            for prop, subschema in properties.items():
                if "default" in subschema:
                    instance.setdefault(prop, subschema["default"])

        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {"properties": set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration against JSON Schema.

    Defaults from the schema are filled into ``config`` in place.

    Args:
        config: Configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    try:
        validator = DefaultValidatingValidator(CONFIG_SCHEMA)
        errors = list(validator.iter_errors(config))

        if errors:
            error_messages = []
            for error in errors:
                path = " -> ".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            logger.error(f"Configuration validation failed with {len(errors)} errors")
            for msg in error_messages:
                logger.error(f"  - {msg}")

            raise ConfigValidationError(
                f"Configuration validation failed with {len(errors)} error(s). See logs for details.",
                validation_errors=error_messages,
            )

        logger.debug("Configuration validation passed")

    except jsonschema.exceptions.SchemaError as e:
        logger.error(f"Invalid schema: {e}")
        raise ConfigValidationError(f"Invalid schema definition: {e}")


def validate_config_file(config_path: str) -> None:
    """Validate a YAML configuration file.

    Args:
        config_path: Path to configuration file

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    import yaml
    from pathlib import Path

    path = Path(config_path)
    if not path.exists():
        raise ConfigValidationError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigValidationError(f"Failed to parse configuration file: {e}")

    validate_config(config or {})


__all__ = ["validate_config", "validate_config_file", "CONFIG_SCHEMA"]
