"""Configuration loading for the pose guide pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from configs.validator import validate_config
from exceptions import ConfigError, InvalidConfigError
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SmoothingConfig:
    ema_factor: float = 0.3  # lower = smoother, higher = more responsive
    min_confidence: float = 0.3
    max_change: float = 0.15  # max displacement per update (normalized)
    outlier_threshold: float = 3.0  # standard deviations
    enable_kalman: bool = True
    process_noise: float = 0.01
    measurement_noise: float = 0.1
    kalman_blend: float = 0.5  # weight of the Kalman position in the blend
    history_size: int = 10
    visibility_decay: float = 0.9
    stale_after_ms: int = 2000


@dataclass(frozen=True)
class ValidationConfig:
    strict: bool = False
    min_visibility: float = 0.3
    shoulder_tilt_max: float = 0.15
    limb_ratio_min: float = 0.3
    limb_ratio_max: float = 2.0
    torso_offset_max: float = 0.1
    torso_height_min: float = 0.2
    torso_height_max: float = 0.6


@dataclass(frozen=True)
class MatchingConfig:
    distance_cap: float = 0.3
    adjustment_min_distance: float = 0.05
    asymmetry_threshold: float = 0.1
    match_threshold: float = 0.15  # distance counted as a matched keypoint


@dataclass(frozen=True)
class CalibrationConfig:
    max_age_days: float = 30.0
    store_key: str = "camera-calibration"
    apply_correction: bool = True


@dataclass(frozen=True)
class TelemetryConfig:
    latency_warn_ms: float = 20.0
    max_samples: int = 1000


@dataclass(frozen=True)
class AppConfig:
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)


def default_config() -> AppConfig:
    """Return the built-in configuration (same values as configs/default.yaml)."""
    return AppConfig()


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    """Validate a configuration mapping and build an AppConfig.

    Missing sections and keys take their defaults.

    Raises:
        ConfigError: If configuration is invalid
    """
    data = data or {}
    validate_config(data)

    try:
        config = AppConfig(
            smoothing=SmoothingConfig(**data.get("smoothing", {})),
            validation=ValidationConfig(**data.get("validation", {})),
            matching=MatchingConfig(**data.get("matching", {})),
            calibration=CalibrationConfig(**data.get("calibration", {})),
            telemetry=TelemetryConfig(**data.get("telemetry", {})),
        )
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to construct configuration objects: {e}")
        raise InvalidConfigError(f"Failed to construct configuration: {e}")

    return config


def load_config(path: Path) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    try:
        logger.info(f"Loading configuration from {path}")
        if not path.exists():
            raise InvalidConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text())
        if data is not None and not isinstance(data, dict):
            raise InvalidConfigError(f"Configuration root must be a mapping: {path}")

    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")
    except OSError as e:
        logger.error(f"Failed to read configuration file: {e}")
        raise InvalidConfigError(f"Failed to read configuration file: {e}")

    config = config_from_dict(data or {})
    logger.info(
        f"Configuration loaded successfully: ema={config.smoothing.ema_factor}, "
        f"kalman={'on' if config.smoothing.enable_kalman else 'off'}, strict={config.validation.strict}"
    )
    return config


__all__ = [
    "AppConfig",
    "CalibrationConfig",
    "ConfigError",
    "MatchingConfig",
    "SmoothingConfig",
    "TelemetryConfig",
    "ValidationConfig",
    "config_from_dict",
    "default_config",
    "load_config",
]
