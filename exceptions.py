"""Custom exception classes for the pose guide core.

Frame data never raises: bad keypoints surface as validation issues. These
exceptions cover the host-facing boundary (configuration, persistence,
template catalogs).
"""

from __future__ import annotations

from typing import Optional


class PoseGuideError(Exception):
    """Base exception for all pose guide errors."""

    pass


class ConfigError(PoseGuideError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)


class CalibrationStoreError(PoseGuideError):
    """Raised when a calibration store cannot be read or written."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class TemplateError(PoseGuideError):
    """Base exception for pose template errors."""

    pass


class TemplateNotFoundError(TemplateError):
    """Raised when a template id is not present in the catalog."""

    def __init__(self, message: str, template_id: Optional[str] = None):
        self.template_id = template_id
        super().__init__(message)


class InvalidTemplateError(TemplateError):
    """Raised when a template definition is malformed."""

    pass
