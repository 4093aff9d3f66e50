"""Host-facing pose session."""

from .session import FrameResult, PoseSession

__all__ = ["FrameResult", "PoseSession"]
