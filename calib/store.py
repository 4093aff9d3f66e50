"""Calibration persistence behind a host-supplied key-value port."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Dict, Optional

from contracts import CalibrationProfile
from contracts.versioning import make_envelope, open_envelope
from exceptions import CalibrationStoreError
from log_config.logger import get_logger

logger = get_logger(__name__)

DEFAULT_KEY = "camera-calibration"


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None when absent."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def put(self, key: str, value: str) -> None:
        self._values[key] = value


class CalibrationRepository:
    """Loads and saves a CalibrationProfile through a KeyValueStore."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> CalibrationProfile:
        """Return the stored profile merged over the defaults.

        Missing or unreadable data yields the default (identity) profile.
        """
        try:
            raw = self._store.get(self._key)
        except CalibrationStoreError as e:
            logger.warning(f"Failed to read calibration '{self._key}': {e}")
            return CalibrationProfile()

        if raw is None:
            logger.debug(f"No stored calibration under '{self._key}', using defaults")
            return CalibrationProfile()

        try:
            payload = open_envelope(json.loads(raw))
            profile = CalibrationProfile.from_dict(payload)
        except (ValueError, TypeError, KeyError, IndexError) as e:
            logger.warning(f"Stored calibration '{self._key}' is corrupt, using defaults: {e}")
            return CalibrationProfile()

        logger.info(f"Loaded calibration '{self._key}' (quality {profile.calibration_quality:.0f})")
        return profile

    def save(self, profile: CalibrationProfile) -> None:
        """Persist a profile.

        Raises:
            CalibrationStoreError: If the underlying store fails
        """
        self._store.put(self._key, json.dumps(make_envelope(profile.to_dict())))
        logger.info(f"Saved calibration '{self._key}'")
