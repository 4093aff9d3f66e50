"""Persist calibration profiles as JSON files (host-side store adapter)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from calib.store import KeyValueStore
from exceptions import CalibrationStoreError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileKeyValueStore(KeyValueStore):
    """One ``<key>.json`` file per key under a directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise CalibrationStoreError(f"Invalid store key: {key!r}", key=key)
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise CalibrationStoreError(f"Failed to read {path}: {e}", key=key)

    def put(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        except OSError as e:
            raise CalibrationStoreError(f"Failed to write {path}: {e}", key=key)
