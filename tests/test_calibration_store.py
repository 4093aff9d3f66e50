import json
from pathlib import Path
from typing import Optional

import pytest

from calib import CalibrationRepository, KeyValueStore, MemoryKeyValueStore
from configs.calibration_io import JsonFileKeyValueStore
from contracts import CalibrationProfile
from exceptions import CalibrationStoreError


class BrokenStore(KeyValueStore):
    def get(self, key: str) -> Optional[str]:
        raise CalibrationStoreError("disk unavailable", key=key)

    def put(self, key: str, value: str) -> None:
        raise CalibrationStoreError("disk unavailable", key=key)


def test_empty_store_loads_default_profile() -> None:
    profile = CalibrationRepository(MemoryKeyValueStore()).load()

    assert profile.sensor_skew == 0.0
    assert profile.calibration_quality == 70.0


def test_save_then_load_round_trip() -> None:
    repository = CalibrationRepository(MemoryKeyValueStore())
    profile = CalibrationProfile(sensor_skew=4.0, aspect_ratio_correction=1.05, calibration_date=1000.0)

    repository.save(profile)

    assert repository.load() == profile


def test_saved_value_is_versioned_envelope() -> None:
    store = MemoryKeyValueStore()
    CalibrationRepository(store, key="cam-1").save(CalibrationProfile(calibration_date=1000.0))

    data = json.loads(store.get("cam-1"))

    assert "schema_version" in data
    assert data["payload"]["calibration_date"] == 1000.0


def test_bare_payload_is_accepted() -> None:
    store = MemoryKeyValueStore({"camera-calibration": json.dumps({"sensor_skew": 2.0})})

    profile = CalibrationRepository(store).load()

    assert profile.sensor_skew == 2.0
    assert profile.fov_horizontal == 70.0


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"sensor_skew": "abc"}),
        json.dumps({"camera_tilt": [1.0]}),
    ],
)
def test_corrupt_data_falls_back_to_default(raw: str) -> None:
    store = MemoryKeyValueStore({"camera-calibration": raw})

    profile = CalibrationRepository(store).load()

    assert profile.sensor_skew == 0.0
    assert profile.camera_tilt == (0.0, 0.0)


def test_store_read_failure_falls_back_to_default() -> None:
    assert CalibrationRepository(BrokenStore()).load().sensor_skew == 0.0


def test_store_write_failure_propagates() -> None:
    with pytest.raises(CalibrationStoreError):
        CalibrationRepository(BrokenStore()).save(CalibrationProfile())


class TestJsonFileKeyValueStore:
    def test_missing_key_returns_none(self, tmp_path: Path) -> None:
        assert JsonFileKeyValueStore(tmp_path).get("absent") is None

    def test_put_get(self, tmp_path: Path) -> None:
        store = JsonFileKeyValueStore(tmp_path / "nested")

        store.put("cam-1", '{"a": 1}')

        assert store.get("cam-1") == '{"a": 1}'
        assert (tmp_path / "nested" / "cam-1.json").exists()

    def test_rejects_unsafe_key(self, tmp_path: Path) -> None:
        with pytest.raises(CalibrationStoreError) as excinfo:
            JsonFileKeyValueStore(tmp_path).put("../evil", "{}")

        assert excinfo.value.key == "../evil"

    def test_repository_round_trip(self, tmp_path: Path) -> None:
        repository = CalibrationRepository(JsonFileKeyValueStore(tmp_path))
        profile = CalibrationProfile(sensor_skew=-3.0, calibration_date=2000.0)

        repository.save(profile)

        assert CalibrationRepository(JsonFileKeyValueStore(tmp_path)).load() == profile
