import time
from dataclasses import replace

import pytest

from app import PoseSession
from calib import MemoryKeyValueStore
from configs.settings import AppConfig, CalibrationConfig
from contracts import CalibrationProfile, IssueCode, Keypoint, Pose, QualityTier, Severity
from matching import BUILTIN_TEMPLATES

MS = 1_000_000
NATURAL = BUILTIN_TEMPLATES["portrait_natural"].target_pose


class FakeClock:
    def __init__(self) -> None:
        self.now_ns = 0

    def __call__(self) -> int:
        return self.now_ns


@pytest.fixture
def session() -> PoseSession:
    return PoseSession(profile=CalibrationProfile(), clock=FakeClock())


def test_process_frame_end_to_end(session: PoseSession) -> None:
    result = session.process_frame(NATURAL, template_id="portrait_natural")

    assert result.frame_index == 0
    assert result.validation.is_valid
    assert result.validation.quality is QualityTier.EXCELLENT
    assert result.match is not None
    assert result.match.score >= 99
    assert result.match.adjustments == ()
    assert result.latency_ms >= 0.0
    assert session.process_frame(NATURAL).frame_index == 1


def test_no_template_means_no_match(session: PoseSession) -> None:
    assert session.process_frame(NATURAL).match is None


def test_unknown_template_is_not_fatal(session: PoseSession) -> None:
    result = session.process_frame(NATURAL, template_id="does-not-exist")

    assert result.match is None
    assert result.validation.is_valid


def test_raw_input_problems_are_reported(session: PoseSession) -> None:
    pose = NATURAL.with_keypoint("nose", Keypoint(float("nan"), 0.2, 1.0))

    result = session.process_frame(pose)

    assert result.smoothed.nose is None
    assert not result.validation.is_valid
    assert result.validation.issues_with_code(IssueCode.INVALID_COORDINATE)


def test_non_numeric_part_penalty_ignores_history(session: PoseSession) -> None:
    pose = NATURAL.with_keypoint("nose", Keypoint(float("nan"), 0.2, 1.0))

    cold = session.process_frame(pose)
    session.reset()
    session.process_frame(NATURAL)
    warm = session.process_frame(pose)

    assert not cold.validation.issues_with_code(IssueCode.MISSING_KEYPOINT)
    assert cold.validation.confidence == pytest.approx(0.5)
    assert warm.validation.confidence == pytest.approx(0.5)


def test_smoothed_output_in_range(session: PoseSession) -> None:
    pose = NATURAL.with_keypoint("left_wrist", Keypoint(1.3, -0.1, 1.0))

    result = session.process_frame(pose)

    assert result.smoothed.left_wrist == Keypoint(1.0, 0.0, 1.0)
    assert result.validation.issues_with_code(IssueCode.INVALID_COORDINATE)


def test_stale_calibration_is_flagged() -> None:
    profile = CalibrationProfile(calibration_date=time.time() - 60 * 24 * 60 * 60)
    session = PoseSession(profile=profile, clock=FakeClock())

    result = session.process_frame(NATURAL)

    (issue,) = result.validation.issues_with_code(IssueCode.STALE_CALIBRATION)
    assert issue.severity is Severity.INFO
    assert result.validation.is_valid


def test_correction_can_be_disabled() -> None:
    config = replace(AppConfig(), calibration=CalibrationConfig(apply_correction=False))
    session = PoseSession(config=config, profile=CalibrationProfile(sensor_skew=4.0), clock=FakeClock())

    result = session.process_frame(NATURAL)

    assert result.corrected is NATURAL


def test_skew_correction_applied() -> None:
    session = PoseSession(profile=CalibrationProfile(sensor_skew=4.0), clock=FakeClock())

    result = session.process_frame(NATURAL)

    assert result.corrected.left_shoulder != NATURAL.left_shoulder


def test_recalibrate_persists_and_resets() -> None:
    store = MemoryKeyValueStore()
    session = PoseSession.from_store(store, clock=FakeClock())
    session.process_frame(NATURAL)
    tilted = Pose(
        left_shoulder=Keypoint(0.4, 0.4, 1.0),
        right_shoulder=Keypoint(0.6, 0.42, 1.0),
    )

    profile = session.recalibrate(tilted)

    assert session.profile is profile
    assert profile.sensor_skew > 0.0
    assert session.smoother.tracked_labels() == ()
    assert store.get("camera-calibration") is not None

    reloaded = PoseSession.from_store(store, clock=FakeClock())
    assert reloaded.profile.sensor_skew == pytest.approx(profile.sensor_skew)


def test_telemetry_and_reset(session: PoseSession) -> None:
    for frame in range(3):
        session.process_frame(NATURAL, now_ns=frame * 33 * MS)

    summary = session.telemetry_summary()
    assert summary.frames == 3
    assert summary.latency.max_ms >= 0.0

    session.reset()
    assert session.telemetry_summary().frames == 0
    assert session.process_frame(NATURAL).frame_index == 0
