import pytest

from contracts import Keypoint, KeypointLabel, Pose
from track import calculate_pose_stability


def test_short_history_is_stable() -> None:
    assert calculate_pose_stability([]) == (1.0, {})
    assert calculate_pose_stability([Pose(nose=Keypoint(0.5, 0.5, 1.0))]) == (1.0, {})


def test_still_pose_scores_one() -> None:
    pose = Pose(nose=Keypoint(0.5, 0.2, 1.0), left_hip=Keypoint(0.4, 0.7, 1.0))

    overall, by_label = calculate_pose_stability([pose, pose, pose])

    assert overall == pytest.approx(1.0)
    assert by_label[KeypointLabel.NOSE] == pytest.approx(1.0)


def test_moving_keypoint_lowers_stability() -> None:
    history = [Pose(nose=Keypoint(0.4, 0.5, 1.0)), Pose(nose=Keypoint(0.6, 0.5, 1.0))]

    overall, by_label = calculate_pose_stability(history)

    assert by_label[KeypointLabel.NOSE] == pytest.approx(0.9)
    assert overall == pytest.approx(0.9)


def test_no_label_seen_twice() -> None:
    history = [Pose(nose=Keypoint(0.5, 0.5, 1.0)), Pose(left_hip=Keypoint(0.4, 0.7, 1.0))]

    assert calculate_pose_stability(history) == (0.0, {})
