import numpy as np
import pytest

from track.kalman import KeypointKalmanFilter, invert_2x2, transition_matrix


def test_invert_singular_returns_identity() -> None:
    np.testing.assert_array_equal(invert_2x2(np.zeros((2, 2))), np.eye(2))
    np.testing.assert_array_equal(invert_2x2(np.array([[1.0, 2.0], [2.0, 4.0]])), np.eye(2))


def test_invert_regular_matrix() -> None:
    inverse = invert_2x2(np.array([[2.0, 0.0], [0.0, 4.0]]))

    np.testing.assert_allclose(inverse, [[0.5, 0.0], [0.0, 0.25]])


def test_transition_matrix_uses_delta_time() -> None:
    F = transition_matrix(2.0)

    assert F[0, 2] == 2.0
    assert F[1, 3] == 2.0
    assert F[2, 2] == 1.0


def test_filter_seeded_at_first_observation() -> None:
    kf = KeypointKalmanFilter(initial_x=0.3, initial_y=0.7)

    assert kf.position == (0.3, 0.7)
    assert kf.velocity == (0.0, 0.0)


def test_converges_to_static_measurement() -> None:
    kf = KeypointKalmanFilter(initial_x=0.5, initial_y=0.5)

    for _ in range(60):
        kf.predict(1.0)
        kf.update(0.3, 0.7)

    x, y = kf.position
    assert x == pytest.approx(0.3, abs=1e-3)
    assert y == pytest.approx(0.7, abs=1e-3)


def test_tracks_constant_velocity() -> None:
    kf = KeypointKalmanFilter(initial_x=0.1, initial_y=0.5)

    for step in range(1, 80):
        kf.predict(1.0)
        kf.update(0.1 + 0.005 * step, 0.5)

    vx, vy = kf.velocity
    assert vx == pytest.approx(0.005, abs=1e-3)
    assert vy == pytest.approx(0.0, abs=1e-3)


def test_covariance_stays_symmetric() -> None:
    kf = KeypointKalmanFilter()

    for value in (0.1, 0.2, 0.15, 0.3):
        kf.predict(0.5)
        kf.update(value, value)

    np.testing.assert_allclose(kf.P, kf.P.T, atol=1e-12)


def test_state_summary() -> None:
    summary = KeypointKalmanFilter(0.2, 0.4).get_state_summary()

    assert summary["position"] == [0.2, 0.4]
    assert summary["velocity"] == [0.0, 0.0]
    assert summary["covariance_trace"] == pytest.approx(4.0)
