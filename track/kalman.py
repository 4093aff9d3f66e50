"""Constant-velocity Kalman filter for a single 2D keypoint."""

from __future__ import annotations

from typing import Tuple

import numpy as np

SINGULAR_DET_EPS = 1e-10

# Position-only measurement; velocity is never observed
H = np.array(
    [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
    ]
)


def invert_2x2(matrix: np.ndarray) -> np.ndarray:
    """Closed-form 2x2 inverse; near-singular input returns the identity."""
    det = matrix[0, 0] * matrix[1, 1] - matrix[0, 1] * matrix[1, 0]
    if abs(det) < SINGULAR_DET_EPS:
        return np.eye(2)
    return np.array(
        [
            [matrix[1, 1], -matrix[0, 1]],
            [-matrix[1, 0], matrix[0, 0]],
        ]
    ) / det


def transition_matrix(delta_time: float) -> np.ndarray:
    return np.array(
        [
            [1.0, 0.0, delta_time, 0.0],  # x' = x + vx*dt
            [0.0, 1.0, 0.0, delta_time],  # y' = y + vy*dt
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


class KeypointKalmanFilter:
    """
    2D constant-velocity Kalman filter.
    State: [x, y, vx, vy], covariance 4x4.
    """

    def __init__(
        self,
        initial_x: float = 0.0,
        initial_y: float = 0.0,
        process_noise: float = 0.01,
        measurement_noise: float = 0.1,
    ) -> None:
        self.x = np.array([initial_x, initial_y, 0.0, 0.0], dtype=np.float64)

        # Initial covariance (high uncertainty)
        self.P = np.eye(4)

        # Process noise (random acceleration)
        self.Q = np.eye(4) * process_noise

        # Measurement noise
        self.R = np.eye(2) * measurement_noise

    def predict(self, delta_time: float = 1.0) -> np.ndarray:
        """Propagate state and covariance forward by delta_time."""
        F = transition_matrix(delta_time)
        self.x = F @ self.x
        self.P = F @ self.P @ F.T + self.Q
        return self.x[:2].copy()

    def update(self, measurement_x: float, measurement_y: float) -> np.ndarray:
        """Correct the prediction with a position measurement."""
        z = np.array([measurement_x, measurement_y], dtype=np.float64)

        # Innovation and its covariance
        y = z - H @ self.x
        S = H @ self.P @ H.T + self.R

        K = self.P @ H.T @ invert_2x2(S)

        self.x = self.x + K @ y
        self.P = (np.eye(4) - K @ H) @ self.P
        return self.x[:2].copy()

    @property
    def position(self) -> Tuple[float, float]:
        return float(self.x[0]), float(self.x[1])

    @property
    def velocity(self) -> Tuple[float, float]:
        return float(self.x[2]), float(self.x[3])

    def get_state_summary(self) -> dict:
        return {
            "position": self.x[:2].tolist(),
            "velocity": self.x[2:4].tolist(),
            "covariance_trace": float(np.trace(self.P)),
        }
