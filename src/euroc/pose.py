"""Rigid body poses and quaternion helpers for EuRoC frames.

EuRoC stores quaternions as (w, x, y, z); scipy's Rotation uses
(x, y, z, w). Conversions between the two happen only in this module.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation, Slerp


def quaternion_to_rotation(q: np.ndarray) -> np.ndarray:
    """Convert a Hamilton quaternion (w, x, y, z) to a 3x3 rotation matrix.

    The quaternion is normalized first, so ground truth rows with rounding
    error in the last digit still produce an orthonormal matrix.
    """
    q = np.asarray(q, dtype=np.float64).flatten()
    norm = np.linalg.norm(q)
    if q.shape != (4,) or norm == 0.0:
        raise ValueError(f"Expected a non-zero (4,) quaternion, got {q}")
    qw, qx, qy, qz = q / norm

    return np.array(
        [
            [1 - 2 * (qy * qy + qz * qz), 2 * (qx * qy - qz * qw), 2 * (qx * qz + qy * qw)],
            [2 * (qx * qy + qz * qw), 1 - 2 * (qx * qx + qz * qz), 2 * (qy * qz - qx * qw)],
            [2 * (qx * qz - qy * qw), 2 * (qy * qz + qx * qw), 1 - 2 * (qx * qx + qy * qy)],
        ],
        dtype=np.float64,
    )


def _from_wxyz(q: np.ndarray) -> Rotation:
    qw, qx, qy, qz = np.asarray(q, dtype=np.float64).flatten()
    return Rotation.from_quat([qx, qy, qz, qw])


def _to_wxyz(rotation: Rotation) -> np.ndarray:
    qx, qy, qz, qw = rotation.as_quat()
    q = np.array([qw, qx, qy, qz], dtype=np.float64)
    return q if qw >= 0.0 else -q


def rotation_to_quaternion(R: np.ndarray) -> np.ndarray:
    """Convert a 3x3 rotation matrix to a unit quaternion (w, x, y, z) with w >= 0."""
    return _to_wxyz(Rotation.from_matrix(np.asarray(R, dtype=np.float64)))


def slerp(q0: np.ndarray, q1: np.ndarray, alpha: float) -> np.ndarray:
    """Spherical linear interpolation between two unit quaternions (w, x, y, z).

    Args:
        q0: Quaternion at alpha = 0
        q1: Quaternion at alpha = 1
        alpha: Interpolation factor in [0, 1]

    Returns:
        Unit quaternion along the shortest arc, with w >= 0
    """
    key_rotations = Rotation.concatenate([_from_wxyz(q0), _from_wxyz(q1)])
    return _to_wxyz(Slerp([0.0, 1.0], key_rotations)([alpha])[0])


@dataclass
class SE3:
    """Rigid body transformation T_A_B (maps points from frame B into frame A).

        p_A = R @ p_B + t

    EuRoC conventions: ground truth rows give T_W_B (body in world) and
    every sensor.yaml gives T_BS (sensor in body).

    Attributes:
        rotation: 3x3 orthonormal rotation matrix
        translation: (3,) translation vector
    """

    rotation: np.ndarray  # 3x3 rotation matrix
    translation: np.ndarray  # (3,) translation vector

    def __post_init__(self) -> None:
        self.rotation = np.asarray(self.rotation, dtype=np.float64)
        self.translation = np.asarray(self.translation, dtype=np.float64).flatten()

        if self.rotation.shape != (3, 3):
            raise ValueError(f"Rotation must be 3x3, got {self.rotation.shape}")
        if self.translation.shape != (3,):
            raise ValueError(f"Translation must be (3,), got {self.translation.shape}")

    @classmethod
    def identity(cls) -> SE3:
        return cls(rotation=np.eye(3), translation=np.zeros(3))

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> SE3:
        """Create SE3 from a 4x4 homogeneous matrix [[R, t], [0, 1]]."""
        T = np.asarray(T, dtype=np.float64)
        if T.shape != (4, 4):
            raise ValueError(f"Transform must be 4x4, got {T.shape}")
        return cls(rotation=T[:3, :3], translation=T[:3, 3])

    @classmethod
    def from_quaternion(cls, quaternion: np.ndarray, translation: np.ndarray) -> SE3:
        """Create SE3 from a Hamilton (w, x, y, z) quaternion and a translation."""
        return cls(rotation=quaternion_to_rotation(quaternion), translation=translation)

    def to_matrix(self) -> np.ndarray:
        T = np.eye(4, dtype=np.float64)
        T[:3, :3] = self.rotation
        T[:3, 3] = self.translation
        return T

    def to_quaternion(self) -> np.ndarray:
        """Return the rotation as a unit (w, x, y, z) quaternion."""
        return rotation_to_quaternion(self.rotation)

    def inverse(self) -> SE3:
        """Return T^{-1} = [R^T, -R^T @ t]."""
        R_inv = self.rotation.T
        return SE3(rotation=R_inv, translation=-R_inv @ self.translation)

    def compose(self, other: SE3) -> SE3:
        """Return self @ other, e.g. T_W_B.compose(T_B_S) gives T_W_S."""
        return SE3(
            rotation=self.rotation @ other.rotation,
            translation=self.rotation @ other.translation + self.translation,
        )

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """Map an Nx3 (or single (3,)) array of points through the transform."""
        points = np.asarray(points, dtype=np.float64)
        if points.ndim == 1:
            points = points.reshape(1, 3)
        if points.shape[1] != 3:
            raise ValueError(f"Points must be Nx3, got {points.shape}")
        return (self.rotation @ points.T).T + self.translation

    def interpolate(self, other: SE3, alpha: float) -> SE3:
        """Interpolate towards ``other``: linear translation, slerp rotation.

        Args:
            other: Pose at alpha = 1
            alpha: Interpolation factor in [0, 1]
        """
        key_rotations = Rotation.from_matrix(np.stack([self.rotation, other.rotation]))
        rotation = Slerp([0.0, 1.0], key_rotations)([alpha])[0]
        t = (1.0 - alpha) * self.translation + alpha * other.translation
        return SE3(rotation=rotation.as_matrix(), translation=t)

    @property
    def position(self) -> np.ndarray:
        return self.translation.copy()

    def allclose(self, other: SE3, atol: float = 1e-9) -> bool:
        """Return True if both rotation and translation match within ``atol``."""
        return bool(
            np.allclose(self.rotation, other.rotation, atol=atol)
            and np.allclose(self.translation, other.translation, atol=atol)
        )

    def __repr__(self) -> str:
        pos = self.translation
        return f"SE3(position=[{pos[0]:.3f}, {pos[1]:.3f}, {pos[2]:.3f}])"

    def __matmul__(self, other: SE3) -> SE3:
        return self.compose(other)
