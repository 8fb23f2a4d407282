"""EuRoC ground truth (state_groundtruth_estimate0) and trajectory interpolation.

The ground truth gives body (IMU) frame states at ~200Hz. Cameras run at
~20Hz, so consumers usually query poses at image timestamps through
``Trajectory.pose_at``.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from ..common import Timestamp
from ..pose import SE3
from .sensor import SensorData, parse_timestamp, parse_vector


@dataclass(frozen=True, eq=False)
class GroundTruthRecord:
    """One estimated body state.

    Attributes:
        timestamp: State time in nanoseconds
        position: p_RS_R, body position in world (m)
        quaternion: q_RS as Hamilton (w, x, y, z)
        velocity: v_RS_R, linear velocity in world (m/s)
        gyro_bias: b_w_RS_S, gyroscope bias (rad/s)
        accel_bias: b_a_RS_S, accelerometer bias (m/s^2)
    """

    timestamp: Timestamp
    position: np.ndarray
    quaternion: np.ndarray
    velocity: np.ndarray
    gyro_bias: np.ndarray
    accel_bias: np.ndarray

    @property
    def pose(self) -> SE3:
        """Body pose in world, T_W_B."""
        return SE3.from_quaternion(self.quaternion, self.position)


class GroundTruthData(SensorData[GroundTruthRecord]):
    """Reader for state_groundtruth_estimate0.

    CSV format:
        #timestamp, p_RS_R_x, p_RS_R_y, p_RS_R_z, q_RS_w, q_RS_x, q_RS_y, q_RS_z,
         v_RS_R_x, v_RS_R_y, v_RS_R_z, b_w_RS_S_x, b_w_RS_S_y, b_w_RS_S_z,
         b_a_RS_S_x, b_a_RS_S_y, b_a_RS_S_z
    """

    kind = "ground_truth"
    num_columns = 17

    def _parse_row(self, fields: list[str]) -> GroundTruthRecord:
        return GroundTruthRecord(
            timestamp=parse_timestamp(fields[0]),
            position=parse_vector(fields, 1),
            quaternion=np.array([float(v) for v in fields[4:8]], dtype=np.float64),
            velocity=parse_vector(fields, 8),
            gyro_bias=parse_vector(fields, 11),
            accel_bias=parse_vector(fields, 14),
        )

    def trajectory(self) -> Trajectory:
        """Load every ground truth pose into an interpolating Trajectory."""
        return Trajectory.from_records(self.records())


class Trajectory:
    """Time-indexed sequence of poses with interpolated lookup.

    Between two samples the translation is interpolated linearly and the
    rotation by quaternion slerp. Queries outside [start, end] return None.
    """

    def __init__(self, timestamps: Iterable[int], poses: Iterable[SE3]) -> None:
        self._timestamps = [Timestamp(t) for t in timestamps]
        self._poses = list(poses)

        if len(self._timestamps) != len(self._poses):
            raise ValueError(
                f"Got {len(self._timestamps)} timestamps for {len(self._poses)} poses"
            )
        if any(b <= a for a, b in zip(self._timestamps, self._timestamps[1:])):
            raise ValueError("Trajectory timestamps must be strictly increasing")

    @classmethod
    def from_records(cls, records: Iterable[GroundTruthRecord]) -> Trajectory:
        """Build a trajectory from ground truth records.

        Args:
            records: Records in file order, e.g. ``GroundTruthData.records()``

        Returns:
            Trajectory of body poses T_W_B
        """
        timestamps: list[int] = []
        poses: list[SE3] = []
        for record in records:
            timestamps.append(record.timestamp)
            poses.append(record.pose)
        return cls(timestamps, poses)

    def pose_at(self, timestamp_ns: int) -> SE3 | None:
        """Return the pose at ``timestamp_ns``.

        Args:
            timestamp_ns: Query timestamp in nanoseconds

        Returns:
            Stored pose on an exact match, interpolated pose inside the
            covered range, None outside it
        """
        if not self._timestamps:
            return None
        if timestamp_ns < self._timestamps[0] or timestamp_ns > self._timestamps[-1]:
            return None

        idx = bisect.bisect_left(self._timestamps, timestamp_ns)
        if self._timestamps[idx] == timestamp_ns:
            return self._poses[idx]

        t0 = self._timestamps[idx - 1]
        t1 = self._timestamps[idx]
        alpha = (timestamp_ns - t0) / (t1 - t0)
        return self._poses[idx - 1].interpolate(self._poses[idx], alpha)

    def position_at(self, timestamp_ns: int) -> np.ndarray | None:
        """Return the body position at ``timestamp_ns``, None outside the covered range."""
        pose = self.pose_at(timestamp_ns)
        if pose is None:
            return None
        return pose.position

    def in_frame(self, T_BS: SE3) -> Trajectory:
        """Re-express body poses in a sensor frame: T_W_S = T_W_B @ T_B_S.

        Example:
            camera_traj = dataset.ground_truth().trajectory().in_frame(
                dataset.left_camera().body_to_sensor()
            )
        """
        return Trajectory(self._timestamps, [pose @ T_BS for pose in self._poses])

    def relative_to_first(self) -> Trajectory:
        """Return the trajectory with its first pose moved to the identity."""
        if not self._poses:
            return self
        first_inv = self._poses[0].inverse()
        return Trajectory(self._timestamps, [first_inv @ pose for pose in self._poses])

    @property
    def timestamps(self) -> list[Timestamp]:
        return list(self._timestamps)

    @property
    def poses(self) -> list[SE3]:
        return list(self._poses)

    @property
    def start_timestamp(self) -> Timestamp | None:
        """First pose timestamp in nanoseconds."""
        return self._timestamps[0] if self._timestamps else None

    @property
    def end_timestamp(self) -> Timestamp | None:
        """Last pose timestamp in nanoseconds."""
        return self._timestamps[-1] if self._timestamps else None

    def positions(self) -> np.ndarray:
        """Return all positions as an Nx3 array."""
        if not self._poses:
            return np.empty((0, 3), dtype=np.float64)
        return np.stack([pose.translation for pose in self._poses])

    def __len__(self) -> int:
        return len(self._poses)
