"""EuRoC IMU stream (imu0) and its noise calibration."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..common import Timestamp, parse_transform, require
from .sensor import SensorData, parse_timestamp, parse_vector


@dataclass(frozen=True, eq=False)
class ImuRecord:
    """Single IMU sample.

    Attributes:
        timestamp: Sample time in nanoseconds
        gyro: Angular velocity (wx, wy, wz) in rad/s
        accel: Linear acceleration (ax, ay, az) in m/s²
    """

    timestamp: Timestamp
    gyro: np.ndarray  # (3,) rad/s
    accel: np.ndarray  # (3,) m/s²


@dataclass(frozen=True, eq=False)
class ImuCalibration:
    """IMU noise parameters from imu0/sensor.yaml.

    Attributes:
        gyro_noise_density: Gyroscope white noise (rad/s/√Hz)
        gyro_random_walk: Gyroscope bias random walk (rad/s²/√Hz)
        accel_noise_density: Accelerometer white noise (m/s²/√Hz)
        accel_random_walk: Accelerometer bias random walk (m/s³/√Hz)
        rate_hz: Sampling rate in Hz
        T_BS: 4x4 IMU-to-body transform (identity for EuRoC)
    """

    gyro_noise_density: float
    gyro_random_walk: float
    accel_noise_density: float
    accel_random_walk: float
    rate_hz: float
    T_BS: np.ndarray


class ImuData(SensorData[ImuRecord]):
    """Reader for imu0.

    CSV format:
        #timestamp [ns],w_RS_S_x [rad s^-1],w_RS_S_y,w_RS_S_z,a_RS_S_x [m s^-2],a_RS_S_y,a_RS_S_z
    """

    kind = "imu"
    num_columns = 7

    def calibration(self) -> ImuCalibration:
        """Parse the IMU sensor.yaml noise model and extrinsics.

        Raises:
            CalibrationError: If a noise density or random walk is missing
        """
        data = self.sensor_yaml()
        source = self.yaml_path
        return ImuCalibration(
            gyro_noise_density=float(require(data, "gyroscope_noise_density", source)),
            gyro_random_walk=float(require(data, "gyroscope_random_walk", source)),
            accel_noise_density=float(require(data, "accelerometer_noise_density", source)),
            accel_random_walk=float(require(data, "accelerometer_random_walk", source)),
            rate_hz=float(data.get("rate_hz", 200.0)),
            T_BS=parse_transform(data, source),
        )

    def gyro_noise_density(self) -> float:
        """Return gyroscope "white noise" (rad/s/√Hz)."""
        return self.calibration().gyro_noise_density

    def gyro_random_walk(self) -> float:
        """Return gyroscope "random walk" (rad/s²/√Hz)."""
        return self.calibration().gyro_random_walk

    def accel_noise_density(self) -> float:
        """Return accelerometer "white noise" (m/s²/√Hz)."""
        return self.calibration().accel_noise_density

    def accel_random_walk(self) -> float:
        """Return accelerometer "random walk" (m/s³/√Hz)."""
        return self.calibration().accel_random_walk

    def rate_hz(self) -> float:
        """Return the nominal IMU sampling rate in Hz (200 for EuRoC)."""
        return self.calibration().rate_hz

    def _parse_row(self, fields: list[str]) -> ImuRecord:
        return ImuRecord(
            timestamp=parse_timestamp(fields[0]),
            gyro=parse_vector(fields, 1),
            accel=parse_vector(fields, 4),
        )
