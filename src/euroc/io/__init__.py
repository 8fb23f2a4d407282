"""Stream readers for the sensor directories of a mav0 sequence."""

from .camera import CameraCalibration, CameraData, CameraIntrinsics, ImageRecord, StereoRig
from .ground_truth import GroundTruthData, GroundTruthRecord, Trajectory
from .imu import ImuCalibration, ImuData, ImuRecord
from .position import PositionData, PositionRecord
from .sensor import SensorCalibration, SensorData

__all__ = [
    "SensorData",
    "SensorCalibration",
    # Cameras
    "CameraData",
    "CameraCalibration",
    "CameraIntrinsics",
    "ImageRecord",
    "StereoRig",
    # IMU
    "ImuData",
    "ImuCalibration",
    "ImuRecord",
    # Leica
    "PositionData",
    "PositionRecord",
    # Ground truth
    "GroundTruthData",
    "GroundTruthRecord",
    "Trajectory",
]
