"""EuRoC MAV dataset utilities: stream readers, calibration and time alignment."""

__version__ = "0.1.0"

# Re-export main classes for convenient imports
from .common import Timestamp
from .config import ReaderConfig, SyncConfig, default_dataset_path
from .dataset import DatasetManifest, EuRoC, StreamInfo
from .dataset_reader import DatasetReader
from .errors import CalibrationError, EurocError, RecordParseError
from .io import (
    CameraCalibration,
    CameraData,
    CameraIntrinsics,
    GroundTruthData,
    GroundTruthRecord,
    ImageRecord,
    ImuCalibration,
    ImuData,
    ImuRecord,
    PositionData,
    PositionRecord,
    SensorCalibration,
    SensorData,
    StereoRig,
    Trajectory,
)
from .pose import SE3
from .sync import (
    SyncFrame,
    Synchronizer,
    TimeIndex,
    imu_intervals,
    match_nearest,
    merge_streams,
    stereo_pairs,
)

__all__ = [
    "__version__",
    # Dataset
    "EuRoC",
    "DatasetManifest",
    "StreamInfo",
    "DatasetReader",
    "Timestamp",
    # Configuration
    "ReaderConfig",
    "SyncConfig",
    "default_dataset_path",
    # Errors
    "EurocError",
    "RecordParseError",
    "CalibrationError",
    # Stream readers
    "SensorData",
    "SensorCalibration",
    "CameraData",
    "CameraCalibration",
    "CameraIntrinsics",
    "ImageRecord",
    "StereoRig",
    "ImuData",
    "ImuCalibration",
    "ImuRecord",
    "PositionData",
    "PositionRecord",
    "GroundTruthData",
    "GroundTruthRecord",
    "Trajectory",
    # Pose
    "SE3",
    # Synchronization
    "Synchronizer",
    "SyncFrame",
    "TimeIndex",
    "merge_streams",
    "match_nearest",
    "stereo_pairs",
    "imu_intervals",
]
