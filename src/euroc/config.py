"""Reader and synchronizer configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATASET_PATH = "data/euroc/MH_01_easy/mav0"
DATASET_ENV_VAR = "EUROC_DATASET"

# Directory names of a standard mav0 sequence
CAM0 = "cam0"
CAM1 = "cam1"
IMU0 = "imu0"
LEICA0 = "leica0"
GROUND_TRUTH = "state_groundtruth_estimate0"

DATA_DIR = "data"
DATA_CSV = "data.csv"
SENSOR_YAML = "sensor.yaml"


def default_dataset_path() -> Path:
    """Return $EUROC_DATASET if set, else the conventional MH_01_easy location."""
    return Path(os.environ.get(DATASET_ENV_VAR, DEFAULT_DATASET_PATH))


@dataclass
class ReaderConfig:
    """How stream readers treat bad rows."""

    strict: bool = True  # Raise on malformed rows instead of skipping them
    check_monotonic: bool = True  # Require strictly increasing timestamps


@dataclass
class SyncConfig:
    """Configuration for the frame synchronizer."""

    stereo_tolerance_ns: int = 1_000_000  # Max left/right timestamp offset (1 ms)
    stereo: bool = True  # Pair cam1 images with cam0
    imu: bool = True  # Attach IMU samples since the previous frame
    ground_truth: bool = True  # Attach interpolated ground truth pose
    max_frames: int | None = None  # Stop after this many frames
